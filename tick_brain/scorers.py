"""Score nodes: builders, built-in leaf scorers and composite scorers.

Leaf scorers are plain components; a system you write reads the world and
calls ``Score.set`` on every node carrying your component. Composite
scorers read the scores of their children and are evaluated bottom-up by
``make_composite_scorer_system``.
"""
from __future__ import annotations

import abc
import copy
import logging
import math
import sys
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Sequence

from tick_brain.components import Actor, Score
from tick_brain.evaluators import Evaluator
from tick_brain.hierarchy import depth_of
from tick_brain.measures import Measure, WeightedMeasure

if TYPE_CHECKING:
    from tick_brain.commands import Commands
    from tick_brain.types import EntityId, TickContext
    from tick_brain.world import World

logger = logging.getLogger(__name__)


def _clamp(x: float) -> float:
    return max(0.0, min(1.0, x))


# --- Builders ---


class ScorerBuilder(abc.ABC):
    """Template that spawns a fresh score node (and its subtree)."""

    @abc.abstractmethod
    def spawn(self, cmd: Commands, actor: EntityId) -> EntityId:
        ...


class ComponentScorer(ScorerBuilder):
    """Spawns a leaf score node carrying a copy of ``component``."""

    def __init__(self, component: Any) -> None:
        self.component = component

    def spawn(self, cmd: Commands, actor: EntityId) -> EntityId:
        return cmd.spawn(Actor(actor), Score(), copy.copy(self.component))

    def __repr__(self) -> str:
        return f"ComponentScorer({self.component!r})"


def as_scorer_builder(scorer: Any) -> ScorerBuilder:
    """Accept either a ScorerBuilder or a bare leaf component."""
    if isinstance(scorer, ScorerBuilder):
        return scorer
    return ComponentScorer(scorer)


class CompositeScorerBuilder(ScorerBuilder):
    """Spawns a composite node whose children are spawned from ``scorers``.

    Child order is kept; MeasuredScorer weights rely on it.
    """

    def __init__(
        self,
        make: Callable[[list[EntityId]], CompositeScorer],
        scorers: Sequence[Any] = (),
    ) -> None:
        self._make = make
        self.scorers: list[ScorerBuilder] = [as_scorer_builder(s) for s in scorers]

    def push(self, scorer: Any) -> CompositeScorerBuilder:
        self.scorers.append(as_scorer_builder(scorer))
        return self

    def spawn(self, cmd: Commands, actor: EntityId) -> EntityId:
        children = [scorer.spawn(cmd, actor) for scorer in self.scorers]
        composite = self._make(children)
        node = cmd.spawn(Actor(actor), Score(), composite)
        for child in children:
            cmd.add_child(node, child)
        logger.debug(
            "spawning %s scorer %s with %d children",
            type(composite).__name__, node, len(children),
        )
        return node


# --- Leaf scorers ---


@dataclass
class FixedScorer:
    """Leaf scorer that always reports ``value``."""

    value: float


@dataclass
class IdleScorer:
    """Leaf scorer that reports the smallest positive score."""


IDLE_SCORE = sys.float_info.min


def make_fixed_scorer_system() -> Callable[[World, TickContext], None]:
    """Return a system that writes FixedScorer and IdleScorer values."""

    def fixed_scorer_system(world: World, ctx: TickContext) -> None:
        for _, (score, fixed) in world.query(Score, FixedScorer):
            score.set(fixed.value)
        for _, (score, _idle) in world.query(Score, IdleScorer):
            score.set(IDLE_SCORE)

    return fixed_scorer_system


# --- Composite scorers ---


class CompositeScorer(abc.ABC):
    """Base for components that derive a score from child scores."""

    scorers: list[EntityId]

    @abc.abstractmethod
    def combine(self, values: list[float]) -> float:
        """Combine child scores (in child order) into an unclamped value."""


@dataclass
class AllOrNothing(CompositeScorer):
    """Sum of the children if every child is at or above ``threshold``."""

    threshold: float
    scorers: list[EntityId] = field(default_factory=list)

    @staticmethod
    def build(threshold: float, *scorers: Any) -> CompositeScorerBuilder:
        return CompositeScorerBuilder(
            lambda children: AllOrNothing(threshold, children), scorers
        )

    def combine(self, values: list[float]) -> float:
        if any(v < self.threshold for v in values):
            return 0.0
        return sum(values)


@dataclass
class SumOfScorers(CompositeScorer):
    """Sum of the children if the total is at or above ``threshold``."""

    threshold: float
    scorers: list[EntityId] = field(default_factory=list)

    @staticmethod
    def build(threshold: float, *scorers: Any) -> CompositeScorerBuilder:
        return CompositeScorerBuilder(
            lambda children: SumOfScorers(threshold, children), scorers
        )

    def combine(self, values: list[float]) -> float:
        total = sum(values)
        return total if total >= self.threshold else 0.0


@dataclass
class ProductOfScorers(CompositeScorer):
    """Product of the children, zeroed below ``threshold``.

    With ``use_compensation`` the product is raised to offset the shrinkage
    that comes from multiplying many sub-1.0 factors (the "Building a
    Better Centaur" makeup value).
    """

    threshold: float
    scorers: list[EntityId] = field(default_factory=list)
    use_compensation: bool = False

    @staticmethod
    def build(
        threshold: float, *scorers: Any, use_compensation: bool = False
    ) -> CompositeScorerBuilder:
        return CompositeScorerBuilder(
            lambda children: ProductOfScorers(threshold, children, use_compensation),
            scorers,
        )

    def combine(self, values: list[float]) -> float:
        if not values:
            return 0.0
        product = math.prod(values)
        if self.use_compensation and product < 1.0:
            mod_factor = 1.0 - 1.0 / len(values)
            makeup = (1.0 - product) * mod_factor
            product += makeup * product
        return product if product >= self.threshold else 0.0


@dataclass
class WinningScorer(CompositeScorer):
    """Highest child score if it reaches ``threshold``, else 0."""

    threshold: float
    scorers: list[EntityId] = field(default_factory=list)

    @staticmethod
    def build(threshold: float, *scorers: Any) -> CompositeScorerBuilder:
        return CompositeScorerBuilder(
            lambda children: WinningScorer(threshold, children), scorers
        )

    def combine(self, values: list[float]) -> float:
        best = max(values, default=0.0)
        return best if best >= self.threshold else 0.0


@dataclass
class EvaluatingScorer(CompositeScorer):
    """Runs its single child's score through an Evaluator."""

    evaluator: Evaluator
    scorers: list[EntityId] = field(default_factory=list)

    @staticmethod
    def build(scorer: Any, evaluator: Evaluator) -> CompositeScorerBuilder:
        return _SingleChildBuilder(
            lambda children: EvaluatingScorer(evaluator, children), (scorer,)
        )

    def combine(self, values: list[float]) -> float:
        (inner,) = values
        return self.evaluator.evaluate(inner)


class _SingleChildBuilder(CompositeScorerBuilder):
    def push(self, scorer: Any) -> CompositeScorerBuilder:
        raise ValueError("EvaluatingScorer takes exactly one child scorer")


@dataclass
class MeasuredScorer(CompositeScorer):
    """Combines weighted children through a Measure.

    ``weights[i]`` belongs to ``scorers[i]``. Results under ``threshold``
    become 0.
    """

    threshold: float
    measure: Measure = field(default_factory=WeightedMeasure)
    scorers: list[EntityId] = field(default_factory=list)
    weights: list[float] = field(default_factory=list)

    @staticmethod
    def build(threshold: float, measure: Measure | None = None) -> MeasuredScorerBuilder:
        return MeasuredScorerBuilder(threshold, measure or WeightedMeasure())

    def combine(self, values: list[float]) -> float:
        measured = self.measure.calculate(list(zip(values, self.weights)))
        return measured if measured >= self.threshold else 0.0


class MeasuredScorerBuilder(CompositeScorerBuilder):
    def __init__(self, threshold: float, measure: Measure) -> None:
        self.threshold = threshold
        self.measure = measure
        self.weights: list[float] = []
        super().__init__(
            lambda children: MeasuredScorer(
                self.threshold, self.measure, children, list(self.weights)
            )
        )

    def push(self, scorer: Any, weight: float = 1.0) -> MeasuredScorerBuilder:  # type: ignore[override]
        self.scorers.append(as_scorer_builder(scorer))
        self.weights.append(weight)
        return self

    def with_measure(self, measure: Measure) -> MeasuredScorerBuilder:
        self.measure = measure
        return self


COMPOSITE_SCORERS: tuple[type[CompositeScorer], ...] = (
    AllOrNothing,
    SumOfScorers,
    ProductOfScorers,
    WinningScorer,
    EvaluatingScorer,
    MeasuredScorer,
)


def make_composite_scorer_system(
    kinds: Sequence[type[CompositeScorer]] = COMPOSITE_SCORERS,
) -> Callable[[World, TickContext], None]:
    """Return a system that evaluates every composite score node.

    Nodes are processed deepest first so each composite reads child scores
    written earlier in the same pass. A child without a Score is a broken
    tree and raises.
    """

    def composite_scorer_system(world: World, ctx: TickContext) -> None:
        pending: list[tuple[int, EntityId, Score, CompositeScorer]] = []
        for kind in kinds:
            for eid, (score, node) in world.query(Score, kind):
                pending.append((depth_of(world, eid), eid, score, node))
        pending.sort(key=lambda item: item[0], reverse=True)

        for _, _, score, node in pending:
            values = [world.get(child, Score).get() for child in node.scorers]
            score.set(_clamp(node.combine(values)))

    return composite_scorer_system
