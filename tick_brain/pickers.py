"""Pickers decide which Choice wins given the current scores."""
from __future__ import annotations

import abc
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Sequence

if TYPE_CHECKING:
    from tick_brain.actions import ActionTemplate
    from tick_brain.types import EntityId

ScoreLookup = Callable[["EntityId"], float]


@dataclass(frozen=True)
class Choice:
    """A score node paired with the action template it unlocks."""

    scorer: EntityId
    action: ActionTemplate

    def score(self, scores: ScoreLookup) -> float:
        return scores(self.scorer)


class Picker(abc.ABC):
    """Arbitration policy. Returns the winning Choice or None."""

    @abc.abstractmethod
    def pick(self, choices: Sequence[Choice], scores: ScoreLookup) -> Choice | None:
        ...


@dataclass(frozen=True)
class FirstToScore(Picker):
    """First choice, in order, whose score is at or above ``threshold``."""

    threshold: float

    def pick(self, choices: Sequence[Choice], scores: ScoreLookup) -> Choice | None:
        for choice in choices:
            if choice.score(scores) >= self.threshold:
                return choice
        return None


@dataclass(frozen=True)
class Highest(Picker):
    """Choice with the greatest non-zero score above ``threshold``.

    Ties go to the earliest choice.
    """

    threshold: float = 0.0

    def pick(self, choices: Sequence[Choice], scores: ScoreLookup) -> Choice | None:
        best: Choice | None = None
        best_score = self.threshold
        for choice in choices:
            score = choice.score(scores)
            if score > best_score and score > 0.0:
                best = choice
                best_score = score
        return best
