"""tick-brain - Utility AI for the tick engine: scorers, pickers, thinkers."""
from __future__ import annotations

from tick_brain.actions import ActionBuilder, ActionTemplate, ComponentAction
from tick_brain.commands import Commands
from tick_brain.components import ActionState, ActionStatus, Actor, HasThinker, Score
from tick_brain.config import BrainConfig
from tick_brain.clock import Clock
from tick_brain.engine import Engine, Stage
from tick_brain.evaluators import (
    Evaluator,
    FnEvaluator,
    LinearEvaluator,
    PowerEvaluator,
    SigmoidEvaluator,
)
from tick_brain.measures import (
    ChebyshevDistance,
    Measure,
    WeightedMeasure,
    WeightedProduct,
    WeightedSum,
)
from tick_brain.pickers import Choice, FirstToScore, Highest, Picker
from tick_brain.plugin import BrainPlugin
from tick_brain.scorers import (
    AllOrNothing,
    ComponentScorer,
    EvaluatingScorer,
    FixedScorer,
    IdleScorer,
    MeasuredScorer,
    ProductOfScorers,
    ScorerBuilder,
    SumOfScorers,
    WinningScorer,
)
from tick_brain.sequence import Sequence, SequenceMode
from tick_brain.thinker import Thinker, ThinkerBuilder
from tick_brain.types import DeadEntityError, EntityId, ScoreRangeError, TickContext
from tick_brain.world import World

__all__ = [
    "ActionBuilder",
    "ActionState",
    "ActionStatus",
    "ActionTemplate",
    "Actor",
    "AllOrNothing",
    "BrainConfig",
    "BrainPlugin",
    "ChebyshevDistance",
    "Choice",
    "Clock",
    "Commands",
    "ComponentAction",
    "ComponentScorer",
    "DeadEntityError",
    "Engine",
    "EntityId",
    "EvaluatingScorer",
    "Evaluator",
    "FirstToScore",
    "FixedScorer",
    "FnEvaluator",
    "HasThinker",
    "Highest",
    "IdleScorer",
    "LinearEvaluator",
    "Measure",
    "MeasuredScorer",
    "Picker",
    "PowerEvaluator",
    "ProductOfScorers",
    "Score",
    "ScoreRangeError",
    "ScorerBuilder",
    "Sequence",
    "SequenceMode",
    "SigmoidEvaluator",
    "Stage",
    "SumOfScorers",
    "Thinker",
    "ThinkerBuilder",
    "TickContext",
    "WeightedMeasure",
    "WeightedProduct",
    "WeightedSum",
    "WinningScorer",
    "World",
]
