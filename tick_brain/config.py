"""Brain configuration dataclass."""
from __future__ import annotations

from dataclasses import dataclass

from tick_brain.engine import Stage


@dataclass(frozen=True)
class BrainConfig:
    """Immutable configuration for the built-in brain systems.

    Attributes:
        scorer_stage: Stage for the fixed/idle leaf scorers. Your own leaf
            scorers belong here too.
        composite_stage: Stage for composite scorers. Must not run before
            ``scorer_stage``.
        thinker_stage: Stage for thinker attach/detach, cleanup and
            reconciliation. Must not run before ``composite_stage``.
        sequence_stage: Stage for Join/Race/Step nodes. Leaf action systems
            usually go in the stage right before it.
        cleanup_orphans: Despawn nodes whose actor no longer exists.
    """

    scorer_stage: Stage = Stage.SCORERS
    composite_stage: Stage = Stage.COMPOSITES
    thinker_stage: Stage = Stage.THINKERS
    sequence_stage: Stage = Stage.SEQUENCES
    cleanup_orphans: bool = True

    def __post_init__(self) -> None:
        if not self.scorer_stage <= self.composite_stage <= self.thinker_stage:
            raise ValueError(
                "Stages must satisfy scorer_stage <= composite_stage <= thinker_stage"
            )
