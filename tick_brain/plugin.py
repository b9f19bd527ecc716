"""BrainPlugin - registers the built-in brain systems on an engine."""
from __future__ import annotations

from typing import TYPE_CHECKING

from tick_brain.config import BrainConfig
from tick_brain.scorers import make_composite_scorer_system, make_fixed_scorer_system
from tick_brain.sequence import make_sequence_system
from tick_brain.thinker import (
    DoneCallback,
    PickCallback,
    make_actor_cleanup_system,
    make_thinker_attach_system,
    make_thinker_detach_system,
    make_thinker_system,
)

if TYPE_CHECKING:
    from tick_brain.engine import Engine


class BrainPlugin:
    """Wires scorers, thinkers and sequences into an Engine.

    Per tick: leaf scorers, then composites (bottom-up), then thinker
    attach/detach, orphan cleanup and reconciliation, then your actions,
    then sequences.
    """

    def __init__(
        self,
        config: BrainConfig | None = None,
        on_pick: PickCallback | None = None,
        on_done: DoneCallback | None = None,
    ) -> None:
        self.config = config or BrainConfig()
        self._on_pick = on_pick
        self._on_done = on_done

    def install(self, engine: Engine) -> None:
        cfg = self.config
        engine.add_system(make_fixed_scorer_system(), cfg.scorer_stage)
        engine.add_system(make_composite_scorer_system(), cfg.composite_stage)
        engine.add_system(make_thinker_attach_system(), cfg.thinker_stage)
        engine.add_system(make_thinker_detach_system(), cfg.thinker_stage)
        if cfg.cleanup_orphans:
            engine.add_system(make_actor_cleanup_system(), cfg.thinker_stage)
        engine.add_system(
            make_thinker_system(on_pick=self._on_pick, on_done=self._on_done),
            cfg.thinker_stage,
        )
        engine.add_system(make_sequence_system(), cfg.sequence_stage)
