"""Engine - fixed-timestep loop running systems in ordered stages."""

from __future__ import annotations

import logging
import os
import random
import time
from enum import IntEnum
from typing import Callable

from tick_brain.clock import Clock
from tick_brain.types import System, TickContext
from tick_brain.world import World

logger = logging.getLogger(__name__)


class Stage(IntEnum):
    """Per-tick pass order. Systems in the same stage run in insertion order."""

    FIRST = 0
    UPDATE = 1
    SCORERS = 2
    COMPOSITES = 3
    THINKERS = 4
    ACTIONS = 5
    SEQUENCES = 6
    LAST = 7


class Engine:
    def __init__(self, tps: int = 20, seed: int | None = None) -> None:
        self._clock = Clock(tps)
        self._world = World()
        self._stages: dict[Stage, list[System]] = {stage: [] for stage in Stage}
        self._start_hooks: list[Callable[[World, TickContext], None]] = []
        self._stop_hooks: list[Callable[[World, TickContext], None]] = []
        self._stop_requested: bool = False

        if seed is None:
            seed = int.from_bytes(os.urandom(8))
        self._seed = seed
        self._rng = random.Random(seed)

    @property
    def world(self) -> World:
        return self._world

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def seed(self) -> int:
        return self._seed

    def add_system(self, system: System, stage: Stage = Stage.UPDATE) -> None:
        if not isinstance(stage, Stage):
            raise ValueError(f"Unknown stage {stage!r}")
        self._stages[stage].append(system)

    def systems(self, stage: Stage) -> list[System]:
        return list(self._stages[stage])

    def on_start(self, hook: Callable[[World, TickContext], None]) -> None:
        self._start_hooks.append(hook)

    def on_stop(self, hook: Callable[[World, TickContext], None]) -> None:
        self._stop_hooks.append(hook)

    def _request_stop(self) -> None:
        self._stop_requested = True

    def _tick(self) -> None:
        self._clock.advance()
        ctx = self._clock.context(self._request_stop, self._rng)
        for stage in Stage:
            for system in self._stages[stage]:
                system(self._world, ctx)
                # Deferred spawns/despawns land before the next pass reads them.
                self._world.flush()
                if self._stop_requested:
                    logger.debug("stop requested at tick %d", ctx.tick_number)
                    return

    def step(self) -> None:
        self._stop_requested = False
        self._tick()

    def run(self, n: int) -> None:
        self._stop_requested = False
        self._run_hooks(self._start_hooks)

        for _ in range(n):
            self._tick()
            if self._stop_requested:
                break

        self._run_hooks(self._stop_hooks)

    def run_forever(self) -> None:
        self._stop_requested = False
        self._run_hooks(self._start_hooks)

        dt = self._clock.dt
        while not self._stop_requested:
            start = time.monotonic()
            self._tick()
            if self._stop_requested:
                break
            elapsed = time.monotonic() - start
            sleep_time = dt - elapsed
            if sleep_time > 0:
                time.sleep(sleep_time)

        self._run_hooks(self._stop_hooks)

    def _run_hooks(self, hooks: list[Callable[[World, TickContext], None]]) -> None:
        ctx = self._clock.context(self._request_stop, self._rng)
        for hook in hooks:
            hook(self._world, ctx)
        self._world.flush()
