"""Shared type aliases, tick context and errors for tick-brain."""

from __future__ import annotations

import random as _random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

EntityId = int


@dataclass(frozen=True, slots=True)
class TickContext:
    tick_number: int
    dt: float
    elapsed: float
    request_stop: Callable[[], None]
    random: _random.Random


class DeadEntityError(KeyError):
    """Raised when operating on an entity that is not alive."""

    def __init__(self, entity_id: EntityId, message: str) -> None:
        self.entity_id = entity_id
        super().__init__(message)


class ScoreRangeError(ValueError):
    """Raised when a checked Score write falls outside [0.0, 1.0]."""

    def __init__(self, value: float) -> None:
        self.value = value
        super().__init__(f"Score value must be between 0.0 and 1.0, got {value!r}")


if TYPE_CHECKING:
    from tick_brain.world import World

System = Callable[["World", TickContext], None]
