"""ECS components shared by score nodes, action nodes and thinkers."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from tick_brain.types import EntityId, ScoreRangeError


@dataclass(frozen=True)
class Actor:
    """Back-reference from a node to the agent it works for."""

    entity: EntityId


@dataclass
class Score:
    """Desirability in [0.0, 1.0] owned by a score node."""

    value: float = 0.0

    def get(self) -> float:
        return self.value

    def set(self, value: float) -> None:
        """Set the score. Raises ScoreRangeError outside [0.0, 1.0]."""
        if not 0.0 <= value <= 1.0:
            raise ScoreRangeError(value)
        self.value = value

    def set_unchecked(self, value: float) -> None:
        """Set the score without the range check.

        Scores off the unit scale compose badly; rescale and use ``set``
        wherever possible.
        """
        self.value = value


class ActionState(Enum):
    """Lifecycle of an action node. SUCCESS and FAILURE are terminal."""

    EXECUTING = "executing"
    CANCELLED = "cancelled"
    SUCCESS = "success"
    FAILURE = "failure"

    @property
    def is_done(self) -> bool:
        return self in (ActionState.SUCCESS, ActionState.FAILURE)


@dataclass
class ActionStatus:
    """Mutable ActionState holder attached to every action node.

    CANCELLED is a request: the node's own logic must still move to
    SUCCESS or FAILURE once it has wound down.
    """

    state: ActionState = ActionState.EXECUTING

    def success(self) -> None:
        self.state = ActionState.SUCCESS

    def failure(self) -> None:
        self.state = ActionState.FAILURE

    def cancel(self) -> None:
        self.state = ActionState.CANCELLED

    def cancel_if_executing(self) -> bool:
        if self.state is ActionState.EXECUTING:
            self.state = ActionState.CANCELLED
            return True
        return False

    @property
    def is_executing(self) -> bool:
        return self.state is ActionState.EXECUTING

    @property
    def is_cancelled(self) -> bool:
        return self.state is ActionState.CANCELLED

    @property
    def is_success(self) -> bool:
        return self.state is ActionState.SUCCESS

    @property
    def is_failure(self) -> bool:
        return self.state is ActionState.FAILURE

    @property
    def is_done(self) -> bool:
        return self.state.is_done


@dataclass(frozen=True)
class HasThinker:
    """Marks an agent whose thinker has been spawned."""

    entity: EntityId
