"""Action builders and the templates thinkers run them from.

A leaf action is a plain component plus a system you write. The system
queries ``(ActionStatus, Actor, YourComponent)`` and must handle every
state: do the work while EXECUTING, wind down and finish on CANCELLED,
ignore SUCCESS and FAILURE.
"""
from __future__ import annotations

import abc
import copy
import itertools
from typing import TYPE_CHECKING, Any

from tick_brain.components import ActionStatus, Actor

if TYPE_CHECKING:
    from tick_brain.commands import Commands
    from tick_brain.types import EntityId


class ActionBuilder(abc.ABC):
    """Spawns a fresh action node (and its subtree) on demand."""

    @abc.abstractmethod
    def spawn(self, cmd: Commands, actor: EntityId) -> EntityId:
        ...


class ComponentAction(ActionBuilder):
    """Spawns a leaf action node carrying a copy of ``component``."""

    def __init__(self, component: Any) -> None:
        self.component = component

    def spawn(self, cmd: Commands, actor: EntityId) -> EntityId:
        return cmd.spawn(Actor(actor), ActionStatus(), copy.copy(self.component))

    def __repr__(self) -> str:
        return f"ComponentAction({self.component!r})"


def as_action_builder(action: Any) -> ActionBuilder:
    """Accept either an ActionBuilder or a bare leaf component."""
    if isinstance(action, ActionBuilder):
        return action
    return ComponentAction(action)


_tokens = itertools.count(1)


class ActionTemplate(ActionBuilder):
    """Shared handle to an ActionBuilder with its own identity token.

    Two templates wrapping equal (or even the same) builders are still
    different templates; thinkers compare tokens, never builder values.
    """

    def __init__(self, builder: Any) -> None:
        self.builder = as_action_builder(builder)
        self.token = next(_tokens)

    def same_as(self, other: ActionTemplate | None) -> bool:
        return other is not None and self.token == other.token

    def spawn(self, cmd: Commands, actor: EntityId) -> EntityId:
        return self.builder.spawn(cmd, actor)

    def __repr__(self) -> str:
        return f"ActionTemplate(#{self.token}, {self.builder!r})"
