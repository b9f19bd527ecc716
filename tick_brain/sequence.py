"""Composite actions: Join, Race and Step.

A Sequence node owns child action nodes and derives its own ActionState
from theirs:

* JOIN succeeds when every child succeeds and fails as soon as one fails.
* RACE succeeds as soon as one child succeeds and fails when all fail.
* STEP runs its children one at a time, in order, stopping on failure.

When one child decides a JOIN or RACE, every other child that is still
executing is cancelled before the sequence settles.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Sequence as Seq

from tick_brain.actions import ActionBuilder, as_action_builder
from tick_brain.components import ActionState, ActionStatus, Actor
from tick_brain.hierarchy import children_of, depth_of

if TYPE_CHECKING:
    from tick_brain.commands import Commands
    from tick_brain.types import EntityId, TickContext
    from tick_brain.world import World

logger = logging.getLogger(__name__)


class SequenceMode(Enum):
    JOIN = "join"
    RACE = "race"
    STEP = "step"


@dataclass
class Sequence:
    """Component on a composite action node."""

    mode: SequenceMode
    steps: tuple[ActionBuilder, ...] = field(default_factory=tuple)
    active_step: int = 0

    @staticmethod
    def join(*actions: Any) -> SequenceBuilder:
        return SequenceBuilder(SequenceMode.JOIN, actions)

    @staticmethod
    def race(*actions: Any) -> SequenceBuilder:
        return SequenceBuilder(SequenceMode.RACE, actions)

    @staticmethod
    def step(*actions: Any) -> SequenceBuilder:
        return SequenceBuilder(SequenceMode.STEP, actions)


class SequenceBuilder(ActionBuilder):
    """Template for a Sequence node. JOIN/RACE spawn every child up front;
    STEP spawns only the first."""

    def __init__(self, mode: SequenceMode, actions: Seq[Any] = ()) -> None:
        self.mode = mode
        self.actions: tuple[ActionBuilder, ...] = tuple(
            as_action_builder(a) for a in actions
        )

    def spawn(self, cmd: Commands, actor: EntityId) -> EntityId:
        node = cmd.spawn(
            Actor(actor), ActionStatus(), Sequence(self.mode, self.actions)
        )
        if self.mode is SequenceMode.STEP:
            initial = self.actions[:1]
        else:
            initial = self.actions
        for action in initial:
            cmd.add_child(node, action.spawn(cmd, actor))
        return node

    def __repr__(self) -> str:
        return f"Sequence.{self.mode.value}({len(self.actions)} actions)"


# --- Join / Race ---


def exec_join(status: ActionStatus, children: list[ActionStatus]) -> None:
    if status.is_executing:
        if all(child.is_success for child in children):
            status.success()
        elif any(child.is_failure for child in children):
            for child in children:
                child.cancel_if_executing()
            status.failure()
    elif status.is_cancelled:
        _wind_down(status, children, ActionState.FAILURE)


def exec_race(status: ActionStatus, children: list[ActionStatus]) -> None:
    if status.is_executing:
        if all(child.is_failure for child in children):
            status.failure()
        elif any(child.is_success for child in children):
            for child in children:
                child.cancel_if_executing()
            status.success()
    elif status.is_cancelled:
        _wind_down(status, children, ActionState.SUCCESS)


def _wind_down(
    status: ActionStatus, children: list[ActionStatus], decisive: ActionState
) -> None:
    """Cancel live children; once all are done, settle on *decisive* if
    any child reached it, otherwise on the opposite outcome."""
    for child in children:
        child.cancel_if_executing()
    if all(child.is_done for child in children):
        if any(child.state is decisive for child in children):
            status.state = decisive
        elif decisive is ActionState.FAILURE:
            status.success()
        else:
            status.failure()


# --- Step ---


def exec_step(
    world: World,
    eid: EntityId,
    status: ActionStatus,
    sequence: Sequence,
    actor: EntityId,
) -> None:
    active = children_of(world, eid)[:1]
    if not active:
        if not status.is_done:
            status.success()
        return
    child = active[0]
    child_status = world.get(child, ActionStatus)
    cmd = world.commands

    if status.is_executing:
        if child_status.is_success:
            cmd.despawn_recursive(child)
            if sequence.active_step >= len(sequence.steps) - 1:
                logger.debug("step %s: finished all %d steps", eid, len(sequence.steps))
                status.success()
            else:
                sequence.active_step += 1
                logger.debug("step %s: advancing to step %d", eid, sequence.active_step)
                nxt = sequence.steps[sequence.active_step].spawn(cmd, actor)
                cmd.add_child(eid, nxt)
        elif child_status.is_failure:
            cmd.despawn_recursive(child)
            status.failure()
    elif status.is_cancelled:
        if child_status.is_executing:
            child_status.cancel()
        elif child_status.is_done:
            status.state = child_status.state


def make_sequence_system() -> Callable[[World, TickContext], None]:
    """Return a system that advances every Sequence node.

    Deeper sequences run first so a parent sees its nested sequences'
    results from the same pass.
    """

    def sequence_system(world: World, ctx: TickContext) -> None:
        nodes = sorted(
            world.query(ActionStatus, Sequence, Actor),
            key=lambda item: depth_of(world, item[0]),
            reverse=True,
        )
        for eid, (status, sequence, actor) in nodes:
            if status.is_done:
                continue
            if sequence.mode is SequenceMode.STEP:
                exec_step(world, eid, status, sequence, actor.entity)
                continue
            children = [
                world.get(child, ActionStatus) for child in children_of(world, eid)
            ]
            if sequence.mode is SequenceMode.JOIN:
                exec_join(status, children)
            else:
                exec_race(status, children)

    return sequence_system
