"""Thinkers - the per-agent brain that picks and drives one action at a time.

Each tick a thinker serves its scheduled queue first, then asks its picker
for a winner, then falls back to its default action, and reconciles the
result with whatever is running. A running action is never torn down
while it is still live: it is sent CANCELLED and the thinker waits for it
to finish on its own before spawning the replacement.
"""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable

from tick_brain.actions import ActionBuilder, ActionTemplate, as_action_builder
from tick_brain.components import ActionState, ActionStatus, Actor, HasThinker, Score
from tick_brain.pickers import Choice, FirstToScore, Highest, Picker
from tick_brain.scorers import ScorerBuilder, as_scorer_builder

if TYPE_CHECKING:
    from tick_brain.commands import Commands
    from tick_brain.types import EntityId, TickContext
    from tick_brain.world import World

logger = logging.getLogger(__name__)

PickCallback = Callable[["World", "TickContext", int, int], None]
DoneCallback = Callable[["World", "TickContext", int, int, ActionState], None]


@dataclass
class Thinker:
    """Component on a thinker node.

    ``current`` is the running action node and the template it came from.
    ``running_scheduled`` marks a current action taken from ``scheduled``;
    the picker never overrides it.
    """

    picker: Picker
    choices: list[Choice] = field(default_factory=list)
    otherwise: ActionTemplate | None = None
    scheduled: deque[ActionTemplate] = field(default_factory=deque)
    current: tuple[EntityId, ActionTemplate] | None = None
    running_scheduled: bool = False

    @staticmethod
    def build(picker: Picker) -> ThinkerBuilder:
        return ThinkerBuilder(picker)

    @staticmethod
    def first_to_score(threshold: float) -> ThinkerBuilder:
        return ThinkerBuilder(FirstToScore(threshold))

    @staticmethod
    def highest(threshold: float = 0.0) -> ThinkerBuilder:
        return ThinkerBuilder(Highest(threshold))

    def schedule(self, action: Any) -> ActionTemplate:
        """Queue a one-shot action.

        A non-empty queue takes priority over the picker: the running action
        is cancelled unless it came from the queue itself, and the queued
        actions run in order once the slot is free.
        """
        template = ActionTemplate(action)
        self.scheduled.append(template)
        return template

    def has_scheduled(self) -> bool:
        return bool(self.scheduled)

    def current_action(self) -> EntityId | None:
        return None if self.current is None else self.current[0]


class ThinkerBuilder(ActionBuilder):
    """Definition of a thinker.

    Attach it to an agent to give that agent a brain, or use it anywhere an
    action is expected to nest a thinker inside another behavior.
    """

    def __init__(self, picker: Picker) -> None:
        self.picker = picker
        self.choices: list[tuple[ScorerBuilder, ActionBuilder]] = []
        self.default: Any = None

    def when(self, scorer: Any, action: Any) -> ThinkerBuilder:
        """Add a choice: run ``action`` when ``scorer`` wins."""
        self.choices.append((as_scorer_builder(scorer), as_action_builder(action)))
        return self

    def otherwise(self, action: Any) -> ThinkerBuilder:
        """Action to run when nothing is picked or scheduled."""
        self.default = action
        return self

    def spawn(self, cmd: Commands, actor: EntityId) -> EntityId:
        thinker = cmd.spawn(Actor(actor), ActionStatus())
        choices = []
        for scorer, action in self.choices:
            node = scorer.spawn(cmd, actor)
            cmd.add_child(thinker, node)
            # Fresh token per thinker instance.
            choices.append(Choice(node, ActionTemplate(action)))
        otherwise = None if self.default is None else ActionTemplate(self.default)
        cmd.insert(thinker, Thinker(self.picker, choices, otherwise))
        logger.debug("spawning thinker %s for actor %s", thinker, actor)
        return thinker

    def __repr__(self) -> str:
        return f"ThinkerBuilder({self.picker!r}, {len(self.choices)} choices)"


# --- Reconciliation ---


class _Reconciler:
    """One thinker's decision step for one tick."""

    def __init__(
        self,
        world: World,
        ctx: TickContext,
        eid: EntityId,
        thinker: Thinker,
        actor: EntityId,
        on_pick: PickCallback | None,
        on_done: DoneCallback | None,
    ) -> None:
        self.world = world
        self.ctx = ctx
        self.eid = eid
        self.thinker = thinker
        self.actor = actor
        self.on_pick = on_pick
        self.on_done = on_done

    def current_status(self) -> ActionStatus | None:
        if self.thinker.current is None:
            return None
        return self.world.get(self.thinker.current[0], ActionStatus)

    def drop_if_done(self) -> ActionState | None:
        """Despawn the running action if it has finished. Returns its state."""
        action = self.thinker.current_action()
        if action is None:
            return None
        status = self.world.get(action, ActionStatus)
        if not status.is_done:
            return None
        logger.debug(
            "thinker %s: action %s is %s, despawning", self.eid, action, status.state.value
        )
        self.world.commands.despawn_recursive(action)
        self.thinker.current = None
        self.thinker.running_scheduled = False
        if self.on_done is not None:
            self.on_done(self.world, self.ctx, self.eid, action, status.state)
        return status.state

    def run(self, template: ActionTemplate, scheduled: bool = False) -> None:
        cmd = self.world.commands
        action = template.spawn(cmd, self.actor)
        cmd.add_child(self.eid, action)
        self.thinker.current = (action, template)
        self.thinker.running_scheduled = scheduled
        logger.debug("thinker %s: running %r as %s", self.eid, template, action)
        if self.on_pick is not None:
            self.on_pick(self.world, self.ctx, self.eid, action)

    def offer(self, template: ActionTemplate, override: bool) -> None:
        """Start ``template`` if the slot is free.

        With ``override`` a different live action is asked to cancel first,
        unless it came from the scheduled queue.
        """
        if self.thinker.current is None:
            self.run(template)
            return
        if self.thinker.running_scheduled:
            return
        _, running = self.thinker.current
        if override and not template.same_as(running):
            status = self.current_status()
            if status is not None and status.cancel_if_executing():
                logger.debug(
                    "thinker %s: cancelling %s in favour of %r",
                    self.eid, self.thinker.current_action(), template,
                )

    def serve_scheduled(self) -> bool:
        """Give the slot to the scheduled queue. False when the queue is empty.

        A live action that did not come from the queue is asked to cancel;
        the next queued action runs once the slot is free.
        """
        thinker = self.thinker
        if not thinker.scheduled:
            return False
        status = self.current_status()
        if status is None:
            self.run(thinker.scheduled.popleft(), scheduled=True)
        elif not thinker.running_scheduled and status.cancel_if_executing():
            logger.debug(
                "thinker %s: cancelling %s for scheduled action",
                self.eid, thinker.current_action(),
            )
        return True

    def think(self) -> None:
        self.drop_if_done()
        if self.serve_scheduled():
            return
        thinker = self.thinker
        choice = thinker.picker.pick(thinker.choices, self.score_of)
        if choice is not None:
            self.offer(choice.action, override=True)
        elif thinker.otherwise is not None:
            self.offer(thinker.otherwise, override=False)

    def wind_down(self, status: ActionStatus) -> None:
        """The thinker itself was cancelled: stop the running action, then
        report success."""
        if self.thinker.current is None:
            status.success()
            return
        if self.drop_if_done() is not None:
            status.success()
            return
        current = self.current_status()
        if current is not None and current.cancel_if_executing():
            logger.debug(
                "thinker %s: cancelled, stopping %s", self.eid, self.thinker.current_action()
            )

    def score_of(self, scorer: EntityId) -> float:
        return self.world.get(scorer, Score).get()


def make_thinker_system(
    on_pick: PickCallback | None = None,
    on_done: DoneCallback | None = None,
) -> Callable[[World, TickContext], None]:
    """Return a system that runs every thinker's decision step.

    ``on_pick(world, ctx, thinker, action)`` fires when an action node is
    queued for spawning; its components land at the next flush.
    ``on_done(world, ctx, thinker, action, state)`` fires when a finished
    action node is despawned.
    """

    def thinker_system(world: World, ctx: TickContext) -> None:
        for eid, (thinker, status, actor) in world.query(Thinker, ActionStatus, Actor):
            if status.is_done:
                continue
            step = _Reconciler(world, ctx, eid, thinker, actor.entity, on_pick, on_done)
            if status.is_cancelled:
                step.wind_down(status)
            else:
                step.think()

    return thinker_system


# --- Agent wiring ---


def make_thinker_attach_system() -> Callable[[World, TickContext], None]:
    """Return a system that spawns a thinker for every agent that carries a
    ThinkerBuilder but has no thinker yet."""

    def thinker_attach_system(world: World, ctx: TickContext) -> None:
        cmd = world.commands
        for eid, (builder,) in world.query(ThinkerBuilder, without=(HasThinker,)):
            thinker = builder.spawn(cmd, eid)
            cmd.insert(eid, HasThinker(thinker))

    return thinker_attach_system


def make_thinker_detach_system() -> Callable[[World, TickContext], None]:
    """Return a system that tears down thinkers whose agent dropped its
    ThinkerBuilder."""

    def thinker_detach_system(world: World, ctx: TickContext) -> None:
        cmd = world.commands
        for eid, (has_thinker,) in world.query(HasThinker, without=(ThinkerBuilder,)):
            logger.debug("agent %s lost its thinker definition", eid)
            cmd.despawn_recursive(has_thinker.entity)
            cmd.remove(eid, HasThinker)

    return thinker_detach_system


def make_actor_cleanup_system() -> Callable[[World, TickContext], None]:
    """Return a system that despawns nodes whose actor no longer exists."""

    def actor_cleanup_system(world: World, ctx: TickContext) -> None:
        cmd = world.commands
        for eid, (actor,) in world.query(Actor):
            if not world.alive(actor.entity):
                logger.debug("actor %s is gone, despawning node %s", actor.entity, eid)
                cmd.despawn_recursive(eid)

    return actor_cleanup_system
