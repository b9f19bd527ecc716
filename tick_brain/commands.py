"""Commands - deferred structural mutations, applied between passes.

Systems must not spawn, despawn or re-parent nodes while they iterate a
query. They record intents here instead and the engine applies them in
FIFO order once the system returns.
"""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

from tick_brain import hierarchy

if TYPE_CHECKING:
    from tick_brain.types import EntityId
    from tick_brain.world import World


@dataclass(frozen=True)
class Spawn:
    entity: EntityId
    components: tuple[Any, ...]


@dataclass(frozen=True)
class Insert:
    entity: EntityId
    components: tuple[Any, ...]


@dataclass(frozen=True)
class Remove:
    entity: EntityId
    ctype: type


@dataclass(frozen=True)
class AddChild:
    parent: EntityId
    child: EntityId


@dataclass(frozen=True)
class Despawn:
    entity: EntityId
    recursive: bool = True


class Commands:
    """FIFO buffer of mutation intents bound to one world."""

    def __init__(self, world: World) -> None:
        self._world = world
        self._pending: deque[Any] = deque()
        self._handlers: dict[type[Any], Callable[[Any], None]] = {
            Spawn: self._apply_spawn,
            Insert: self._apply_insert,
            Remove: self._apply_remove,
            AddChild: self._apply_add_child,
            Despawn: self._apply_despawn,
        }

    def spawn(self, *components: Any) -> EntityId:
        """Reserve an id now; the entity comes alive on apply."""
        eid = self._world.reserve()
        self._pending.append(Spawn(eid, components))
        return eid

    def insert(self, entity: EntityId, *components: Any) -> None:
        self._pending.append(Insert(entity, components))

    def remove(self, entity: EntityId, ctype: type) -> None:
        self._pending.append(Remove(entity, ctype))

    def add_child(self, parent: EntityId, child: EntityId) -> None:
        self._pending.append(AddChild(parent, child))

    def despawn(self, entity: EntityId) -> None:
        self._pending.append(Despawn(entity, recursive=False))

    def despawn_recursive(self, entity: EntityId) -> None:
        self._pending.append(Despawn(entity))

    def pending(self) -> int:
        return len(self._pending)

    def apply(self) -> int:
        applied = 0
        while self._pending:
            cmd = self._pending.popleft()
            self._handlers[type(cmd)](cmd)
            applied += 1
        return applied

    # --- Handlers ---

    def _apply_spawn(self, cmd: Spawn) -> None:
        self._world.spawn(cmd.entity)
        for component in cmd.components:
            self._world.attach(cmd.entity, component)

    def _apply_insert(self, cmd: Insert) -> None:
        for component in cmd.components:
            self._world.attach(cmd.entity, component)

    def _apply_remove(self, cmd: Remove) -> None:
        self._world.detach(cmd.entity, cmd.ctype)

    def _apply_add_child(self, cmd: AddChild) -> None:
        hierarchy.add_child(self._world, cmd.parent, cmd.child)

    def _apply_despawn(self, cmd: Despawn) -> None:
        if cmd.recursive:
            hierarchy.despawn_recursive(self._world, cmd.entity)
            return
        parent = hierarchy.parent_of(self._world, cmd.entity)
        if parent is not None:
            hierarchy.remove_child(self._world, parent, cmd.entity)
        self._world.despawn(cmd.entity)
