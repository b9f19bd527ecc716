"""World - node and component storage with queries."""

from __future__ import annotations

from typing import Any, Generator, Iterable, TypeVar, cast

from tick_brain.commands import Commands
from tick_brain.types import DeadEntityError, EntityId

T = TypeVar("T")


class World:
    """Entity/component store shared by scorers, actions and thinkers.

    Structural changes made while systems iterate go through ``commands``
    and land on the next ``flush()``.
    """

    def __init__(self) -> None:
        self._components: dict[type, dict[EntityId, Any]] = {}
        self._next_id: int = 0
        self._alive: set[EntityId] = set()
        self._reserved: set[EntityId] = set()
        self._commands = Commands(self)

    @property
    def commands(self) -> Commands:
        return self._commands

    def reserve(self) -> EntityId:
        """Allocate an id that becomes alive once spawned."""
        eid = self._next_id
        self._next_id += 1
        self._reserved.add(eid)
        return eid

    def spawn(self, entity_id: EntityId | None = None) -> EntityId:
        if entity_id is None:
            entity_id = self._next_id
            self._next_id += 1
        elif entity_id in self._reserved:
            self._reserved.discard(entity_id)
        else:
            raise ValueError(f"Entity {entity_id} was not reserved")
        self._alive.add(entity_id)
        return entity_id

    def despawn(self, entity_id: EntityId) -> None:
        self._alive.discard(entity_id)
        self._reserved.discard(entity_id)
        for store in self._components.values():
            store.pop(entity_id, None)

    def attach(self, entity_id: EntityId, component: Any) -> None:
        if entity_id not in self._alive:
            raise DeadEntityError(
                entity_id,
                f"Cannot attach {type(component).__name__} to dead entity {entity_id}",
            )
        self._components.setdefault(type(component), {})[entity_id] = component

    def detach(self, entity_id: EntityId, component_type: type) -> None:
        store = self._components.get(component_type)
        if store is not None:
            store.pop(entity_id, None)

    def get(self, entity_id: EntityId, component_type: type[T]) -> T:
        if entity_id not in self._alive:
            raise DeadEntityError(entity_id, f"Entity {entity_id} is not alive")
        store = self._components.get(component_type)
        if store is None or entity_id not in store:
            raise KeyError(
                f"Entity {entity_id} has no {component_type.__name__} component"
            )
        return cast(T, store[entity_id])

    def find(self, entity_id: EntityId, component_type: type[T]) -> T | None:
        """Like ``get`` but returns None for dead entities or missing components."""
        if entity_id not in self._alive:
            return None
        store = self._components.get(component_type)
        if store is None:
            return None
        return cast("T | None", store.get(entity_id))

    def has(self, entity_id: EntityId, component_type: type) -> bool:
        if entity_id not in self._alive:
            return False
        store = self._components.get(component_type)
        return store is not None and entity_id in store

    def query(
        self, *ctypes: type, without: Iterable[type] = ()
    ) -> Generator[tuple[EntityId, tuple[Any, ...]], None, None]:
        """Yield ``(eid, components)`` for live entities carrying every type.

        Entities carrying any of the ``without`` types are skipped.
        """
        if not ctypes:
            return
        base_store = self._components.get(ctypes[0])
        if base_store is None:
            return
        excluded = [self._components.get(ct) for ct in without]

        for eid in list(base_store):
            if eid not in self._alive:
                continue
            if any(store is not None and eid in store for store in excluded):
                continue
            components: list[Any] = []
            for ctype in ctypes:
                store = self._components.get(ctype)
                if store is None or eid not in store:
                    break
                components.append(store[eid])
            else:
                yield eid, tuple(components)

    def entities(self) -> frozenset[EntityId]:
        return frozenset(self._alive)

    def alive(self, entity_id: EntityId) -> bool:
        return entity_id in self._alive

    def flush(self) -> int:
        """Apply every buffered command. Returns how many were applied."""
        return self._commands.apply()
