"""Parent/child links between nodes and recursive teardown."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tick_brain.types import EntityId
    from tick_brain.world import World

logger = logging.getLogger(__name__)


@dataclass
class Children:
    entities: list[EntityId] = field(default_factory=list)


@dataclass
class Parent:
    entity: EntityId = 0


def add_child(world: World, parent: EntityId, child: EntityId) -> None:
    """Append *child* to *parent*'s children, re-parenting it if needed."""
    old = parent_of(world, child)
    if old is not None:
        remove_child(world, old, child)
    if not world.has(parent, Children):
        world.attach(parent, Children())
    world.get(parent, Children).entities.append(child)
    world.attach(child, Parent(entity=parent))


def remove_child(world: World, parent: EntityId, child: EntityId) -> None:
    children = world.find(parent, Children)
    if children is not None and child in children.entities:
        children.entities.remove(child)
    if world.has(child, Parent):
        world.detach(child, Parent)


def children_of(world: World, parent: EntityId) -> list[EntityId]:
    children = world.find(parent, Children)
    if children is None:
        return []
    return list(children.entities)


def parent_of(world: World, child: EntityId) -> EntityId | None:
    link = world.find(child, Parent)
    return None if link is None else link.entity


def depth_of(world: World, entity: EntityId) -> int:
    """Number of ancestors above *entity*."""
    depth = 0
    current = parent_of(world, entity)
    while current is not None:
        depth += 1
        current = parent_of(world, current)
    return depth


def despawn_recursive(world: World, entity: EntityId) -> None:
    """Despawn *entity* and its whole subtree, children first.

    The entity is unlinked from its parent before anything is freed.
    Already-dead entities are ignored.
    """
    if not world.alive(entity):
        logger.debug("despawn_recursive: %s already gone", entity)
        return
    parent = parent_of(world, entity)
    if parent is not None:
        remove_child(world, parent, entity)
    stack = [entity]
    order: list[EntityId] = []
    while stack:
        eid = stack.pop()
        order.append(eid)
        stack.extend(children_of(world, eid))
    for eid in reversed(order):
        world.despawn(eid)
