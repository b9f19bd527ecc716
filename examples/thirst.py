"""Thirst -- one agent deciding when to drink.

Demonstrates:
- Writing a leaf scorer as a component plus a scoring system
- Writing leaf actions that honour EXECUTING and CANCELLED
- Attaching a ThinkerBuilder to give an agent a brain
- A Step sequence: walk to the water, then drink

Run: python -m examples.thirst
"""

from dataclasses import dataclass

from tick_brain import (
    ActionStatus,
    Actor,
    BrainPlugin,
    Engine,
    EvaluatingScorer,
    LinearEvaluator,
    Score,
    Sequence,
    Stage,
    Thinker,
    World,
)
from tick_brain.types import TickContext


# ---------------------------------------------------------------------------
# Components
# ---------------------------------------------------------------------------

@dataclass
class Thirst:
    value: float
    per_tick: float


@dataclass
class Position:
    x: int = 0


@dataclass
class Thirsty:
    """Leaf scorer: how thirsty is my actor?"""


@dataclass
class MoveToWater:
    target: int


@dataclass
class Drink:
    pass


@dataclass
class Meander:
    pass


# ---------------------------------------------------------------------------
# Systems
# ---------------------------------------------------------------------------

def thirst_system(world: World, ctx: TickContext) -> None:
    for _, (thirst,) in world.query(Thirst):
        thirst.value = min(100.0, thirst.value + thirst.per_tick)


def thirsty_scorer_system(world: World, ctx: TickContext) -> None:
    for _, (score, actor, _) in world.query(Score, Actor, Thirsty):
        thirst = world.find(actor.entity, Thirst)
        # No thirst component means nothing to want.
        score.set(0.0 if thirst is None else thirst.value / 100.0)


def move_system(world: World, ctx: TickContext) -> None:
    for _, (status, actor, move) in world.query(ActionStatus, Actor, MoveToWater):
        if status.is_executing:
            pos = world.get(actor.entity, Position)
            if pos.x < move.target:
                pos.x += 1
                print(f"  tick {ctx.tick_number}  walking... x={pos.x}")
            if pos.x >= move.target:
                status.success()
        elif status.is_cancelled:
            status.failure()


def drink_system(world: World, ctx: TickContext) -> None:
    for _, (status, actor, _) in world.query(ActionStatus, Actor, Drink):
        if status.is_executing:
            world.get(actor.entity, Thirst).value = 0.0
            print(f"  tick {ctx.tick_number}  gulp!")
            status.success()
        elif status.is_cancelled:
            status.failure()


def meander_system(world: World, ctx: TickContext) -> None:
    for _, (status, _) in world.query(ActionStatus, Meander):
        if status.is_cancelled:
            # Finish the current stroll before stopping.
            status.success()


def main() -> None:
    print("=== Thirst ===\n")

    engine = Engine(tps=10, seed=42)
    BrainPlugin().install(engine)
    engine.add_system(thirst_system)
    engine.add_system(thirsty_scorer_system, Stage.SCORERS)
    for system in (move_system, drink_system, meander_system):
        engine.add_system(system, Stage.ACTIONS)

    # Only start caring once thirst passes 50.
    scorer = EvaluatingScorer.build(Thirsty(), LinearEvaluator.ranged(0.5, 1.0))
    brain = (
        Thinker.first_to_score(0.6)
        .when(scorer, Sequence.step(MoveToWater(target=3), Drink()))
        .otherwise(Meander())
    )

    agent = engine.world.spawn()
    engine.world.attach(agent, Thirst(value=60.0, per_tick=5.0))
    engine.world.attach(agent, Position())
    engine.world.attach(agent, brain)

    engine.run(20)

    thirst = engine.world.get(agent, Thirst)
    print(f"\nDone at tick {engine.clock.tick_number}, thirst={thirst.value:.0f}.")


if __name__ == "__main__":
    main()
