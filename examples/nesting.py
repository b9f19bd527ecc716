"""Nesting -- composite actions and a thinker inside a thinker.

Demonstrates:
- Sequence.race: the first child to succeed wins
- Sequence.join: everyone must finish
- Using a ThinkerBuilder as an action
- Watching decisions through on_pick/on_done and DEBUG logging

Run: python -m examples.nesting
"""

import logging
from dataclasses import dataclass

from tick_brain import (
    ActionState,
    ActionStatus,
    BrainPlugin,
    Engine,
    FixedScorer,
    Sequence,
    Stage,
    Thinker,
    World,
)
from tick_brain.types import TickContext


@dataclass
class Countdown:
    label: str
    ticks: int


def countdown_system(world: World, ctx: TickContext) -> None:
    """Succeed after ``ticks`` executing ticks; fail if cancelled."""
    for _, (status, countdown) in world.query(ActionStatus, Countdown):
        if status.is_executing:
            countdown.ticks -= 1
            if countdown.ticks <= 0:
                print(f"  tick {ctx.tick_number}  {countdown.label} done")
                status.success()
        elif status.is_cancelled:
            print(f"  tick {ctx.tick_number}  {countdown.label} cancelled")
            status.failure()


def on_done(
    world: World, ctx: TickContext, thinker: int, action: int, state: ActionState
) -> None:
    print(f"  tick {ctx.tick_number}  thinker {thinker}: action {action} -> {state.value}")


def main() -> None:
    print("=== Nesting ===\n")
    logging.basicConfig(level=logging.INFO)

    engine = Engine(tps=10, seed=42)
    BrainPlugin(on_done=on_done).install(engine)
    engine.add_system(countdown_system, Stage.ACTIONS)

    chores = Sequence.join(Countdown("sweep", 2), Countdown("dust", 4))
    errand = Sequence.race(Countdown("bus", 5), Countdown("walk", 3))
    inner = Thinker.highest().when(FixedScorer(0.5), Sequence.step(chores, errand))
    brain = Thinker.highest().when(FixedScorer(0.9), inner)

    agent = engine.world.spawn()
    engine.world.attach(agent, brain)
    engine.run(12)

    print(f"\nDone. Clock stopped at tick {engine.clock.tick_number}.")


if __name__ == "__main__":
    main()
