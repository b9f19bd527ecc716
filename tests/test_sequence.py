"""Tests for Join, Race and Step composite actions."""
from dataclasses import dataclass

from tick_brain.components import ActionState, ActionStatus
from tick_brain.engine import Engine, Stage
from tick_brain.hierarchy import children_of
from tick_brain.sequence import Sequence, make_sequence_system

EXECUTING = ActionState.EXECUTING
CANCELLED = ActionState.CANCELLED
SUCCESS = ActionState.SUCCESS
FAILURE = ActionState.FAILURE


@dataclass
class Work:
    label: str


def _setup(builder):
    engine = Engine(tps=10, seed=42)
    engine.add_system(make_sequence_system(), Stage.SEQUENCES)
    actor = engine.world.spawn()
    node = builder.spawn(engine.world.commands, actor)
    engine.world.flush()
    return engine, node


def _status(engine, eid):
    return engine.world.get(eid, ActionStatus)


def _set(engine, kids, states):
    for kid, state in zip(kids, states):
        if state is not None:
            _status(engine, kid).state = state


def _states(engine, kids):
    return [_status(engine, kid).state for kid in kids]


class TestJoin:
    """Test Sequence.join."""

    def test_spawns_all_children(self):
        engine, node = _setup(Sequence.join(Work("a"), Work("b"), Work("c")))
        kids = children_of(engine.world, node)
        assert [engine.world.get(k, Work).label for k in kids] == ["a", "b", "c"]

    def test_succeeds_when_all_succeed(self):
        engine, node = _setup(Sequence.join(Work("a"), Work("b")))
        kids = children_of(engine.world, node)
        _set(engine, kids, [SUCCESS, EXECUTING])
        engine.step()
        assert _status(engine, node).state is EXECUTING
        _set(engine, kids, [None, SUCCESS])
        engine.step()
        assert _status(engine, node).state is SUCCESS

    def test_failure_cancels_every_executing_child(self):
        engine, node = _setup(
            Sequence.join(Work("a"), Work("b"), Work("c"), Work("d"))
        )
        kids = children_of(engine.world, node)
        _set(engine, kids, [EXECUTING, SUCCESS, FAILURE, EXECUTING])
        engine.step()
        assert _status(engine, node).state is FAILURE
        assert _states(engine, kids) == [CANCELLED, SUCCESS, FAILURE, CANCELLED]

    def test_failure_cancels_later_child(self):
        engine, node = _setup(Sequence.join(Work("a"), Work("b"), Work("c")))
        kids = children_of(engine.world, node)
        _set(engine, kids, [SUCCESS, FAILURE, EXECUTING])
        engine.step()
        assert _status(engine, node).state is FAILURE
        assert _states(engine, kids) == [SUCCESS, FAILURE, CANCELLED]

    def test_first_failure_decides(self):
        engine, node = _setup(Sequence.join(Work("a"), Work("b"), Work("c")))
        kids = children_of(engine.world, node)
        _set(engine, kids, [EXECUTING, FAILURE, FAILURE])
        engine.step()
        assert _states(engine, kids) == [CANCELLED, FAILURE, FAILURE]

    def test_empty_join_succeeds(self):
        engine, node = _setup(Sequence.join())
        engine.step()
        assert _status(engine, node).state is SUCCESS

    def test_cancel_waits_for_children(self):
        engine, node = _setup(Sequence.join(Work("a"), Work("b")))
        kids = children_of(engine.world, node)
        _status(engine, node).cancel()
        engine.step()
        assert _states(engine, kids) == [CANCELLED, CANCELLED]
        assert _status(engine, node).state is CANCELLED

        _set(engine, kids, [SUCCESS, FAILURE])
        engine.step()
        assert _status(engine, node).state is FAILURE

    def test_cancel_with_all_success_succeeds(self):
        engine, node = _setup(Sequence.join(Work("a")))
        kids = children_of(engine.world, node)
        _status(engine, node).cancel()
        _set(engine, kids, [SUCCESS])
        engine.step()
        assert _status(engine, node).state is SUCCESS


class TestRace:
    """Test Sequence.race."""

    def test_success_cancels_the_rest(self):
        engine, node = _setup(Sequence.race(Work("a"), Work("b"), Work("c")))
        kids = children_of(engine.world, node)
        _set(engine, kids, [EXECUTING, SUCCESS, EXECUTING])
        engine.step()
        assert _status(engine, node).state is SUCCESS
        assert _states(engine, kids) == [CANCELLED, SUCCESS, CANCELLED]

    def test_fails_when_all_fail(self):
        engine, node = _setup(Sequence.race(Work("a"), Work("b")))
        kids = children_of(engine.world, node)
        _set(engine, kids, [FAILURE, EXECUTING])
        engine.step()
        assert _status(engine, node).state is EXECUTING
        _set(engine, kids, [None, FAILURE])
        engine.step()
        assert _status(engine, node).state is FAILURE

    def test_empty_race_fails(self):
        engine, node = _setup(Sequence.race())
        engine.step()
        assert _status(engine, node).state is FAILURE

    def test_cancel_with_a_winner_succeeds(self):
        engine, node = _setup(Sequence.race(Work("a"), Work("b")))
        kids = children_of(engine.world, node)
        _status(engine, node).cancel()
        engine.step()
        _set(engine, kids, [FAILURE, SUCCESS])
        engine.step()
        assert _status(engine, node).state is SUCCESS

    def test_cancel_without_a_winner_fails(self):
        engine, node = _setup(Sequence.race(Work("a"), Work("b")))
        kids = children_of(engine.world, node)
        _status(engine, node).cancel()
        engine.step()
        _set(engine, kids, [FAILURE, FAILURE])
        engine.step()
        assert _status(engine, node).state is FAILURE


class TestStep:
    """Test Sequence.step."""

    def _labels(self, engine, node):
        return [engine.world.get(k, Work).label for k in children_of(engine.world, node)]

    def test_only_first_child_spawned(self):
        engine, node = _setup(Sequence.step(Work("a"), Work("b"), Work("c")))
        assert self._labels(engine, node) == ["a"]

    def test_runs_children_in_order(self):
        engine, node = _setup(Sequence.step(Work("a"), Work("b"), Work("c")))
        for expected_next in ("b", "c"):
            (kid,) = children_of(engine.world, node)
            _status(engine, kid).success()
            engine.step()
            assert not engine.world.alive(kid)
            assert self._labels(engine, node) == [expected_next]
            assert _status(engine, node).state is EXECUTING

        (kid,) = children_of(engine.world, node)
        _status(engine, kid).success()
        engine.step()
        assert _status(engine, node).state is SUCCESS
        assert children_of(engine.world, node) == []

    def test_failure_stops_sequence(self):
        engine, node = _setup(Sequence.step(Work("a"), Work("b")))
        (kid,) = children_of(engine.world, node)
        _status(engine, kid).failure()
        engine.step()
        assert _status(engine, node).state is FAILURE
        assert children_of(engine.world, node) == []
        engine.step()
        assert children_of(engine.world, node) == []

    def test_executing_child_keeps_step(self):
        engine, node = _setup(Sequence.step(Work("a"), Work("b")))
        engine.step()
        engine.step()
        assert self._labels(engine, node) == ["a"]
        assert _status(engine, node).state is EXECUTING

    def test_empty_step_succeeds(self):
        engine, node = _setup(Sequence.step())
        engine.step()
        assert _status(engine, node).state is SUCCESS

    def test_cancel_forwards_to_active_child(self):
        engine, node = _setup(Sequence.step(Work("a"), Work("b")))
        (kid,) = children_of(engine.world, node)
        _status(engine, node).cancel()
        engine.step()
        assert _status(engine, kid).state is CANCELLED
        assert _status(engine, node).state is CANCELLED

        _status(engine, kid).failure()
        engine.step()
        assert _status(engine, node).state is FAILURE
        assert self._labels(engine, node) == ["a"]


class TestNesting:
    """Test sequences inside sequences."""

    def test_nested_step_inside_join(self):
        inner = Sequence.step(Work("a1"), Work("a2"))
        engine, node = _setup(Sequence.join(inner, Work("b")))
        inner_eid, b = children_of(engine.world, node)
        assert engine.world.has(inner_eid, Sequence)

        for _ in range(2):
            (kid,) = children_of(engine.world, inner_eid)
            _status(engine, kid).success()
            engine.step()
        assert _status(engine, inner_eid).state is SUCCESS
        assert _status(engine, node).state is EXECUTING

        _status(engine, b).success()
        engine.step()
        assert _status(engine, node).state is SUCCESS

    def test_inner_result_seen_same_tick(self):
        inner = Sequence.join(Work("x"))
        engine, node = _setup(Sequence.join(inner))
        (inner_eid,) = children_of(engine.world, node)
        (leaf,) = children_of(engine.world, inner_eid)
        _status(engine, leaf).success()
        engine.step()
        assert _status(engine, inner_eid).state is SUCCESS
        assert _status(engine, node).state is SUCCESS
