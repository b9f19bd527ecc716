"""Tests for the fixed-timestep Clock."""
import random

import pytest

from tick_brain.clock import Clock


class TestClock:
    """Test Clock basics."""

    def test_dt(self):
        clock = Clock(tps=20)
        assert clock.dt == pytest.approx(0.05)
        assert clock.tps == 20

    def test_invalid_tps(self):
        with pytest.raises(ValueError):
            Clock(tps=0)

    def test_advance(self):
        clock = Clock(tps=10)
        assert clock.tick_number == 0
        assert clock.advance() == 1
        assert clock.advance() == 2

    def test_context(self):
        clock = Clock(tps=10)
        clock.advance()
        clock.advance()
        rng = random.Random(1)
        ctx = clock.context(lambda: None, rng)
        assert ctx.tick_number == 2
        assert ctx.elapsed == pytest.approx(0.2)
        assert ctx.random is rng
