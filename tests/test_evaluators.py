"""Tests for evaluator curves."""
import pytest

from tick_brain.evaluators import (
    FnEvaluator,
    LinearEvaluator,
    PowerEvaluator,
    SigmoidEvaluator,
)


class TestLinearEvaluator:
    """Test LinearEvaluator."""

    def test_default_is_identity(self):
        ev = LinearEvaluator()
        assert ev.evaluate(0.0) == pytest.approx(0.0)
        assert ev.evaluate(0.3) == pytest.approx(0.3)
        assert ev.evaluate(1.0) == pytest.approx(1.0)

    def test_clamps_outside_domain(self):
        ev = LinearEvaluator()
        assert ev.evaluate(-5.0) == pytest.approx(0.0)
        assert ev.evaluate(5.0) == pytest.approx(1.0)

    def test_inversed(self):
        ev = LinearEvaluator.inversed()
        assert ev.evaluate(0.0) == pytest.approx(1.0)
        assert ev.evaluate(0.25) == pytest.approx(0.75)
        assert ev.evaluate(1.0) == pytest.approx(0.0)
        assert ev.evaluate(2.0) == pytest.approx(0.0)

    def test_ranged(self):
        ev = LinearEvaluator.ranged(10.0, 20.0)
        assert ev.evaluate(15.0) == pytest.approx(0.5)
        assert ev.evaluate(0.0) == pytest.approx(0.0)
        assert ev.evaluate(30.0) == pytest.approx(1.0)

    def test_equal_x_raises(self):
        with pytest.raises(ValueError):
            LinearEvaluator(0.5, 0.0, 0.5, 1.0)

    def test_callable(self):
        assert LinearEvaluator()(0.4) == pytest.approx(0.4)


class TestPowerEvaluator:
    """Test PowerEvaluator."""

    def test_square(self):
        ev = PowerEvaluator()
        assert ev.evaluate(0.5) == pytest.approx(0.25)
        assert ev.evaluate(1.0) == pytest.approx(1.0)

    def test_power_is_clamped(self):
        assert PowerEvaluator(20000.0).power == 10000.0
        assert PowerEvaluator(-3.0).power == 0.0

    def test_input_is_clamped(self):
        ev = PowerEvaluator(3.0)
        assert ev.evaluate(2.0) == pytest.approx(1.0)
        assert ev.evaluate(-1.0) == pytest.approx(0.0)

    def test_ranged(self):
        ev = PowerEvaluator.ranged(2.0, 0.0, 10.0)
        assert ev.evaluate(5.0) == pytest.approx(0.25)


class TestSigmoidEvaluator:
    """Test SigmoidEvaluator."""

    def test_k_is_clamped(self):
        assert SigmoidEvaluator(1.0).k == pytest.approx(SigmoidEvaluator.K_LIMIT)
        assert SigmoidEvaluator(-1.0).k == pytest.approx(-SigmoidEvaluator.K_LIMIT)

    def test_endpoints_and_midpoint(self):
        ev = SigmoidEvaluator(-0.5)
        assert ev.evaluate(0.0) == pytest.approx(0.0)
        assert ev.evaluate(0.5) == pytest.approx(0.5)
        assert ev.evaluate(1.0) == pytest.approx(1.0)

    def test_zero_k_is_linear(self):
        ev = SigmoidEvaluator(0.0)
        assert ev.evaluate(0.25) == pytest.approx(0.25)
        assert ev.evaluate(0.75) == pytest.approx(0.75)

    def test_negative_k_is_s_shaped(self):
        ev = SigmoidEvaluator(-0.5)
        assert ev.evaluate(0.75) == pytest.approx(0.875)
        assert ev.evaluate(0.25) == pytest.approx(0.125)

    def test_positive_k_flattens_middle(self):
        ev = SigmoidEvaluator(0.5)
        assert ev.evaluate(0.75) == pytest.approx(0.625)

    def test_monotonic(self):
        ev = SigmoidEvaluator(-0.8)
        xs = [i / 20 for i in range(21)]
        ys = [ev.evaluate(x) for x in xs]
        assert ys == sorted(ys)

    def test_output_stays_in_range(self):
        ev = SigmoidEvaluator.ranged(-0.9, 10.0, 20.0)
        for x in (-100.0, 10.0, 12.5, 15.0, 17.5, 20.0, 100.0):
            assert 0.0 <= ev.evaluate(x) <= 1.0


class TestFnEvaluator:
    """Test FnEvaluator."""

    def test_wraps_callable(self):
        ev = FnEvaluator(lambda x: x * 2)
        assert ev.evaluate(0.2) == pytest.approx(0.4)
