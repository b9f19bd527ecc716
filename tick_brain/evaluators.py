"""Evaluators - curves that reshape a raw value before it becomes a score.

Each evaluator maps the segment between two calibration points
``(xa, ya)`` and ``(xb, yb)``. Inputs outside ``[xa, xb]`` are clamped, so
outputs always stay between ``ya`` and ``yb``.
"""
from __future__ import annotations

import abc
from typing import Callable


def _clamp(x: float, lo: float, hi: float) -> float:
    if lo > hi:
        lo, hi = hi, lo
    return max(lo, min(hi, x))


class Evaluator(abc.ABC):
    """A pure ``float -> float`` mapping."""

    @abc.abstractmethod
    def evaluate(self, value: float) -> float:
        ...

    def __call__(self, value: float) -> float:
        return self.evaluate(value)


class FnEvaluator(Evaluator):
    """Wraps any callable as an evaluator."""

    __slots__ = ("fn",)

    def __init__(self, fn: Callable[[float], float]) -> None:
        self.fn = fn

    def evaluate(self, value: float) -> float:
        return self.fn(value)


class LinearEvaluator(Evaluator):
    """Straight line through both calibration points."""

    __slots__ = ("xa", "ya", "xb", "yb", "_slope")

    def __init__(
        self, xa: float = 0.0, ya: float = 0.0, xb: float = 1.0, yb: float = 1.0
    ) -> None:
        if xa == xb:
            raise ValueError("LinearEvaluator needs two distinct x values")
        self.xa = xa
        self.ya = ya
        self.xb = xb
        self.yb = yb
        self._slope = (yb - ya) / (xb - xa)

    @classmethod
    def inversed(cls) -> LinearEvaluator:
        return cls(0.0, 1.0, 1.0, 0.0)

    @classmethod
    def ranged(cls, lo: float, hi: float) -> LinearEvaluator:
        return cls(lo, 0.0, hi, 1.0)

    def evaluate(self, value: float) -> float:
        return _clamp(self.ya + self._slope * (value - self.xa), self.ya, self.yb)

    def __repr__(self) -> str:
        return f"LinearEvaluator(({self.xa}, {self.ya}) -> ({self.xb}, {self.yb}))"


class PowerEvaluator(Evaluator):
    """``dy * ((x - xa) / dx) ** power + ya``.

    ``power`` is clamped to ``[0, 10000]``.
    """

    __slots__ = ("power", "xa", "ya", "xb", "yb")

    def __init__(
        self,
        power: float = 2.0,
        xa: float = 0.0,
        ya: float = 0.0,
        xb: float = 1.0,
        yb: float = 1.0,
    ) -> None:
        if xa == xb:
            raise ValueError("PowerEvaluator needs two distinct x values")
        self.power = _clamp(power, 0.0, 10000.0)
        self.xa = xa
        self.ya = ya
        self.xb = xb
        self.yb = yb

    @classmethod
    def ranged(cls, power: float, lo: float, hi: float) -> PowerEvaluator:
        return cls(power, lo, 0.0, hi, 1.0)

    def evaluate(self, value: float) -> float:
        cx = _clamp(value, self.xa, self.xb)
        t = (cx - self.xa) / (self.xb - self.xa)
        return (self.yb - self.ya) * t**self.power + self.ya

    def __repr__(self) -> str:
        return f"PowerEvaluator(power={self.power})"


class SigmoidEvaluator(Evaluator):
    """Tunable S-curve through both calibration points.

    ``k`` controls curvature: negative values give an S, positive values an
    inverted S, 0 is a straight line. It is clamped to the open interval
    ``(-1, 1)``; the curve degenerates at exactly +-1.
    """

    __slots__ = ("k", "xa", "ya", "xb", "yb")

    K_LIMIT = 0.99999

    def __init__(
        self,
        k: float = -0.5,
        xa: float = 0.0,
        ya: float = 0.0,
        xb: float = 1.0,
        yb: float = 1.0,
    ) -> None:
        if xa == xb:
            raise ValueError("SigmoidEvaluator needs two distinct x values")
        self.k = _clamp(k, -self.K_LIMIT, self.K_LIMIT)
        self.xa = xa
        self.ya = ya
        self.xb = xb
        self.yb = yb

    @classmethod
    def ranged(cls, k: float, lo: float, hi: float) -> SigmoidEvaluator:
        return cls(k, lo, 0.0, hi, 1.0)

    def evaluate(self, value: float) -> float:
        x_mean = (self.xa + self.xb) / 2.0
        y_mean = (self.ya + self.yb) / 2.0
        half_dy = (self.yb - self.ya) / 2.0
        two_over_dx = abs(2.0 / (self.xb - self.xa))

        # t runs over [-1, 1] across the input domain.
        t = two_over_dx * (_clamp(value, self.xa, self.xb) - x_mean)
        shaped = t * (1.0 - self.k) / (self.k * (1.0 - 2.0 * abs(t)) + 1.0)
        return _clamp(half_dy * shaped + y_mean, self.ya, self.yb)

    def __repr__(self) -> str:
        return f"SigmoidEvaluator(k={self.k})"
