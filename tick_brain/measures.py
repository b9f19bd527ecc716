"""Measures - ways to combine weighted child scores into one value.

Every measure takes a sequence of ``(score, weight)`` pairs in child order.
"""
from __future__ import annotations

import abc
import math
from typing import Sequence

WeightedScore = tuple[float, float]


class Measure(abc.ABC):
    @abc.abstractmethod
    def calculate(self, inputs: Sequence[WeightedScore]) -> float:
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class WeightedSum(Measure):
    """Sum of ``score * weight``."""

    def calculate(self, inputs: Sequence[WeightedScore]) -> float:
        return sum(score * weight for score, weight in inputs)


class WeightedProduct(Measure):
    """Product of ``score * weight``."""

    def calculate(self, inputs: Sequence[WeightedScore]) -> float:
        return math.prod(score * weight for score, weight in inputs)


class ChebyshevDistance(Measure):
    """Largest ``score * weight``, or 0 with no inputs."""

    def calculate(self, inputs: Sequence[WeightedScore]) -> float:
        return max((score * weight for score, weight in inputs), default=0.0)


class WeightedMeasure(Measure):
    """Root of the weight-normalized sum of squared scores.

    Returns 0 when the weights sum to 0.
    """

    def calculate(self, inputs: Sequence[WeightedScore]) -> float:
        wsum = sum(weight for _, weight in inputs)
        if wsum == 0.0:
            return 0.0
        total = sum(weight / wsum * score**2 for score, weight in inputs)
        # Negative weights can push the blend below zero.
        return math.sqrt(max(0.0, total))
