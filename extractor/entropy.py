"""
Entropy of theta and the change between successive core states.
"""

import math
from typing import Optional

import numpy as np

from models import Theta


def entropy(theta: Theta) -> float:
    """Shannon entropy (bits) of theta's normalized feature distribution."""
    if theta.is_empty():
        return 0.0
    counts = theta.to_array()
    p = counts / counts.sum()
    return float(-np.sum(p * np.log2(p)))


def delta(previous: float, current: float) -> float:
    """Absolute entropy change. Symmetric."""
    return abs(current - previous)


class EntropyTracker:
    """
    History of entropy readings for one extraction run.

    Convergence is judged on the two most recent readings only:
    converged means "latest delta <= threshold now", with no smoothing
    window, so a dip below threshold ends extraction immediately.
    """

    def __init__(self, threshold: float = 0.01):
        self.threshold = threshold
        self._readings: list[float] = []

    def record(self, theta: Theta) -> float:
        """Take a reading for the current theta."""
        reading = entropy(theta)
        self._readings.append(reading)
        return reading

    @property
    def readings(self) -> list[float]:
        return list(self._readings)

    @property
    def current(self) -> Optional[float]:
        return self._readings[-1] if self._readings else None

    @property
    def latest_delta(self) -> float:
        """Delta between the last two readings; inf until there are two."""
        if len(self._readings) < 2:
            return math.inf
        return delta(self._readings[-2], self._readings[-1])

    def converged(self, threshold: Optional[float] = None) -> bool:
        limit = self.threshold if threshold is None else threshold
        return self.latest_delta <= limit

    def reset(self) -> None:
        self._readings.clear()
