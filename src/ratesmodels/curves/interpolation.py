"""
One-dimensional linear interpolation with configurable extrapolation.

Extrapolation on each side is "flat" (boundary value) or "linear"
(boundary slope). Used for curve zero rates and for the multipliers of the
N-level LMM calibrator between its swaption nodes.
"""

from abc import ABC, abstractmethod
from typing import Optional
import numpy as np


EXTRAPOLATIONS = ("flat", "linear")


class Interpolator(ABC):
    """
    Interpolation on sorted nodes.

    Args:
        left_extrapolation: "flat" or "linear" below the first node
        right_extrapolation: "flat" or "linear" above the last node
    """

    def __init__(self, left_extrapolation: str = "flat", right_extrapolation: str = "flat"):
        for side in (left_extrapolation, right_extrapolation):
            if side not in EXTRAPOLATIONS:
                raise ValueError(f"Unknown extrapolation: {side}. Expected one of {EXTRAPOLATIONS}")
        self.left_extrapolation = left_extrapolation
        self.right_extrapolation = right_extrapolation
        self.times: Optional[np.ndarray] = None
        self.values: Optional[np.ndarray] = None

    def fit(self, times: np.ndarray, values: np.ndarray) -> "Interpolator":
        """
        Store the nodes, sorted by abscissa.

        Returns:
            self, to allow chaining

        Raises:
            ValueError: On size mismatch, fewer than two nodes or repeated abscissas
        """
        times = np.asarray(times, dtype=np.float64)
        values = np.asarray(values, dtype=np.float64)
        if len(times) != len(values):
            raise ValueError("Times and values must have same length")
        if len(times) < 2:
            raise ValueError("Need at least 2 points for interpolation")
        order = np.argsort(times)
        self.times = times[order]
        self.values = values[order]
        if np.any(np.diff(self.times) <= 0):
            raise ValueError("Node abscissas must be distinct")
        return self

    def interpolate(self, t: float) -> float:
        """Value at t, extrapolating outside the nodes."""
        if self.times is None:
            raise RuntimeError("Interpolator not fitted")
        if t < self.times[0]:
            if self.left_extrapolation == "flat":
                return float(self.values[0])
            return float(self.values[0] + self._slope_at(0) * (t - self.times[0]))
        if t > self.times[-1]:
            if self.right_extrapolation == "flat":
                return float(self.values[-1])
            return float(self.values[-1] + self._slope_at(len(self.times) - 1) * (t - self.times[-1]))
        return self._interpolate_inside(t)

    def __call__(self, t: float) -> float:
        return self.interpolate(t)

    def _bracket(self, t: float) -> int:
        """Index i such that times[i] <= t <= times[i + 1]."""
        i = np.searchsorted(self.times, t, side='right') - 1
        return int(max(0, min(i, len(self.times) - 2)))

    @abstractmethod
    def _interpolate_inside(self, t: float) -> float:
        pass

    @abstractmethod
    def _slope_at(self, node: int) -> float:
        """Slope at a boundary node, used by linear extrapolation."""
        pass


class LinearInterpolator(Interpolator):
    """Piecewise linear interpolation between nodes."""

    def _interpolate_inside(self, t: float) -> float:
        i = self._bracket(t)
        w = (t - self.times[i]) / (self.times[i + 1] - self.times[i])
        return float(self.values[i] + w * (self.values[i + 1] - self.values[i]))

    def _slope_at(self, node: int) -> float:
        i = min(node, len(self.times) - 2)
        return float((self.values[i + 1] - self.values[i]) / (self.times[i + 1] - self.times[i]))


def create_interpolator(
    method: str,
    left_extrapolation: str = "flat",
    right_extrapolation: str = "flat"
) -> Interpolator:
    """
    Interpolator by name; only "linear" is available.

    Raises:
        ValueError: For an unknown method or extrapolation
    """
    if method.lower() in ("linear", "lin"):
        return LinearInterpolator(left_extrapolation, right_extrapolation)
    raise ValueError(f"Unknown interpolation method: {method}")


__all__ = ["Interpolator", "LinearInterpolator", "create_interpolator"]
