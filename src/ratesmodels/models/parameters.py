"""
Generic indexed-parameter view shared by all model parameter sets.

Provides:
- ParameterizedModel: protocol (count / get / metadata / with_replaced)
- ParameterizedModelMixin: vector and pandas views built on the protocol
- Piecewise-constant grid helpers: grid construction and validation,
  bucket search and refined partition of an integration interval

Every concrete parameter set is an immutable dataclass; calibration and
sensitivity code only go through the indexed view.
"""

from typing import Protocol, Sequence, Tuple, runtime_checkable
import numpy as np
import pandas as pd

from ..errors import ParameterValidationError


# Last node of piecewise-constant grids, standing for infinity
VOLATILITY_TIME_SENTINEL = 1000.0


@runtime_checkable
class ParameterizedModel(Protocol):
    """Flat indexed view of the parameters of a model."""

    def parameter_count(self) -> int:
        ...

    def get_parameter(self, index: int) -> float:
        ...

    def parameter_metadata(self, index: int) -> str:
        ...

    def with_replaced(self, index: int, value: float) -> "ParameterizedModel":
        ...


class ParameterizedModelMixin:
    """Views derived from the four protocol methods."""

    def parameter_vector(self) -> np.ndarray:
        """All parameters in index order."""
        return np.array([self.get_parameter(i) for i in range(self.parameter_count())])

    def parameter_labels(self) -> list:
        return [self.parameter_metadata(i) for i in range(self.parameter_count())]

    def to_series(self) -> pd.Series:
        """Parameters as a pandas Series indexed by their metadata."""
        return pd.Series(self.parameter_vector(), index=self.parameter_labels(), name="value")

    def with_parameters(self, values: Sequence[float]):
        """New instance with all parameters replaced, in index order."""
        if len(values) != self.parameter_count():
            raise ValueError(
                f"Expected {self.parameter_count()} parameters, got {len(values)}"
            )
        model = self
        for i, value in enumerate(values):
            model = model.with_replaced(i, float(value))
        return model

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self.parameter_count():
            raise IndexError(
                f"Parameter index {index} out of range [0, {self.parameter_count()})"
            )


def frozen_array(values, ndim: int = 1) -> np.ndarray:
    """Read-only float copy of an array-like."""
    array = np.array(values, dtype=np.float64)
    if array.ndim != ndim:
        raise ParameterValidationError(f"Expected {ndim}-dimensional array, got shape {array.shape}")
    array.setflags(write=False)
    return array


def volatility_time_grid(interior_times: Sequence[float]) -> np.ndarray:
    """Full grid [0, interior times..., sentinel] from the interior pillars."""
    return np.concatenate(([0.0], np.asarray(interior_times, dtype=np.float64), [VOLATILITY_TIME_SENTINEL]))


def validate_time_grid(volatility_time: np.ndarray, n_volatilities: int) -> None:
    """
    Check the invariants of a piecewise-constant volatility grid.

    Raises:
        ParameterValidationError: If grid[0] != 0, the grid is not strictly
            increasing, or its size is not the volatility size + 1
    """
    if len(volatility_time) != n_volatilities + 1:
        raise ParameterValidationError(
            f"Volatility time grid size {len(volatility_time)} should be "
            f"volatility size + 1 = {n_volatilities + 1}"
        )
    if volatility_time[0] != 0.0:
        raise ParameterValidationError(f"Volatility time grid should start at 0, got {volatility_time[0]}")
    if np.any(np.diff(volatility_time) <= 0):
        raise ParameterValidationError("Volatility time grid should be strictly increasing")


def validate_positive(value: float, name: str) -> None:
    if not value > 0:
        raise ParameterValidationError(f"{name} should be strictly positive, got {value}")


def validate_correlation(value: float) -> None:
    if not -1.0 <= value <= 1.0:
        raise ParameterValidationError(f"Correlation should be in [-1, 1], got {value}")


def bucket_index(volatility_time: np.ndarray, x: float) -> int:
    """
    Index i such that volatility_time[i - 1] <= x < volatility_time[i].

    The volatility applying at x is volatility[i - 1].
    """
    return int(np.searchsorted(volatility_time, x, side="right"))


def refined_partition(volatility_time: np.ndarray, start: float, end: float) -> Tuple[np.ndarray, int]:
    """
    Partition of [start, end] by the interior grid pillars.

    Args:
        volatility_time: Full grid including 0 and the sentinel
        start: Start of the integration interval
        end: End of the integration interval

    Returns:
        Tuple (s, index_start) with s = [start, pillars in (start, end), end];
        the volatility on [s[k], s[k + 1]] is volatility[index_start - 1 + k]
    """
    if end < start:
        raise ValueError(f"Integration end {end} is before start {start}")
    if end >= volatility_time[-1]:
        raise ValueError(f"Integration end {end} beyond the last grid time {volatility_time[-1]}")
    index_start = bucket_index(volatility_time, start)
    index_end = bucket_index(volatility_time, end)
    s = np.concatenate(([start], volatility_time[index_start:index_end], [end]))
    return s, index_start


def bucket_volatilities(volatility: np.ndarray, index_start: int, n_periods: int) -> np.ndarray:
    """Volatilities applying on the periods of a refined partition."""
    return volatility[index_start - 1:index_start - 1 + n_periods]


__all__ = [
    "VOLATILITY_TIME_SENTINEL",
    "ParameterizedModel",
    "ParameterizedModelMixin",
    "frozen_array",
    "volatility_time_grid",
    "validate_time_grid",
    "validate_positive",
    "validate_correlation",
    "bucket_index",
    "refined_partition",
    "bucket_volatilities",
]
