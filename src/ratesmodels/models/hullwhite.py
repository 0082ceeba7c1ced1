"""
One-factor Hull-White model parameters with piecewise-constant volatility.

Parameter order of the indexed view:
    0: mean reversion, 1 .. n: volatility
"""

from dataclasses import dataclass, replace
from typing import Sequence

import numpy as np

from .parameters import (
    ParameterizedModelMixin,
    frozen_array,
    validate_positive,
    validate_time_grid,
    volatility_time_grid,
)


@dataclass(frozen=True, eq=False)
class HullWhiteParameters(ParameterizedModelMixin):
    """
    Hull-White one-factor parameters.

    Attributes:
        mean_reversion: Mean reversion (> 0)
        volatility: Volatility per grid bucket
        volatility_time: Grid [0, t_1, ..., sentinel], size = volatility size + 1
    """
    mean_reversion: float
    volatility: np.ndarray
    volatility_time: np.ndarray

    def __post_init__(self):
        object.__setattr__(self, "volatility", frozen_array(self.volatility))
        object.__setattr__(self, "volatility_time", frozen_array(self.volatility_time))
        validate_positive(self.mean_reversion, "mean_reversion")
        validate_time_grid(self.volatility_time, len(self.volatility))

    @classmethod
    def of(
        cls,
        mean_reversion: float,
        volatility: Sequence[float],
        interior_times: Sequence[float] = ()
    ) -> "HullWhiteParameters":
        """Build from the interior pillars; 0 and the sentinel are added."""
        return cls(mean_reversion, volatility, volatility_time_grid(interior_times))

    @classmethod
    def constant(cls, mean_reversion: float, volatility: float) -> "HullWhiteParameters":
        return cls.of(mean_reversion, [volatility])

    def parameter_count(self) -> int:
        return 1 + len(self.volatility)

    def get_parameter(self, index: int) -> float:
        self._check_index(index)
        if index == 0:
            return self.mean_reversion
        return float(self.volatility[index - 1])

    def parameter_metadata(self, index: int) -> str:
        self._check_index(index)
        if index == 0:
            return "MeanReversion"
        return f"volatility-{index - 1}"

    def with_replaced(self, index: int, value: float) -> "HullWhiteParameters":
        self._check_index(index)
        if index == 0:
            return replace(self, mean_reversion=value)
        vol = self.volatility.copy()
        vol[index - 1] = value
        return replace(self, volatility=vol)


__all__ = ["HullWhiteParameters"]
