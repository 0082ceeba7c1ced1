"""
Two-factor additive Gaussian (G2++) model parameters.

Dynamics of the pseudo-discount factors are driven by two Ornstein-Uhlenbeck
factors with mean reversions kappa1, kappa2, piecewise-constant volatilities
on a common time grid and a constant correlation.

Parameter order of the indexed view:
    0: correlation, 1: kappa1, 2: kappa2,
    3 .. 3+n-1: volatility1, 3+n .. 3+2n-1: volatility2
"""

from dataclasses import dataclass, replace
from typing import Sequence

import numpy as np

from ..errors import ParameterValidationError
from .parameters import (
    ParameterizedModelMixin,
    frozen_array,
    validate_correlation,
    validate_positive,
    validate_time_grid,
    volatility_time_grid,
)


@dataclass(frozen=True, eq=False)
class G2ppParameters(ParameterizedModelMixin):
    """
    G2++ parameters with piecewise-constant volatilities.

    Attributes:
        correlation: Correlation between the two factors, in [-1, 1]
        kappa1: Mean reversion of the first factor (> 0)
        kappa2: Mean reversion of the second factor (> 0)
        volatility1: Volatilities of the first factor, one per grid bucket
        volatility2: Volatilities of the second factor, one per grid bucket
        volatility_time: Grid [0, t_1, ..., sentinel], size = volatility size + 1
    """
    correlation: float
    kappa1: float
    kappa2: float
    volatility1: np.ndarray
    volatility2: np.ndarray
    volatility_time: np.ndarray

    def __post_init__(self):
        object.__setattr__(self, "volatility1", frozen_array(self.volatility1))
        object.__setattr__(self, "volatility2", frozen_array(self.volatility2))
        object.__setattr__(self, "volatility_time", frozen_array(self.volatility_time))
        validate_correlation(self.correlation)
        validate_positive(self.kappa1, "kappa1")
        validate_positive(self.kappa2, "kappa2")
        if len(self.volatility1) != len(self.volatility2):
            raise ParameterValidationError("Both factors need the same number of volatilities")
        validate_time_grid(self.volatility_time, len(self.volatility1))

    @classmethod
    def of(
        cls,
        correlation: float,
        kappa1: float,
        kappa2: float,
        volatility1: Sequence[float],
        volatility2: Sequence[float],
        interior_times: Sequence[float] = ()
    ) -> "G2ppParameters":
        """Build from the interior pillars; 0 and the sentinel are added."""
        return cls(correlation, kappa1, kappa2, volatility1, volatility2,
                   volatility_time_grid(interior_times))

    @property
    def mean_reversions(self) -> np.ndarray:
        return np.array([self.kappa1, self.kappa2])

    @property
    def volatilities(self) -> np.ndarray:
        """Volatilities as a (2, n) array, factor by row."""
        return np.vstack([self.volatility1, self.volatility2])

    def parameter_count(self) -> int:
        return 3 + 2 * len(self.volatility1)

    def get_parameter(self, index: int) -> float:
        self._check_index(index)
        n = len(self.volatility1)
        if index == 0:
            return self.correlation
        if index == 1:
            return self.kappa1
        if index == 2:
            return self.kappa2
        if index < 3 + n:
            return float(self.volatility1[index - 3])
        return float(self.volatility2[index - 3 - n])

    def parameter_metadata(self, index: int) -> str:
        self._check_index(index)
        n = len(self.volatility1)
        if index < 3:
            return ("correlation", "kappa1", "kappa2")[index]
        if index < 3 + n:
            return f"volatility1-{index - 3}"
        return f"volatility2-{index - 3 - n}"

    def with_replaced(self, index: int, value: float) -> "G2ppParameters":
        self._check_index(index)
        n = len(self.volatility1)
        if index == 0:
            return replace(self, correlation=value)
        if index == 1:
            return replace(self, kappa1=value)
        if index == 2:
            return replace(self, kappa2=value)
        if index < 3 + n:
            vol = self.volatility1.copy()
            vol[index - 3] = value
            return replace(self, volatility1=vol)
        vol = self.volatility2.copy()
        vol[index - 3 - n] = value
        return replace(self, volatility2=vol)


__all__ = ["G2ppParameters"]
