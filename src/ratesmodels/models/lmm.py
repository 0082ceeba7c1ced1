"""
Displaced diffusion Libor Market Model with deterministic multiplicative spreads.

The model evolves the forward rates of the discount curve on consecutive
Ibor periods [t_i, t_{i+1}]. Each forward is a displaced log-normal process
with volatility vector gamma_i exp(a t) over the model factors. The Ibor
rate of a period is recovered from the discount forward through a
deterministic multiplicative spread:

    ibor_i = (spread_i (1 + delta_i f_i) - 1) / delta_i

Parameter order of the indexed view: by period, and in a period by factor.
"""

from dataclasses import dataclass, replace
from typing import Tuple, Union

import numpy as np

from ..errors import ParameterValidationError
from .parameters import ParameterizedModelMixin, frozen_array


# Tolerance on times to treat two dates as equal (long week-ends)
DEFAULT_TIME_TOLERANCE = 5.0 / 350.0


@dataclass(frozen=True, eq=False)
class LmmParameters(ParameterizedModelMixin):
    """
    LMM parameters.

    Attributes:
        ibor_times: Start/end times of the model periods, size n + 1
        accrual_factors: Accrual factor of each period, size n
        multiplicative_spreads: Ibor over discount spread of each period, size n
        displacements: Displacement of each period, size n
        volatilities: Factor loadings, shape (n, number of factors)
        mean_reversion: Time dependency exp(a t) of the loadings
        time_tolerance: Tolerance used to match instrument times to ibor_times
    """
    ibor_times: np.ndarray
    accrual_factors: np.ndarray
    multiplicative_spreads: np.ndarray
    displacements: np.ndarray
    volatilities: np.ndarray
    mean_reversion: float = 0.0
    time_tolerance: float = DEFAULT_TIME_TOLERANCE

    def __post_init__(self):
        for name in ("ibor_times", "accrual_factors", "multiplicative_spreads", "displacements"):
            object.__setattr__(self, name, frozen_array(getattr(self, name)))
        object.__setattr__(self, "volatilities", frozen_array(self.volatilities, ndim=2))
        n = len(self.ibor_times) - 1
        if n < 1:
            raise ParameterValidationError("LMM needs at least one period")
        if np.any(np.diff(self.ibor_times) <= 0):
            raise ParameterValidationError("Ibor times should be strictly increasing")
        for name in ("accrual_factors", "multiplicative_spreads", "displacements"):
            if len(getattr(self, name)) != n:
                raise ParameterValidationError(
                    f"{name} size {len(getattr(self, name))} should be the number of periods {n}"
                )
        if self.volatilities.shape[0] != n:
            raise ParameterValidationError(
                f"Volatilities have {self.volatilities.shape[0]} rows for {n} periods"
            )
        if np.any(self.accrual_factors <= 0):
            raise ParameterValidationError("Accrual factors should be strictly positive")

    @property
    def period_count(self) -> int:
        return self.volatilities.shape[0]

    @property
    def factor_count(self) -> int:
        return self.volatilities.shape[1]

    def parameter_count(self) -> int:
        return self.volatilities.size

    def _position(self, index: int) -> Tuple[int, int]:
        self._check_index(index)
        return divmod(index, self.factor_count)

    def get_parameter(self, index: int) -> float:
        return float(self.volatilities[self._position(index)])

    def parameter_metadata(self, index: int) -> str:
        period, factor = self._position(index)
        return f"volatility-{period}-{factor}"

    def with_replaced(self, index: int, value: float) -> "LmmParameters":
        vol = self.volatilities.copy()
        vol[self._position(index)] = value
        return replace(self, volatilities=vol)

    def with_volatilities(self, volatilities: np.ndarray) -> "LmmParameters":
        return replace(self, volatilities=volatilities)

    def ibor_time_index(self, times: Union[float, np.ndarray]) -> np.ndarray:
        """
        Index of the first ibor time not before each time minus the tolerance.

        An exact match (within tolerance) returns the index of that ibor time.
        """
        return np.searchsorted(self.ibor_times, np.asarray(times, dtype=np.float64) - self.time_tolerance,
                               side="left")

    def ibor_rate_from_dsc_forwards(self, dsc_forward, index):
        """Ibor rate of period index given the discount forward(s) of the period."""
        delta = self.accrual_factors[index]
        return (self.multiplicative_spreads[index] * (1.0 + delta * dsc_forward) - 1.0) / delta


__all__ = ["DEFAULT_TIME_TOLERANCE", "LmmParameters"]
