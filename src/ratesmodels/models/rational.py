"""
Rational multi-curve models with Hull-White shaped coefficients.

Provides:
- RationalOneFactorParameters: one martingale A(t) = exp(a X_t - a^2 t / 2) - 1
- RationalTwoFactorParameters: two correlated martingales, Ibor coefficients
  proportional to the discount coefficient
- swap_coefficients: constant and martingale coefficients of a fixed versus
  Ibor swap at its exercise date

In both models the discount factor at time t for maturity u is

    P(t, u) = (P(0, u) + b0(u) A(t)) / (P(0, t) + b0(t) A(t))

and an Ibor period pays a value linear in the martingales, with
coefficients b1 (and b2) depending on the index period only.
"""

from dataclasses import dataclass, replace
from datetime import date

import numpy as np

from ..errors import ParameterValidationError
from ..products.swap import IborPeriod, Swap
from .parameters import ParameterizedModelMixin, validate_correlation, validate_positive


@dataclass(frozen=True, eq=False)
class RationalOneFactorParameters(ParameterizedModelMixin):
    """
    Rational one-factor model with simple Hull-White shaped b0.

    b0(u) = (b00 + eta / (a kappa) (1 - exp(-kappa u))) P(0, u)
    b1(period) = (b0(effective) - b0(maturity)) / delta

    Attributes:
        a: Volatility of the log-normal martingale (> 0)
        b00: Constant part of the shape
        eta: Amplitude of the Hull-White shape
        kappa: Mean reversion of the Hull-White shape (> 0)
    """
    a: float
    b00: float
    eta: float
    kappa: float

    _LABELS = ("a", "b_0_0", "eta", "kappa")

    def __post_init__(self):
        validate_positive(self.a, "a")
        validate_positive(self.kappa, "kappa")

    def parameter_count(self) -> int:
        return 4

    def get_parameter(self, index: int) -> float:
        self._check_index(index)
        return (self.a, self.b00, self.eta, self.kappa)[index]

    def parameter_metadata(self, index: int) -> str:
        self._check_index(index)
        return self._LABELS[index]

    def with_replaced(self, index: int, value: float) -> "RationalOneFactorParameters":
        self._check_index(index)
        return replace(self, **{("a", "b00", "eta", "kappa")[index]: value})

    def b0(self, env, d: date) -> float:
        u = env.time(d)
        shape = self.b00 + self.eta / (self.a * self.kappa) * (1.0 - np.exp(-self.kappa * u))
        return float(shape * env.discount_factor(d))

    def b1(self, env, period: IborPeriod) -> float:
        return (self.b0(env, period.effective_date) - self.b0(env, period.maturity_date)) / period.index_year_fraction

    def martingale(self, t: float, x: np.ndarray) -> np.ndarray:
        """A(t) for standard normal draws x."""
        return np.exp(self.a * np.sqrt(t) * x - 0.5 * self.a * self.a * t) - 1.0

    def discount_factor(self, env, t_date: date, u_date: date, x: np.ndarray) -> np.ndarray:
        """
        Discount factor P(t, u) in the state x of the factor at t.

        Args:
            env: RatesEnvironment
            t_date: Date at which the discount factor is observed
            u_date: Maturity of the discount factor
            x: Standard normal draws of the factor at t

        Returns:
            Array of discount factors, one per draw
        """
        a_t = self.martingale(env.time(t_date), np.asarray(x, dtype=np.float64))
        return ((env.discount_factor(u_date) + self.b0(env, u_date) * a_t)
                / (env.discount_factor(t_date) + self.b0(env, t_date) * a_t))


@dataclass(frozen=True, eq=False)
class RationalTwoFactorParameters(ParameterizedModelMixin):
    """
    Rational two-factor model with Hull-White shaped discount coefficient.

    b0(u) = (b00 - eta1 / (a1 kappa1) (1 - exp(-kappa1 u))
                 + eta2 / (a1 kappa2) (1 - exp(-kappa2 u))) P(0, u)
    b1(period) = c1 (b0(effective) - b0(maturity)) / delta
    b2(period) = c2 (b0(effective) - b0(maturity)) / delta
    """
    a1: float
    a2: float
    correlation: float
    b00: float
    eta1: float
    kappa1: float
    eta2: float
    kappa2: float
    c1: float
    c2: float

    _FIELDS = ("a1", "a2", "correlation", "b00", "eta1", "kappa1", "eta2", "kappa2", "c1", "c2")
    _LABELS = ("a1", "a2", "correlation", "b00", "eta1", "kappa1", "eta2", "kappa2", "c1", "c2")

    def __post_init__(self):
        validate_positive(self.a1, "a1")
        validate_positive(self.a2, "a2")
        validate_correlation(self.correlation)
        validate_positive(self.kappa1, "kappa1")
        validate_positive(self.kappa2, "kappa2")
        if not np.isfinite([self.b00, self.eta1, self.eta2, self.c1, self.c2]).all():
            raise ParameterValidationError("Rational two-factor coefficients must be finite")

    def parameter_count(self) -> int:
        return len(self._FIELDS)

    def get_parameter(self, index: int) -> float:
        self._check_index(index)
        return getattr(self, self._FIELDS[index])

    def parameter_metadata(self, index: int) -> str:
        self._check_index(index)
        return self._LABELS[index]

    def with_replaced(self, index: int, value: float) -> "RationalTwoFactorParameters":
        self._check_index(index)
        return replace(self, **{self._FIELDS[index]: value})

    def b0(self, env, d: date) -> float:
        u = env.time(d)
        shape = (self.b00
                 - self.eta1 / (self.a1 * self.kappa1) * (1.0 - np.exp(-self.kappa1 * u))
                 + self.eta2 / (self.a1 * self.kappa2) * (1.0 - np.exp(-self.kappa2 * u)))
        return float(shape * env.discount_factor(d))

    def _b0_difference(self, env, period: IborPeriod) -> float:
        return (self.b0(env, period.effective_date) - self.b0(env, period.maturity_date)) / period.index_year_fraction

    def b1(self, env, period: IborPeriod) -> float:
        return self.c1 * self._b0_difference(env, period)

    def b2(self, env, period: IborPeriod) -> float:
        return self.c2 * self._b0_difference(env, period)


def swap_coefficients(swap: Swap, env, model) -> np.ndarray:
    """
    Coefficients of the swap value at exercise in the model martingales.

    The value at exercise, discounted to today, is
    c[0] + c[1] (A1 + 1) (+ c[2] (A2 + 1) for two factors).

    Args:
        swap: Fixed versus Ibor swap
        env: RatesEnvironment
        model: RationalOneFactorParameters or RationalTwoFactorParameters

    Returns:
        Array [c0, c1] or [c0, c1, c2]
    """
    two_factor = isinstance(model, RationalTwoFactorParameters)
    c = np.zeros(3 if two_factor else 2)
    for period in swap.fixed_leg().periods:
        amount = period.notional * period.rate * period.year_fraction
        c[0] += amount * env.discount_factor(period.payment_date)
        c[1] += amount * model.b0(env, period.payment_date)
    for period in swap.ibor_leg().periods:
        accrual = period.notional * period.year_fraction
        c[0] += accrual * env.ibor_forward_rate(period.index, period.effective_date, period.maturity_date) \
            * env.discount_factor(period.payment_date)
        c[1] += accrual * model.b1(env, period)
        if two_factor:
            c[2] += accrual * model.b2(env, period)
        if period.spread != 0.0:
            c[0] += accrual * period.spread * env.discount_factor(period.payment_date)
            c[1] += accrual * period.spread * model.b0(env, period.payment_date)
    c[0] -= np.sum(c[1:])
    return c


__all__ = [
    "RationalOneFactorParameters",
    "RationalTwoFactorParameters",
    "swap_coefficients",
]
