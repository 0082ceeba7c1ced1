"""
Pieces shared by the CMS period pricers.

Provides:
- settled_value: value of a period already paid or already fixed
- underlying_legs: fixed and Ibor legs of a CMS underlying swap
- SwapRateRatio: swap rate at the fixing date in Hull-White as the ratio
  B(x) / C(x) of sums of exponentials in the Gaussian factor
- swap_rate_ratio: build the ratio of a CMS period
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple

import numpy as np

from ..decomposition.cash_flow_equivalent import (
    cash_flow_equivalent_fixed_leg,
    cash_flow_equivalent_ibor_leg,
)
from ..models.hullwhite import HullWhiteParameters
from ..models.hullwhite_formulas import alpha, alphas
from ..products.cms import CmsPeriod
from ..products.swap import LegType, Swap, SwapLeg


# Below this first derivative the swap rate does not depend on the factor
SLOPE_TOLERANCE = 1e-12


def settled_value(cms: CmsPeriod, env) -> Optional[float]:
    """
    Value of a period whose fixing is known, None when it is still to fix.

    A period paid before the valuation date is worth 0. A period fixed on
    or before the valuation date pays its payoff on the historical fixing.

    Raises:
        MissingFixingError: If the period has fixed and the fixing is missing
    """
    if cms.payment_date < env.valuation_date:
        return 0.0
    if cms.fixing_date > env.valuation_date:
        return None
    fixing = env.fixing(cms.index.name, cms.fixing_date)
    payoff = float(cms.payoff(fixing))
    return cms.notional * cms.year_fraction * payoff * env.discount_factor(cms.payment_date)


def underlying_legs(swap: Swap) -> Tuple[SwapLeg, SwapLeg]:
    """
    Fixed and Ibor legs of a CMS underlying.

    Raises:
        ValueError: If the swap does not have exactly one leg of each type
    """
    fixed = swap.legs_of_type(LegType.FIXED)
    if len(fixed) != 1:
        raise ValueError("swap must have one fixed leg")
    ibor = swap.legs_of_type(LegType.IBOR)
    if len(ibor) != 1:
        raise ValueError("swap must have one Ibor leg")
    return fixed[0], ibor[0]


@dataclass(frozen=True)
class SwapRateRatio:
    """
    Swap rate at the fixing date as a function of the Hull-White factor.

    With e_i(x) = exp(-alpha_i x - alpha_i^2 / 2),

        B(x) = sum_ibor dcf_i e_i(x),   C(x) = -sum_fixed dcf_j e_j(x)

    and the swap rate is B(x) / C(x). The numeraire is the bond maturing at
    the fixing date; the payment bond contributes exp(-alpha_p x - alpha_p^2 / 2).

    Attributes:
        alpha_ibor: Alphas of the Ibor leg cash-flow equivalent
        dcf_ibor: Discounted Ibor cash-flow equivalent amounts
        alpha_fixed: Alphas of the fixed leg payments
        dcf_fixed: Discounted fixed leg payments
        alpha_payment: Alpha of the coupon payment date
        ibor_dates: Dates of the Ibor cash-flow equivalent
        fixed_dates: Dates of the fixed leg payments
    """
    alpha_ibor: np.ndarray
    dcf_ibor: np.ndarray
    alpha_fixed: np.ndarray
    dcf_fixed: np.ndarray
    alpha_payment: float
    ibor_dates: Tuple[date, ...] = ()
    fixed_dates: Tuple[date, ...] = ()

    def exponentials(self, x: float) -> Tuple[np.ndarray, np.ndarray]:
        e_ibor = np.exp(-self.alpha_ibor * x - 0.5 * self.alpha_ibor * self.alpha_ibor)
        e_fixed = np.exp(-self.alpha_fixed * x - 0.5 * self.alpha_fixed * self.alpha_fixed)
        return e_ibor, e_fixed

    def swap_rate(self, x: float) -> float:
        e_ibor, e_fixed = self.exponentials(x)
        return float(np.sum(self.dcf_ibor * e_ibor) / -np.sum(self.dcf_fixed * e_fixed))

    def sums(self, x: float) -> Tuple[float, float, float, float, float, float]:
        """B, C and their first two derivatives: (b, c, bp, cp, bpp, cpp)."""
        e_ibor, e_fixed = self.exponentials(x)
        ai, af = self.alpha_ibor, self.alpha_fixed
        di = self.dcf_ibor * e_ibor
        df = self.dcf_fixed * e_fixed
        b = np.sum(di)
        c = -np.sum(df)
        bp = -np.sum(di * ai)
        cp = np.sum(df * af)
        bpp = np.sum(di * ai * ai)
        cpp = -np.sum(df * af * af)
        return b, c, bp, cp, bpp, cpp

    def taylor_coefficients(self, x: float) -> np.ndarray:
        """Value, first and second derivative of B / C at x."""
        b, c, bp, cp, bpp, cpp = self.sums(x)
        a0 = b / c
        a1 = bp / c - b * cp / (c * c)
        a2 = bpp / c - (2.0 * bp * cp + b * cpp) / (c * c) + 2.0 * b * cp * cp / (c * c * c)
        return np.array([a0, a1, a2])

    def payment_factor(self, x):
        return np.exp(-self.alpha_payment * x - 0.5 * self.alpha_payment * self.alpha_payment)


def swap_rate_ratio(cms: CmsPeriod, env, model: HullWhiteParameters) -> SwapRateRatio:
    """
    Build the swap rate ratio of a CMS period fixing after the valuation date.

    Raises:
        ValueError: If the underlying does not have one fixed and one Ibor leg
    """
    leg_fixed, leg_ibor = underlying_legs(cms.underlying_swap)
    fixing = env.time(cms.fixing_date)
    cfe_ibor = cash_flow_equivalent_ibor_leg(leg_ibor, env)
    cfe_fixed = cash_flow_equivalent_fixed_leg(leg_fixed, env)
    ibor_times = env.times(p.payment_date for p in cfe_ibor)
    fixed_times = env.times(p.payment_date for p in cfe_fixed)
    dcf_ibor = np.array([p.amount for p in cfe_ibor]) * env.discount_factors(p.payment_date for p in cfe_ibor)
    dcf_fixed = np.array([p.amount for p in cfe_fixed]) * env.discount_factors(p.payment_date for p in cfe_fixed)
    return SwapRateRatio(
        alpha_ibor=alphas(model, 0.0, fixing, fixing, ibor_times),
        dcf_ibor=dcf_ibor,
        alpha_fixed=alphas(model, 0.0, fixing, fixing, fixed_times),
        dcf_fixed=dcf_fixed,
        alpha_payment=alpha(model, 0.0, fixing, fixing, env.time(cms.payment_date)),
        ibor_dates=tuple(p.payment_date for p in cfe_ibor),
        fixed_dates=tuple(p.payment_date for p in cfe_fixed)
    )


__all__ = ["SLOPE_TOLERANCE", "settled_value", "underlying_legs", "SwapRateRatio", "swap_rate_ratio"]
