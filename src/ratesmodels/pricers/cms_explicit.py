"""
Explicit approximation of CMS periods in the Hull-White one-factor model.

The swap rate at the fixing date is the ratio A(x) = B(x) / C(x) of sums
of exponentials in the Gaussian factor (see cms_common.SwapRateRatio).
Under the measure of the payment date A is expanded around x = -alpha_p:

    A(x) ~ A0 + A1 y + A2 y^2 / 2 + A3 y^3 / 6,   y = x + alpha_p

The coupon is A0 + A2 / 2. For a caplet or floorlet the exercise boundary
is linearised, kappa = (K - A0) / A1, and the expansion is integrated
against the standard normal density in closed form. A3 is obtained by a
central difference of A2; no fourth order term is used.
"""

import logging
from typing import Optional

import numpy as np
import pandas as pd
from scipy.stats import norm

from ..config import TaylorSettings
from ..models.hullwhite import HullWhiteParameters
from ..products.cms import CmsPeriod, CmsPeriodType
from .cms_common import SLOPE_TOLERANCE, SwapRateRatio, settled_value, swap_rate_ratio


logger = logging.getLogger(__name__)

N = norm.cdf
n = norm.pdf


def option_terms(coefficients: np.ndarray, a3: float, strike: float, is_caplet: bool) -> float:
    """
    Expectation of the caplet / floorlet payoff on the Taylor expansion.

    Args:
        coefficients: A0, A1, A2 at the expansion point
        a3: Third derivative A3
        strike: Strike of the option
        is_caplet: True for a caplet, False for a floorlet

    Returns:
        Undiscounted payoff expectation per unit of notional and accrual
        (the intrinsic value when the swap rate is deterministic)
    """
    a0, a1, a2 = coefficients
    if abs(a1) < SLOPE_TOLERANCE:
        return float(max(a0 - strike, 0.0) if is_caplet else max(strike - a0, 0.0))
    kappa = (strike - a0) / a1
    if is_caplet:
        term1 = (a0 - strike + 0.5 * a2) * N(-kappa)
    else:
        term1 = -(a0 - strike + 0.5 * a2) * N(kappa)
    term2 = (a1 + 0.5 * a2 * kappa + a3 / 6.0 * (kappa * kappa + 2.0)) * n(kappa)
    return float(term1 + term2)


class HullWhiteCmsPeriodExplicitPricer:
    """
    Explicit pricer of CMS coupons, caplets and floorlets in Hull-White.

    Example:
        >>> pricer = HullWhiteCmsPeriodExplicitPricer()
        >>> pv = pricer.present_value(cms, env, hw)
    """

    def __init__(self, settings: Optional[TaylorSettings] = None):
        self.settings = settings or TaylorSettings()

    def present_value(self, cms: CmsPeriod, env, model: HullWhiteParameters) -> float:
        """
        Present value of a CMS period.

        Args:
            cms: The CMS coupon, caplet or floorlet
            env: RatesEnvironment
            model: Hull-White parameters

        Returns:
            Present value in the currency of the period

        Raises:
            MissingFixingError: If the period has fixed and the fixing is missing
            ValueError: If the underlying is not a fixed versus Ibor swap
        """
        settled = settled_value(cms, env)
        if settled is not None:
            return settled
        ratio = swap_rate_ratio(cms, env, model)
        df_payment = env.discount_factor(cms.payment_date)
        x0 = -ratio.alpha_payment
        coefficients = ratio.taylor_coefficients(x0)
        factor = cms.notional * cms.year_fraction * df_payment
        if cms.period_type == CmsPeriodType.COUPON:
            return factor * (coefficients[0] + 0.5 * coefficients[2])
        a3 = self.third_derivative(ratio, x0)
        value = option_terms(coefficients, a3, cms.strike, cms.period_type == CmsPeriodType.CAPLET)
        logger.debug("CMS %s A0=%.8f A1=%.8f A2=%.8f A3=%.8f", cms.period_type.value,
                     coefficients[0], coefficients[1], coefficients[2], a3)
        return factor * value

    def third_derivative(self, ratio: SwapRateRatio, x: float) -> float:
        """Central difference of A2 around x."""
        shift = self.settings.third_order_shift
        up = ratio.taylor_coefficients(x + shift)[2]
        down = ratio.taylor_coefficients(x - shift)[2]
        return (up - down) / (2.0 * shift)

    def present_value_sensitivity_rates(self, cms: CmsPeriod, env, model: HullWhiteParameters) -> pd.Series:
        """
        Zero rate point sensitivities of a CMS coupon by backward sweep.

        The cash-flow equivalent amounts and the alphas are kept fixed; the
        sensitivity flows through the discount factors of the cash-flow
        equivalent and of the payment date, dP(t) / dz(t) = -t P(t).

        Returns:
            Series of d pv / d z(t) indexed by date, same dates summed

        Raises:
            NotImplementedError: For caplets and floorlets
        """
        if cms.period_type != CmsPeriodType.COUPON:
            raise NotImplementedError("Rate sensitivity is only implemented for CMS coupons")
        settled = settled_value(cms, env)
        if settled is not None:
            if settled == 0.0:
                return pd.Series(dtype=float)
            t_pay = env.time(cms.payment_date)
            return pd.Series({cms.payment_date: -t_pay * settled})
        ratio = swap_rate_ratio(cms, env, model)
        x0 = -ratio.alpha_payment
        coefficients = ratio.taylor_coefficients(x0)
        df_payment = env.discount_factor(cms.payment_date)
        accrued_notional = cms.notional * cms.year_fraction

        # Backward sweep
        pv_bar = 1.0
        df_payment_bar = accrued_notional * (coefficients[0] + 0.5 * coefficients[2]) * pv_bar
        a0_bar = accrued_notional * df_payment * pv_bar
        a2_bar = 0.5 * accrued_notional * df_payment * pv_bar
        dcf_ibor_bar, dcf_fixed_bar = self.coefficients_bar(ratio, x0, a0_bar, a2_bar)

        dates = list(ratio.ibor_dates) + list(ratio.fixed_dates) + [cms.payment_date]
        dcf = np.concatenate([ratio.dcf_ibor, ratio.dcf_fixed, [df_payment]])
        dcf_bar = np.concatenate([dcf_ibor_bar, dcf_fixed_bar, [df_payment_bar]])
        sensitivities = pd.Series(-env.times(dates) * dcf * dcf_bar, index=dates)
        return sensitivities.groupby(level=0).sum().sort_index()

    @staticmethod
    def coefficients_bar(ratio: SwapRateRatio, x: float, a0_bar: float, a2_bar: float):
        """
        Adjoint of the coefficients A0 and A2 with respect to the discounted cash flows.

        Args:
            ratio: Swap rate ratio
            x: Expansion point
            a0_bar: Adjoint of A0
            a2_bar: Adjoint of A2

        Returns:
            Tuple (adjoint of dcf_ibor, adjoint of dcf_fixed)
        """
        b, c, bp, cp, bpp, cpp = ratio.sums(x)
        c2 = c * c
        c3 = c2 * c
        c4 = c3 * c
        b_bar = a0_bar / c + a2_bar * (-cpp / c2 + 2.0 * cp * cp / c3)
        c_bar = (a0_bar * (-b / c2)
                 + a2_bar * (-bpp / c2 + 2.0 * (2.0 * bp * cp + b * cpp) / c3 - 6.0 * b * cp * cp / c4))
        bp_bar = a2_bar * (-2.0 * cp / c2)
        cp_bar = a2_bar * (-2.0 * bp / c2 + 4.0 * b * cp / c3)
        bpp_bar = a2_bar / c
        cpp_bar = -a2_bar * b / c2
        e_ibor, e_fixed = ratio.exponentials(x)
        ai, af = ratio.alpha_ibor, ratio.alpha_fixed
        dcf_ibor_bar = e_ibor * (b_bar - ai * bp_bar + ai * ai * bpp_bar)
        dcf_fixed_bar = e_fixed * (-c_bar + af * cp_bar - af * af * cpp_bar)
        return dcf_ibor_bar, dcf_fixed_bar


__all__ = ["option_terms", "HullWhiteCmsPeriodExplicitPricer"]
