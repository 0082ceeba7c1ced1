"""
CMS periods in Hull-White by numerical integration.

The exact payoff of the swap rate B(x) / C(x) is integrated against the
standard normal density, with the change to the payment date measure
exp(-alpha_p x - alpha_p^2 / 2), over a bounded domain of +/- limit
standard deviations. Used as the reference for the explicit pricer.
"""

from typing import Optional

from scipy.stats import norm

from ..config import IntegrationSettings
from ..models.hullwhite import HullWhiteParameters
from ..products.cms import CmsPeriod, CmsPeriodType
from .cms_common import SLOPE_TOLERANCE, settled_value, swap_rate_ratio
from .quadrature import gaussian_quad


class HullWhiteCmsPeriodNumericalIntegrationPricer:
    """Numerical integration pricer of CMS coupons, caplets and floorlets in Hull-White."""

    def __init__(self, settings: Optional[IntegrationSettings] = None):
        self.settings = settings or IntegrationSettings()

    def present_value(self, cms: CmsPeriod, env, model: HullWhiteParameters) -> float:
        """
        Present value of a CMS period.

        Raises:
            MissingFixingError: If the period has fixed and the fixing is missing
            IntegrationError: If the quadrature fails
        """
        settled = settled_value(cms, env)
        if settled is not None:
            return settled
        ratio = swap_rate_ratio(cms, env, model)
        factor = cms.notional * cms.year_fraction * env.discount_factor(cms.payment_date)
        a0, a1, _ = ratio.taylor_coefficients(-ratio.alpha_payment)
        if abs(a1) < SLOPE_TOLERANCE:
            return factor * float(cms.payoff(a0))
        limit = self.settings.limit

        def integrand(x: float) -> float:
            rate = ratio.swap_rate(x)
            return float(cms.payoff(rate)) * ratio.payment_factor(x) * norm.pdf(x)

        kink = []
        if cms.period_type != CmsPeriodType.COUPON:
            # First order exercise boundary in the integration variable
            kink = [(cms.strike - a0) / a1 - ratio.alpha_payment]
        value = gaussian_quad(integrand, -limit, limit, self.settings, points=kink)
        return factor * value


__all__ = ["HullWhiteCmsPeriodNumericalIntegrationPricer"]
