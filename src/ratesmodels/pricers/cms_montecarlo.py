"""
Monte Carlo pricing of CMS and CMS spread periods in the displaced diffusion LMM.

The multi-curve equivalent of a CMS period holds the payments of its
underlying swap(s) followed by the coupon payment (notional times accrual
factor). On each path the swap rates are rebuilt from the simulated
forwards at the fixing date, the payoff is applied and the coupon is
discounted with the rebased discount factor of its payment date.
"""

import numpy as np

from ..montecarlo.european import LmmMonteCarloEuropeanPricer, MulticurveLayout
from ..products.cms import CmsPeriod, CmsSpreadPeriod
from .cms_common import settled_value


class LmmCmsPeriodMonteCarloPricer(LmmMonteCarloEuropeanPricer):
    """Monte Carlo pricer of CMS coupons, caplets and floorlets."""

    def present_value(self, cms: CmsPeriod, env) -> float:
        """
        Present value of a CMS period.

        Raises:
            MissingFixingError: If the period has fixed and the fixing is missing
        """
        settled = settled_value(cms, env)
        if settled is not None:
            return settled
        return self.present_value_monte_carlo(cms, env)

    def aggregation(self, product: CmsPeriod, layout: MulticurveLayout, forwards: np.ndarray,
                    discounting: np.ndarray) -> np.ndarray:
        (df_slice, ibor_slice), = layout.swap_slices()
        swap_rate = self.swap_rates(layout, forwards, discounting, df_slice, ibor_slice)
        coupon = layout.df_amounts[-1] * discounting[:, layout.df_indices[-1]]
        return product.payoff(swap_rate) * coupon


class LmmCmsSpreadPeriodMonteCarloPricer(LmmMonteCarloEuropeanPricer):
    """Monte Carlo pricer of CMS spread coupons, caplets and floorlets."""

    def present_value(self, cms: CmsSpreadPeriod, env) -> float:
        """
        Present value of a CMS spread period.

        A period paid before the valuation date is worth 0; a period fixed
        on or before the valuation date pays its payoff on the fixings of
        both indices.

        Raises:
            MissingFixingError: If the period has fixed and a fixing is missing
        """
        if cms.payment_date < env.valuation_date:
            return 0.0
        if cms.fixing_date <= env.valuation_date:
            rate1 = env.fixing(cms.index1.name, cms.fixing_date)
            rate2 = env.fixing(cms.index2.name, cms.fixing_date)
            payoff = float(cms.payoff(rate1, rate2))
            return cms.notional * cms.year_fraction * payoff * env.discount_factor(cms.payment_date)
        return self.present_value_monte_carlo(cms, env)

    def aggregation(self, product: CmsSpreadPeriod, layout: MulticurveLayout, forwards: np.ndarray,
                    discounting: np.ndarray) -> np.ndarray:
        (df1, ibor1), (df2, ibor2) = layout.swap_slices()
        swap_rate1 = self.swap_rates(layout, forwards, discounting, df1, ibor1)
        swap_rate2 = self.swap_rates(layout, forwards, discounting, df2, ibor2)
        coupon = layout.df_amounts[-1] * discounting[:, layout.df_indices[-1]]
        return product.payoff(swap_rate1, swap_rate2) * coupon


__all__ = ["LmmCmsPeriodMonteCarloPricer", "LmmCmsSpreadPeriodMonteCarloPricer"]
