"""
Discounting pricer of fixed versus Ibor swaps.

Pricing formula:
    PV_fixed = sum N_i * delta_i * K * P(t_i)
    PV_ibor  = sum N_j * delta_j * (g_j * L_j + s_j) * P(t_j)
    par rate = - PV_ibor / PVBP, PVBP = sum N_i * delta_i * P(t_i)

Notionals carry the direction of each leg, so the swap value is the sum
of its leg values.
"""

from ..products.swap import LegType, Swap, SwapLeg


class DiscountingSwapPricer:
    """
    Swap pricer on a rates environment.

    Attributes:
        env: RatesEnvironment with the discount and projection curves
    """

    def __init__(self, env):
        self.env = env

    def present_value_leg(self, leg: SwapLeg) -> float:
        """Value of the periods of a leg not yet paid."""
        env = self.env
        pv = 0.0
        for period in leg.periods:
            if period.payment_date < env.valuation_date:
                continue
            df = env.discount_factor(period.payment_date)
            if leg.leg_type == LegType.FIXED:
                pv += period.amount * df
            else:
                rate = period.gearing * env.ibor_rate(period) + period.spread
                pv += period.notional * period.year_fraction * rate * df
        return pv

    def present_value(self, swap: Swap) -> float:
        return sum(self.present_value_leg(leg) for leg in swap.legs)

    def pvbp(self, swap: Swap) -> float:
        """
        Value of the fixed leg with a unit rate.

        Negative when the fixed leg is paid.
        """
        env = self.env
        return sum(
            period.notional * period.year_fraction * env.discount_factor(period.payment_date)
            for period in swap.fixed_leg().periods
            if period.payment_date >= env.valuation_date
        )

    def par_rate(self, swap: Swap) -> float:
        """Fixed rate giving a zero swap value."""
        return -self.present_value_leg(swap.ibor_leg()) / self.pvbp(swap)

    def dv01(self, swap: Swap, bump_bp: float = 1.0) -> float:
        """
        Change in value for a parallel shift of all curves by bump_bp.

        Forward curves keyed in the environment are shifted with the
        discount curve.
        """
        bumped_forwards = {name: curve.bump_parallel(bump_bp) for name, curve in self.env.forward_curves.items()}
        bumped = self.env.with_discount_curve(self.env.discount_curve.bump_parallel(bump_bp), bumped_forwards)
        return (DiscountingSwapPricer(bumped).present_value(swap) - self.present_value(swap)) / bump_bp


__all__ = ["DiscountingSwapPricer"]
