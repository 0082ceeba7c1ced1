"""
Multi-curve equivalent of products for Monte Carlo pricing.

A multi-curve equivalent describes what a product pays once the market is
known at its decision date:
- discount factor payments: fixed amounts paid on dates
- Ibor computations: Ibor periods whose rate is observed at the decision
  date, each paid with the amount of the matching Ibor payment

Provides:
- MulticurveEquivalent: the record and its combination
- multicurve_equivalent_swap: equivalent of a fixed versus Ibor swap
- decision_schedule: equivalent of swaptions, CMS and CMS spread periods
"""

from dataclasses import dataclass, field, replace
from datetime import date
from functools import singledispatch
from typing import Optional, Tuple

from ..products.cms import CmsPeriod, CmsSpreadPeriod
from ..products.swap import IborPeriod, LegType, Swap
from ..products.swaption import Swaption
from .cash_flow_equivalent import Payment


@dataclass(frozen=True)
class MulticurveEquivalent:
    """
    Decision date schedule of a product.

    Attributes:
        decision_date: Date at which the market state is required
        discount_factor_payments: Known amounts paid on dates
        ibor_computations: Ibor periods observed at the decision date
        ibor_payments: Amount and date paying each Ibor computation
        payment_splits: Number of discount factor payments and Ibor
            computations contributed by each combined swap
    """
    decision_date: Optional[date] = None
    discount_factor_payments: Tuple[Payment, ...] = ()
    ibor_computations: Tuple[IborPeriod, ...] = ()
    ibor_payments: Tuple[Payment, ...] = ()
    payment_splits: Tuple[Tuple[int, int], ...] = field(default=())

    def __post_init__(self):
        if len(self.ibor_computations) != len(self.ibor_payments):
            raise ValueError("Each Ibor computation needs exactly one Ibor payment")

    def combined_with(self, other: "MulticurveEquivalent") -> "MulticurveEquivalent":
        """
        Concatenation of two equivalents with the same decision date.

        The payments of self come first; the splits of both are kept.
        """
        if self.decision_date != other.decision_date:
            raise ValueError(
                f"Decision dates differ: {self.decision_date} and {other.decision_date}"
            )
        return MulticurveEquivalent(
            decision_date=self.decision_date,
            discount_factor_payments=self.discount_factor_payments + other.discount_factor_payments,
            ibor_computations=self.ibor_computations + other.ibor_computations,
            ibor_payments=self.ibor_payments + other.ibor_payments,
            payment_splits=self.splits() + other.splits()
        )

    def splits(self) -> Tuple[Tuple[int, int], ...]:
        """Per-swap counts of discount factor payments and Ibor computations."""
        if self.payment_splits:
            return self.payment_splits
        return ((len(self.discount_factor_payments), len(self.ibor_computations)),)

    def with_decision_date(self, decision_date: date) -> "MulticurveEquivalent":
        return replace(self, decision_date=decision_date)

    def with_payment(self, payment: Payment) -> "MulticurveEquivalent":
        """Append a discount factor payment outside the per-swap splits."""
        return replace(
            self,
            discount_factor_payments=self.discount_factor_payments + (payment,),
            payment_splits=self.splits()
        )


def multicurve_equivalent_swap(swap: Swap) -> MulticurveEquivalent:
    """
    Equivalent of a fixed versus Ibor swap.

    Fixed payments come first, followed by the Ibor spread payments.

    Raises:
        ValueError: If a leg is neither fixed nor Ibor
    """
    fixed_payments = []
    spread_payments = []
    ibors = []
    ibor_payments = []
    for leg in swap.legs:
        if leg.leg_type == LegType.FIXED:
            fixed_payments.extend(Payment(p.payment_date, p.amount) for p in leg.periods)
        elif leg.leg_type == LegType.IBOR:
            for period in leg.periods:
                ibors.append(period)
                ibor_payments.append(
                    Payment(period.payment_date, period.notional * period.gearing * period.year_fraction)
                )
                if period.spread != 0.0:
                    spread_payments.append(
                        Payment(period.payment_date, period.notional * period.year_fraction * period.spread)
                    )
        else:
            raise ValueError("All legs must be fixed or ibor")
    return MulticurveEquivalent(
        discount_factor_payments=tuple(fixed_payments + spread_payments),
        ibor_computations=tuple(ibors),
        ibor_payments=tuple(ibor_payments)
    )


@singledispatch
def decision_schedule(product) -> MulticurveEquivalent:
    """Multi-curve equivalent of a product at its decision date."""
    raise TypeError(f"No decision schedule for {type(product).__name__}")


@decision_schedule.register
def _(product: Swaption) -> MulticurveEquivalent:
    return multicurve_equivalent_swap(product.underlying).with_decision_date(product.expiry_date)


@decision_schedule.register
def _(product: CmsPeriod) -> MulticurveEquivalent:
    mce = multicurve_equivalent_swap(product.underlying_swap)
    coupon = Payment(product.payment_date, product.notional * product.year_fraction)
    return mce.with_payment(coupon).with_decision_date(product.fixing_date)


@decision_schedule.register
def _(product: CmsSpreadPeriod) -> MulticurveEquivalent:
    mce = multicurve_equivalent_swap(product.underlying_swap1).combined_with(
        multicurve_equivalent_swap(product.underlying_swap2)
    )
    coupon = Payment(product.payment_date, product.notional * product.year_fraction)
    return mce.with_payment(coupon).with_decision_date(product.fixing_date)


__all__ = [
    "MulticurveEquivalent",
    "multicurve_equivalent_swap",
    "decision_schedule",
]
