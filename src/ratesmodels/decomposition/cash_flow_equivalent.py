"""
Cash-flow equivalent of swap legs.

A fixed leg is replaced by its payments. An Ibor period is replaced by two
payments: one at the index effective date, scaled by the deterministic
ratio beta between the Ibor forward and the discount curve forward, and
one at the payment date. Under a model in which the Ibor over discount
spread is deterministic, the equivalent has the same value as the leg.
"""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, List

from ..products.swap import IborPeriod, LegType, Swap, SwapLeg


@dataclass(frozen=True)
class Payment:
    """A fixed amount paid on a date."""
    payment_date: date
    amount: float


def cash_flow_equivalent_fixed_leg(leg: SwapLeg, env) -> List[Payment]:
    """Payments of the periods of a fixed leg not yet paid."""
    if leg.leg_type != LegType.FIXED:
        raise ValueError(f"Expected a FIXED leg, got {leg.leg_type.value}")
    return [
        Payment(period.payment_date, period.amount)
        for period in leg.periods
        if period.payment_date >= env.valuation_date
    ]


def cash_flow_equivalent_ibor_period(period: IborPeriod, env) -> List[Payment]:
    """
    Cash-flow equivalent of one Ibor period.

    Once fixed, the period is a single known payment. Otherwise it is
    notional * beta * ratio at the effective date and -notional * ratio at
    the payment date, with

        beta = (1 + delta_index F) P(payment) / P(effective)
        ratio = gearing * delta_accrual / delta_index

    plus the spread payment notional * delta_accrual * spread.
    """
    if period.fixing_date <= env.valuation_date:
        rate = period.gearing * env.ibor_rate(period) + period.spread
        return [Payment(period.payment_date, period.notional * period.year_fraction * rate)]
    forward = env.ibor_forward_rate(period.index, period.effective_date, period.maturity_date)
    beta = ((1.0 + period.index_year_fraction * forward)
            * env.discount_factor(period.payment_date) / env.discount_factor(period.effective_date))
    ratio = period.gearing * period.year_fraction / period.index_year_fraction
    payments = [
        Payment(period.effective_date, period.notional * beta * ratio),
        Payment(period.payment_date, -period.notional * ratio),
    ]
    if period.spread != 0.0:
        payments.append(Payment(period.payment_date, period.notional * period.year_fraction * period.spread))
    return payments


def cash_flow_equivalent_ibor_leg(leg: SwapLeg, env) -> List[Payment]:
    """Cash-flow equivalent of the periods of an Ibor leg not yet paid."""
    if leg.leg_type != LegType.IBOR:
        raise ValueError(f"Expected an IBOR leg, got {leg.leg_type.value}")
    payments = []
    for period in leg.periods:
        if period.payment_date < env.valuation_date:
            continue
        payments.extend(cash_flow_equivalent_ibor_period(period, env))
    return payments


def cash_flow_equivalent_swap(swap: Swap, env) -> List[Payment]:
    """
    Cash-flow equivalent of a swap, sorted by date with same-date payments merged.

    Raises:
        ValueError: If the swap has a leg that is neither fixed nor Ibor
    """
    payments = []
    for leg in swap.legs:
        if leg.leg_type == LegType.FIXED:
            payments.extend(cash_flow_equivalent_fixed_leg(leg, env))
        elif leg.leg_type == LegType.IBOR:
            payments.extend(cash_flow_equivalent_ibor_leg(leg, env))
        else:
            raise ValueError(f"Unsupported leg type {leg.leg_type}")
    return sort_compress(payments)


def sort_compress(payments: Iterable[Payment]) -> List[Payment]:
    """Sort payments by date and merge the amounts paid on the same date."""
    merged = {}
    for payment in payments:
        merged[payment.payment_date] = merged.get(payment.payment_date, 0.0) + payment.amount
    return [Payment(d, merged[d]) for d in sorted(merged)]


__all__ = [
    "Payment",
    "cash_flow_equivalent_fixed_leg",
    "cash_flow_equivalent_ibor_period",
    "cash_flow_equivalent_ibor_leg",
    "cash_flow_equivalent_swap",
    "sort_compress",
]
