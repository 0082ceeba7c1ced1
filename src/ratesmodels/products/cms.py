"""
Resolved CMS and CMS spread periods.

Provides:
- SwapIndex: swap rate index (tenor and conventions of the underlying swap)
- CmsPeriodType: coupon, caplet or floorlet
- CmsPeriod: one CMS coupon / caplet / floorlet
- CmsSpreadPeriod: weighted difference of two swap rates, optionally capped
  or floored
- cms_period / cms_spread_period: builders from accrual dates

The underlying swap of a CMS period pays a fixed rate of 1 on a notional
of 1, so that its fixed leg value is minus its annuity and the swap rate is
minus the Ibor leg value divided by the fixed leg value.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional

import numpy as np

from ..conventions import DayCount, SwapConventions, year_fraction
from .swap import IborIndex, Swap, fixed_ibor_swap_from_fixing


@dataclass(frozen=True)
class SwapIndex:
    """
    Swap rate index.

    Attributes:
        name: Index name, key of the fixings time series
        tenor: Tenor of the underlying swap (e.g. "10Y")
        ibor_index: Ibor index of the floating leg
        conventions: Fixed leg and settlement conventions
    """
    name: str
    tenor: str
    ibor_index: IborIndex
    conventions: SwapConventions = field(default_factory=SwapConventions.eur_annual)

    def underlying_swap(self, fixing_date: date) -> Swap:
        """Unit swap paying a fixed rate of 1 and receiving Ibor."""
        return fixed_ibor_swap_from_fixing(
            fixing_date, self.tenor, 1.0, 1.0, self.ibor_index,
            pay_fixed=True, conventions=self.conventions
        )


class CmsPeriodType(Enum):
    COUPON = "COUPON"
    CAPLET = "CAPLET"
    FLOORLET = "FLOORLET"


@dataclass(frozen=True)
class CmsPeriod:
    """
    A CMS coupon, caplet or floorlet.

    Attributes:
        notional: Notional of the period
        start_date: Accrual start
        end_date: Accrual end
        year_fraction: Accrual factor
        payment_date: Payment date
        fixing_date: Fixing date of the swap rate
        period_type: Coupon, caplet or floorlet
        strike: Strike of a caplet / floorlet, 0 for a coupon
        index: Swap index
        underlying_swap: Unit swap whose par rate is the CMS rate
    """
    notional: float
    start_date: date
    end_date: date
    year_fraction: float
    payment_date: date
    fixing_date: date
    period_type: CmsPeriodType
    strike: float
    index: SwapIndex
    underlying_swap: Swap

    def payoff(self, swap_rate):
        """Rate-like payoff (before notional and accrual) for given swap rates."""
        rate = np.asarray(swap_rate, dtype=np.float64)
        if self.period_type == CmsPeriodType.CAPLET:
            return np.maximum(rate - self.strike, 0.0)
        if self.period_type == CmsPeriodType.FLOORLET:
            return np.maximum(self.strike - rate, 0.0)
        return rate


@dataclass(frozen=True)
class CmsSpreadPeriod:
    """
    A CMS spread coupon paying weight1 * S1 - weight2 * S2, optionally capped or floored.

    Attributes:
        caplet: Strike of the cap on the spread, None if not capped
        floorlet: Strike of the floor on the spread, None if not floored
    """
    notional: float
    start_date: date
    end_date: date
    year_fraction: float
    payment_date: date
    fixing_date: date
    weight1: float
    index1: SwapIndex
    underlying_swap1: Swap
    weight2: float
    index2: SwapIndex
    underlying_swap2: Swap
    caplet: Optional[float] = None
    floorlet: Optional[float] = None

    def __post_init__(self):
        if self.caplet is not None and self.floorlet is not None:
            raise ValueError("A CMS spread period cannot be both a caplet and a floorlet")

    def payoff(self, swap_rate1, swap_rate2):
        """Payoff per unit of notional and accrual."""
        spread = (self.weight1 * np.asarray(swap_rate1, dtype=np.float64)
                  - self.weight2 * np.asarray(swap_rate2, dtype=np.float64))
        if self.caplet is not None:
            return np.maximum(spread - self.caplet, 0.0)
        if self.floorlet is not None:
            return np.maximum(self.floorlet - spread, 0.0)
        return spread


def cms_period(
    index: SwapIndex,
    start_date: date,
    end_date: date,
    notional: float,
    period_type: CmsPeriodType = CmsPeriodType.COUPON,
    strike: float = 0.0,
    day_count: DayCount = DayCount.ACT_360,
    payment_date: Optional[date] = None,
    fixing_date: Optional[date] = None
) -> CmsPeriod:
    """
    Build a CMS period fixing in advance.

    Args:
        index: Swap index
        start_date: Accrual start
        end_date: Accrual end
        notional: Notional
        period_type: Coupon, caplet or floorlet
        strike: Strike for a caplet or floorlet
        day_count: Accrual day count
        payment_date: Defaults to the accrual end
        fixing_date: Defaults to the Ibor fixing lag before the accrual start

    Returns:
        CmsPeriod with its unit underlying swap
    """
    if period_type == CmsPeriodType.COUPON:
        strike = 0.0
    fixing = fixing_date or index.ibor_index.fixing_from_effective(start_date)
    return CmsPeriod(
        notional=notional,
        start_date=start_date,
        end_date=end_date,
        year_fraction=year_fraction(start_date, end_date, day_count),
        payment_date=payment_date or end_date,
        fixing_date=fixing,
        period_type=period_type,
        strike=strike,
        index=index,
        underlying_swap=index.underlying_swap(fixing)
    )


def cms_spread_period(
    index1: SwapIndex,
    index2: SwapIndex,
    start_date: date,
    end_date: date,
    notional: float,
    weight1: float = 1.0,
    weight2: float = 1.0,
    caplet: Optional[float] = None,
    floorlet: Optional[float] = None,
    day_count: DayCount = DayCount.ACT_360,
    payment_date: Optional[date] = None,
    fixing_date: Optional[date] = None
) -> CmsSpreadPeriod:
    """Build a CMS spread period fixing in advance on both indices."""
    fixing = fixing_date or index1.ibor_index.fixing_from_effective(start_date)
    return CmsSpreadPeriod(
        notional=notional,
        start_date=start_date,
        end_date=end_date,
        year_fraction=year_fraction(start_date, end_date, day_count),
        payment_date=payment_date or end_date,
        fixing_date=fixing,
        weight1=weight1,
        index1=index1,
        underlying_swap1=index1.underlying_swap(fixing),
        weight2=weight2,
        index2=index2,
        underlying_swap2=index2.underlying_swap(fixing),
        caplet=caplet,
        floorlet=floorlet
    )


__all__ = [
    "SwapIndex",
    "CmsPeriodType",
    "CmsPeriod",
    "CmsSpreadPeriod",
    "cms_period",
    "cms_spread_period",
]
