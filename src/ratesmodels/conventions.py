"""
Day count and business day conventions used to build resolved products.

Supported Day Counts:
- ACT/360: Actual days / 360 (Ibor indices)
- ACT/365: Actual days / 365 (model time measure)
- 30/360: 30 days per month / 360 (fixed legs)

Business Day Conventions:
- Modified Following: next business day unless it falls in the next month
- Following: next business day
- Preceding: previous business day
"""

from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Optional


class DayCount(Enum):
    """Day count convention enumeration."""
    ACT_360 = "ACT/360"
    ACT_365 = "ACT/365"
    THIRTY_360 = "30/360"


class BusinessDayConvention(Enum):
    """Business day adjustment convention."""
    MODIFIED_FOLLOWING = "ModifiedFollowing"
    FOLLOWING = "Following"
    PRECEDING = "Preceding"
    UNADJUSTED = "Unadjusted"


@dataclass(frozen=True)
class SwapConventions:
    """
    Conventions of a fixed versus Ibor swap.

    Attributes:
        fixed_frequency: Fixed leg payments per year
        fixed_day_count: Fixed leg accrual day count
        business_day: Business day adjustment of schedule dates
        settlement_days: Business days between fixing/trade and effective date
    """
    fixed_frequency: int = 1
    fixed_day_count: DayCount = DayCount.THIRTY_360
    business_day: BusinessDayConvention = BusinessDayConvention.MODIFIED_FOLLOWING
    settlement_days: int = 2

    @classmethod
    def eur_annual(cls) -> "SwapConventions":
        """EUR fixed annual 30/360 versus Euribor."""
        return cls(
            fixed_frequency=1,
            fixed_day_count=DayCount.THIRTY_360,
            business_day=BusinessDayConvention.MODIFIED_FOLLOWING,
            settlement_days=2
        )


def year_fraction(start: date, end: date, day_count: DayCount) -> float:
    """
    Calculate year fraction between two dates using specified day count convention.

    Args:
        start: Start date
        end: End date
        day_count: Day count convention

    Returns:
        Year fraction, zero when end is not after start
    """
    if start >= end:
        return 0.0

    actual_days = (end - start).days

    if day_count == DayCount.ACT_360:
        return actual_days / 360.0

    if day_count == DayCount.ACT_365:
        return actual_days / 365.0

    if day_count == DayCount.THIRTY_360:
        # 30/360 US bond basis
        d1 = min(start.day, 30)
        d2 = end.day
        if d2 == 31 and d1 == 30:
            d2 = 30
        return (360 * (end.year - start.year) + 30 * (end.month - start.month) + (d2 - d1)) / 360.0

    raise ValueError(f"Unknown day count: {day_count}")


def relative_time(reference: date, d: date, day_count: DayCount = DayCount.ACT_365) -> float:
    """
    Signed year fraction from reference to d (negative for past dates).

    Args:
        reference: Reference date (time 0)
        d: Target date
        day_count: Day count used as time measure

    Returns:
        Signed year fraction
    """
    if d >= reference:
        return year_fraction(reference, d, day_count)
    return -year_fraction(d, reference, day_count)


def is_business_day(d: date, holidays: Optional[set] = None) -> bool:
    """
    Check if a date is a business day.

    Uses weekend-only calendar by default (Saturday/Sunday are non-business days).

    Args:
        d: Date to check
        holidays: Optional set of holiday dates

    Returns:
        True if business day, False otherwise
    """
    if d.weekday() >= 5:
        return False
    if holidays and d in holidays:
        return False
    return True


def adjust_business_day(
    d: date,
    convention: BusinessDayConvention,
    holidays: Optional[set] = None
) -> date:
    """
    Adjust a date according to business day convention.

    Args:
        d: Date to adjust
        convention: Business day adjustment rule
        holidays: Optional set of holiday dates

    Returns:
        Adjusted date
    """
    if convention == BusinessDayConvention.UNADJUSTED or is_business_day(d, holidays):
        return d

    if convention == BusinessDayConvention.PRECEDING:
        return _roll(d, -1, holidays)

    following = _roll(d, 1, holidays)
    if convention == BusinessDayConvention.MODIFIED_FOLLOWING and following.month != d.month:
        return _roll(d, -1, holidays)
    return following


def add_business_days(d: date, days: int, holidays: Optional[set] = None) -> date:
    """
    Move a date by a number of business days (negative to move backward).

    Args:
        d: Start date
        days: Number of business days
        holidays: Optional set of holiday dates

    Returns:
        Shifted date
    """
    step = 1 if days >= 0 else -1
    result = d
    remaining = abs(days)
    while remaining > 0:
        result += timedelta(days=step)
        if is_business_day(result, holidays):
            remaining -= 1
    return result


def _roll(d: date, step: int, holidays: Optional[set]) -> date:
    """Roll day by day until a business day is reached."""
    adjusted = d
    while not is_business_day(adjusted, holidays):
        adjusted += timedelta(days=step)
    return adjusted


__all__ = [
    "DayCount",
    "BusinessDayConvention",
    "SwapConventions",
    "year_fraction",
    "relative_time",
    "is_business_day",
    "adjust_business_day",
    "add_business_days",
]
