"""
Date utilities for rates calculations.

Provides:
- Tenor parsing and date arithmetic
- Regular schedule generation for swap legs
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Optional, Tuple
import calendar
import re

from .conventions import (
    BusinessDayConvention,
    DayCount,
    add_business_days,
    adjust_business_day,
    year_fraction
)


class DateUtils:
    """Utility class for date manipulation in rates contexts."""

    # Tenor regex pattern: number + unit (D/W/M/Y)
    TENOR_PATTERN = re.compile(r'^(\d+)([DWMY])$', re.IGNORECASE)

    @staticmethod
    def parse_tenor(tenor: str) -> Tuple[int, str]:
        """
        Parse a tenor string into (amount, unit).

        Args:
            tenor: Tenor string like "1D", "3M", "2Y"

        Returns:
            Tuple of (amount, unit) where unit is D/W/M/Y

        Raises:
            ValueError: If tenor format is invalid
        """
        match = DateUtils.TENOR_PATTERN.match(tenor.upper().strip())
        if not match:
            raise ValueError(f"Invalid tenor format: {tenor}. Expected format like '3M', '2Y'")
        return int(match.group(1)), match.group(2).upper()

    @staticmethod
    def add_tenor(start: date, tenor: str, holidays: Optional[set] = None) -> date:
        """
        Add a tenor to a date (unadjusted except for day tenors).

        Day tenors count business days; month and year tenors keep the day of
        month where possible.

        Args:
            start: Starting date
            tenor: Tenor string (e.g., "2D", "6M", "5Y")
            holidays: Optional holiday calendar

        Returns:
            End date
        """
        amount, unit = DateUtils.parse_tenor(tenor)
        if unit == 'D':
            return add_business_days(start, amount, holidays)
        if unit == 'W':
            return start + timedelta(weeks=amount)
        if unit == 'M':
            return add_months(start, amount)
        if unit == 'Y':
            return add_months(start, 12 * amount)
        raise ValueError(f"Unknown tenor unit: {unit}")

    @staticmethod
    def tenor_to_months(tenor: str) -> int:
        """Number of months in a month or year tenor."""
        amount, unit = DateUtils.parse_tenor(tenor)
        if unit == 'M':
            return amount
        if unit == 'Y':
            return 12 * amount
        raise ValueError(f"Tenor {tenor} is not expressed in months or years")

    @staticmethod
    def generate_schedule(
        start: date,
        end: date,
        months_per_period: int,
        convention: BusinessDayConvention = BusinessDayConvention.MODIFIED_FOLLOWING,
        holidays: Optional[set] = None
    ) -> List[date]:
        """
        Generate adjusted period boundaries between start and end.

        Dates are rolled backward from the end date, so an irregular period,
        if any, is a short front stub.

        Args:
            start: Schedule start (accrual start)
            end: Schedule end (maturity)
            months_per_period: Period length in months
            convention: Business day adjustment
            holidays: Holiday calendar

        Returns:
            Adjusted dates [start, ..., end]
        """
        if months_per_period <= 0:
            raise ValueError("Period length must be positive")
        if end <= start:
            raise ValueError(f"Schedule end {end} must be after start {start}")

        unadjusted = [end]
        n = 1
        while True:
            previous = add_months(end, -n * months_per_period)
            if previous <= start:
                break
            unadjusted.insert(0, previous)
            n += 1
        unadjusted.insert(0, start)
        return [adjust_business_day(d, convention, holidays) for d in unadjusted]


@dataclass
class ScheduleInfo:
    """Container for schedule with accrual information."""
    accrual_starts: List[date]
    accrual_ends: List[date]
    payment_dates: List[date]
    year_fractions: List[float]
    day_count: DayCount

    def __len__(self) -> int:
        return len(self.payment_dates)


def generate_leg_schedule(
    effective: date,
    maturity: date,
    months_per_period: int,
    day_count: DayCount,
    convention: BusinessDayConvention = BusinessDayConvention.MODIFIED_FOLLOWING,
    holidays: Optional[set] = None
) -> ScheduleInfo:
    """
    Generate accrual periods of a swap leg paying at the end of each period.

    Args:
        effective: Leg effective date
        maturity: Leg maturity (unadjusted)
        months_per_period: Period length in months
        day_count: Accrual day count
        convention: Business day adjustment
        holidays: Holiday calendar

    Returns:
        ScheduleInfo with accrual boundaries, payment dates and fractions
    """
    boundaries = DateUtils.generate_schedule(
        effective, maturity, months_per_period, convention, holidays
    )
    starts = boundaries[:-1]
    ends = boundaries[1:]
    return ScheduleInfo(
        accrual_starts=starts,
        accrual_ends=ends,
        payment_dates=list(ends),
        year_fractions=[year_fraction(s, e, day_count) for s, e in zip(starts, ends)],
        day_count=day_count
    )


def add_months(d: date, months: int) -> date:
    """Add calendar months, capping the day at the end of the target month."""
    month_index = d.month - 1 + months
    year = d.year + month_index // 12
    month = month_index % 12 + 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


__all__ = [
    "DateUtils",
    "ScheduleInfo",
    "generate_leg_schedule",
    "add_months",
]
