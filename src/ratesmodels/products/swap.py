"""
Resolved fixed versus Ibor swaps.

Provides:
- IborIndex: index conventions (tenor, day count, fixing offset)
- FixedPeriod / IborPeriod: resolved payment periods with signed notionals
- SwapLeg / Swap: immutable leg and swap records
- fixed_ibor_swap / fixed_ibor_swap_from_fixing: builders on a regular schedule

Notionals are signed: negative when the leg is paid, positive when received.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional, Tuple

from ..conventions import (
    BusinessDayConvention,
    DayCount,
    SwapConventions,
    add_business_days,
    adjust_business_day,
    year_fraction
)
from ..dates import DateUtils, generate_leg_schedule


class PayReceive(Enum):
    """Direction of a leg."""
    PAY = "PAY"
    RECEIVE = "RECEIVE"

    @property
    def sign(self) -> float:
        return -1.0 if self is PayReceive.PAY else 1.0


@dataclass(frozen=True)
class IborIndex:
    """
    Ibor index conventions.

    Attributes:
        name: Index name, used as key for forward curves and fixings
        tenor: Index tenor (e.g. "6M")
        day_count: Accrual day count of the index
        fixing_offset_days: Business days between fixing and effective date
        business_day: Adjustment of the index maturity date
    """
    name: str
    tenor: str = "6M"
    day_count: DayCount = DayCount.ACT_360
    fixing_offset_days: int = 2
    business_day: BusinessDayConvention = BusinessDayConvention.MODIFIED_FOLLOWING

    def effective_from_fixing(self, fixing_date: date) -> date:
        return add_business_days(fixing_date, self.fixing_offset_days)

    def fixing_from_effective(self, effective_date: date) -> date:
        return add_business_days(effective_date, -self.fixing_offset_days)

    def maturity_from_effective(self, effective_date: date) -> date:
        return adjust_business_day(DateUtils.add_tenor(effective_date, self.tenor), self.business_day)

    @classmethod
    def euribor_6m(cls) -> "IborIndex":
        return cls(name="EUR-EURIBOR-6M", tenor="6M", day_count=DayCount.ACT_360)


@dataclass(frozen=True)
class FixedPeriod:
    """Fixed rate payment period."""
    start_date: date
    end_date: date
    payment_date: date
    year_fraction: float
    rate: float
    notional: float

    @property
    def amount(self) -> float:
        return self.notional * self.year_fraction * self.rate


@dataclass(frozen=True)
class IborPeriod:
    """
    Ibor payment period paying gearing * ibor + spread.

    Attributes:
        fixing_date: Fixing date of the index
        effective_date: Start of the index period
        maturity_date: End of the index period
        index_year_fraction: Index accrual factor between effective and maturity
    """
    start_date: date
    end_date: date
    payment_date: date
    year_fraction: float
    notional: float
    index: IborIndex
    fixing_date: date
    effective_date: date
    maturity_date: date
    index_year_fraction: float
    spread: float = 0.0
    gearing: float = 1.0


class LegType(Enum):
    FIXED = "FIXED"
    IBOR = "IBOR"


@dataclass(frozen=True)
class SwapLeg:
    """A swap leg: ordered payment periods of a single type."""
    leg_type: LegType
    pay_receive: PayReceive
    periods: Tuple

    def __post_init__(self):
        expected = FixedPeriod if self.leg_type == LegType.FIXED else IborPeriod
        for period in self.periods:
            if not isinstance(period, expected):
                raise ValueError(f"{self.leg_type.value} leg cannot hold {type(period).__name__}")

    @property
    def start_date(self) -> date:
        return self.periods[0].start_date

    @property
    def end_date(self) -> date:
        return self.periods[-1].end_date


@dataclass(frozen=True)
class Swap:
    """A resolved swap: a tuple of legs in a single currency."""
    legs: Tuple[SwapLeg, ...]

    def legs_of_type(self, leg_type: LegType) -> Tuple[SwapLeg, ...]:
        return tuple(leg for leg in self.legs if leg.leg_type == leg_type)

    def fixed_leg(self) -> SwapLeg:
        """The unique fixed leg; raises ValueError when there is not exactly one."""
        legs = self.legs_of_type(LegType.FIXED)
        if len(legs) != 1:
            raise ValueError(f"Swap should have exactly one fixed leg, found {len(legs)}")
        return legs[0]

    def ibor_leg(self) -> SwapLeg:
        """The unique Ibor leg; raises ValueError when there is not exactly one."""
        legs = self.legs_of_type(LegType.IBOR)
        if len(legs) != 1:
            raise ValueError(f"Swap should have exactly one Ibor leg, found {len(legs)}")
        return legs[0]

    @property
    def start_date(self) -> date:
        return min(leg.start_date for leg in self.legs)

    @property
    def end_date(self) -> date:
        return max(leg.end_date for leg in self.legs)


def fixed_ibor_swap(
    effective_date: date,
    tenor: str,
    fixed_rate: float,
    notional: float,
    index: IborIndex,
    pay_fixed: bool = True,
    conventions: Optional[SwapConventions] = None,
    spread: float = 0.0,
    holidays: Optional[set] = None
) -> Swap:
    """
    Build a fixed versus Ibor swap on regular schedules.

    Args:
        effective_date: Swap effective date
        tenor: Swap tenor (e.g. "5Y")
        fixed_rate: Fixed rate (decimal)
        notional: Notional amount (positive)
        index: Ibor index of the floating leg (its tenor sets the period length)
        pay_fixed: True to pay the fixed leg and receive the Ibor leg
        conventions: Fixed leg and schedule conventions
        spread: Spread added to the Ibor rate
        holidays: Holiday calendar

    Returns:
        Resolved Swap with the fixed leg first
    """
    conventions = conventions or SwapConventions.eur_annual()
    maturity = DateUtils.add_tenor(effective_date, tenor)
    fixed_direction = PayReceive.PAY if pay_fixed else PayReceive.RECEIVE
    ibor_direction = PayReceive.RECEIVE if pay_fixed else PayReceive.PAY

    fixed_schedule = generate_leg_schedule(
        effective_date, maturity, 12 // conventions.fixed_frequency,
        conventions.fixed_day_count, conventions.business_day, holidays
    )
    fixed_periods = tuple(
        FixedPeriod(
            start_date=start,
            end_date=end,
            payment_date=pay,
            year_fraction=yf,
            rate=fixed_rate,
            notional=fixed_direction.sign * notional
        )
        for start, end, pay, yf in zip(
            fixed_schedule.accrual_starts, fixed_schedule.accrual_ends,
            fixed_schedule.payment_dates, fixed_schedule.year_fractions
        )
    )

    ibor_schedule = generate_leg_schedule(
        effective_date, maturity, DateUtils.tenor_to_months(index.tenor),
        index.day_count, conventions.business_day, holidays
    )
    ibor_periods = []
    for start, end, pay, yf in zip(
        ibor_schedule.accrual_starts, ibor_schedule.accrual_ends,
        ibor_schedule.payment_dates, ibor_schedule.year_fractions
    ):
        index_maturity = index.maturity_from_effective(start)
        ibor_periods.append(IborPeriod(
            start_date=start,
            end_date=end,
            payment_date=pay,
            year_fraction=yf,
            notional=ibor_direction.sign * notional,
            index=index,
            fixing_date=index.fixing_from_effective(start),
            effective_date=start,
            maturity_date=index_maturity,
            index_year_fraction=year_fraction(start, index_maturity, index.day_count),
            spread=spread
        ))

    return Swap(legs=(
        SwapLeg(LegType.FIXED, fixed_direction, fixed_periods),
        SwapLeg(LegType.IBOR, ibor_direction, tuple(ibor_periods)),
    ))


def fixed_ibor_swap_from_fixing(
    fixing_date: date,
    tenor: str,
    fixed_rate: float,
    notional: float,
    index: IborIndex,
    pay_fixed: bool = True,
    conventions: Optional[SwapConventions] = None,
    holidays: Optional[set] = None
) -> Swap:
    """Swap starting the settlement lag after a fixing or expiry date."""
    conventions = conventions or SwapConventions.eur_annual()
    effective = add_business_days(fixing_date, conventions.settlement_days, holidays)
    return fixed_ibor_swap(
        effective, tenor, fixed_rate, notional, index,
        pay_fixed=pay_fixed, conventions=conventions, holidays=holidays
    )


__all__ = [
    "PayReceive",
    "IborIndex",
    "FixedPeriod",
    "IborPeriod",
    "LegType",
    "SwapLeg",
    "Swap",
    "fixed_ibor_swap",
    "fixed_ibor_swap_from_fixing",
]
