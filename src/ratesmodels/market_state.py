"""
Rates environment used by all pricers.

Holds the market inputs of a pricing call in one immutable place:
- valuation date and model time measure
- discount curve (collateral / OIS)
- forward curves by Ibor index name (default to the discount curve)
- historical fixings by index name, as pandas Series keyed by date
"""

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Dict, Iterable, Optional
import numpy as np
import pandas as pd

from .conventions import DayCount, relative_time, year_fraction
from .curves.curve import Curve
from .errors import MissingFixingError


@dataclass(frozen=True)
class RatesEnvironment:
    """
    Market data for a single valuation date.

    Attributes:
        valuation_date: Valuation date (time 0)
        discount_curve: Curve used for discounting
        forward_curves: Curves used to project Ibor rates, by index name
        fixings: Historical fixings, by index name
        time_day_count: Day count of the model time measure
    """
    valuation_date: date
    discount_curve: Curve
    forward_curves: Dict[str, Curve] = field(default_factory=dict)
    fixings: Dict[str, pd.Series] = field(default_factory=dict)
    time_day_count: DayCount = DayCount.ACT_365

    def __post_init__(self):
        if self.discount_curve.anchor_date != self.valuation_date:
            raise ValueError(
                f"Discount curve anchor {self.discount_curve.anchor_date} differs "
                f"from valuation date {self.valuation_date}"
            )

    def time(self, d: date) -> float:
        """Signed model time from the valuation date."""
        return relative_time(self.valuation_date, d, self.time_day_count)

    def times(self, dates: Iterable[date]) -> np.ndarray:
        return np.array([self.time(d) for d in dates])

    def discount_factor(self, d: date) -> float:
        return self.discount_curve.discount_factor(d)

    def discount_factors(self, dates: Iterable[date]) -> np.ndarray:
        return np.array([self.discount_curve.discount_factor(d) for d in dates])

    def forward_curve(self, index_name: str) -> Curve:
        """Projection curve of an index, falling back to the discount curve."""
        return self.forward_curves.get(index_name, self.discount_curve)

    def ibor_forward_rate(self, index, effective_date: date, maturity_date: date) -> float:
        """
        Forward Ibor rate of an index period.

        Args:
            index: IborIndex
            effective_date: Start of the index period
            maturity_date: End of the index period

        Returns:
            Simply compounded forward in the index day count
        """
        curve = self.forward_curve(index.name)
        accrual = year_fraction(effective_date, maturity_date, index.day_count)
        return curve.forward_rate(effective_date, maturity_date, accrual)

    def ibor_rate(self, period) -> float:
        """
        Rate of an Ibor period: the fixing when fixed, the forward otherwise.

        Raises:
            MissingFixingError: If the fixing date is on or before the
                valuation date and no fixing is available
        """
        if period.fixing_date <= self.valuation_date:
            return self.fixing(period.index.name, period.fixing_date)
        return self.ibor_forward_rate(period.index, period.effective_date, period.maturity_date)

    def fixing(self, index_name: str, fixing_date: date) -> float:
        """
        Historical fixing of an index.

        Raises:
            MissingFixingError: If the index or date is not in the time series
        """
        series = self.fixings.get(index_name)
        if series is None:
            raise MissingFixingError(index_name, fixing_date)
        key = pd.Timestamp(fixing_date)
        if key not in series.index:
            raise MissingFixingError(index_name, fixing_date)
        value = series.loc[key]
        if pd.isna(value):
            raise MissingFixingError(index_name, fixing_date)
        return float(value)

    def with_discount_curve(self, curve: Curve, bump_forwards: Optional[Dict[str, Curve]] = None) -> "RatesEnvironment":
        """Copy with a replaced discount curve (and optionally forward curves)."""
        forwards = dict(self.forward_curves)
        if bump_forwards:
            forwards.update(bump_forwards)
        return replace(self, discount_curve=curve, forward_curves=forwards)

    def with_fixing(self, index_name: str, fixing_date: date, value: float) -> "RatesEnvironment":
        """Copy with one more fixing in the time series of an index."""
        key = pd.Timestamp(fixing_date)
        addition = pd.Series([float(value)], index=pd.DatetimeIndex([key]))
        series = self.fixings.get(index_name)
        if series is None or series.empty:
            updated = addition
        else:
            updated = pd.concat([series[series.index != key], addition]).sort_index()
        fixings = dict(self.fixings)
        fixings[index_name] = updated
        return replace(self, fixings=fixings)


__all__ = ["RatesEnvironment"]
