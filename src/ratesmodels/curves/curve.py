"""
Discount curve representation.

The Curve class provides:
- Discount factor P(0,t)
- Zero rate z(t), continuously compounded
- Simply compounded forward rate between two times or dates
- Parallel zero-rate bumps for finite-difference risk

Times are year fractions from the anchor date; zero rates are interpolated
between nodes.
"""

from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Union
import numpy as np

from ..conventions import DayCount, year_fraction
from .interpolation import Interpolator, create_interpolator


@dataclass
class CurveNode:
    """A single point on the curve."""
    time: float  # Year fraction from anchor
    discount_factor: float
    zero_rate: float  # Continuously compounded

    @classmethod
    def from_discount_factor(cls, time: float, df: float) -> "CurveNode":
        """Create node from discount factor."""
        if time <= 0:
            return cls(time=time, discount_factor=df, zero_rate=0.0)
        return cls(time=time, discount_factor=df, zero_rate=-np.log(df) / time)

    @classmethod
    def from_zero_rate(cls, time: float, zr: float) -> "CurveNode":
        """Create node from continuously compounded zero rate."""
        return cls(time=time, discount_factor=np.exp(-zr * time), zero_rate=zr)


class Curve:
    """
    Discount curve with zero-rate interpolation.

    Attributes:
        anchor_date: Valuation date (time 0)
        currency: Currency code
        day_count: Day count for date to time conversion
        interpolation_method: Name of interpolation method

    Conventions:
        - Zero rates are continuously compounded
        - The zero rate at t=0 is taken from the first pillar (flat short end)
        - Discount factor of a date on or before the anchor is 1.0
    """

    def __init__(
        self,
        anchor_date: date,
        currency: str = "EUR",
        day_count: DayCount = DayCount.ACT_365,
        interpolation_method: str = "linear"
    ):
        self.anchor_date = anchor_date
        self.currency = currency
        self.day_count = day_count
        self.interpolation_method = interpolation_method
        self._nodes: List[CurveNode] = []
        self._interpolator: Optional[Interpolator] = None

    def add_node(self, time: float, discount_factor: float) -> None:
        """
        Add a discount factor node to the curve.

        Args:
            time: Year fraction from anchor date (strictly positive)
            discount_factor: Discount factor P(0,t)
        """
        if time <= 0:
            raise ValueError("Node time must be positive")
        if discount_factor <= 0:
            raise ValueError(f"Invalid discount factor: {discount_factor}")
        self._add(CurveNode.from_discount_factor(time, discount_factor))

    def add_zero_rate_node(self, time: float, zero_rate: float) -> None:
        """Add a node from a continuously compounded zero rate."""
        if time <= 0:
            raise ValueError("Node time must be positive")
        self._add(CurveNode.from_zero_rate(time, zero_rate))

    def _add(self, node: CurveNode) -> None:
        self._nodes = [n for n in self._nodes if abs(n.time - node.time) >= 1e-10]
        self._nodes.append(node)
        self._nodes.sort(key=lambda n: n.time)
        self._interpolator = None

    def build(self) -> None:
        """Build the interpolator from current nodes."""
        if not self._nodes:
            raise ValueError("Need at least 1 node to build curve")
        times = np.array([0.0] + [n.time for n in self._nodes])
        zero_rates = np.array([self._nodes[0].zero_rate] + [n.zero_rate for n in self._nodes])
        self._interpolator = create_interpolator(self.interpolation_method).fit(times, zero_rates)

    def time(self, d: date) -> float:
        """Year fraction from the anchor date."""
        return year_fraction(self.anchor_date, d, self.day_count)

    def zero_rate(self, t: Union[float, date]) -> float:
        """
        Continuously compounded zero rate z(t).

        Args:
            t: Year fraction or date
        """
        if isinstance(t, date):
            t = self.time(t)
        if self._interpolator is None:
            self.build()
        return self._interpolator.interpolate(max(t, 0.0))

    def discount_factor(self, t: Union[float, date]) -> float:
        """
        Discount factor P(0,t).

        Args:
            t: Year fraction or date

        Returns:
            Discount factor
        """
        if isinstance(t, date):
            t = self.time(t)
        if t <= 0:
            return 1.0
        return float(np.exp(-self.zero_rate(t) * t))

    def forward_rate(self, t1: Union[float, date], t2: Union[float, date], accrual: Optional[float] = None) -> float:
        """
        Simply compounded forward rate between t1 and t2.

        Args:
            t1: Start time or date
            t2: End time or date
            accrual: Accrual factor of the period (defaults to t2 - t1 in curve time)

        Returns:
            (P(t1) / P(t2) - 1) / accrual
        """
        if isinstance(t1, date):
            t1 = self.time(t1)
        if isinstance(t2, date):
            t2 = self.time(t2)
        if t2 <= t1:
            raise ValueError("t2 must be greater than t1")
        delta = accrual if accrual is not None else t2 - t1
        return (self.discount_factor(t1) / self.discount_factor(t2) - 1) / delta

    def bump_parallel(self, bp: float) -> "Curve":
        """
        Create a new curve with all zero rates shifted.

        Args:
            bp: Bump size in basis points

        Returns:
            New bumped curve
        """
        bump = bp / 10000.0
        new_curve = Curve(self.anchor_date, self.currency, self.day_count, self.interpolation_method)
        for node in self._nodes:
            new_curve._add(CurveNode.from_zero_rate(node.time, node.zero_rate + bump))
        new_curve.build()
        return new_curve

    def __repr__(self) -> str:
        return (f"Curve(anchor={self.anchor_date}, currency={self.currency}, "
                f"nodes={len(self._nodes)}, method={self.interpolation_method})")


def create_flat_curve(
    anchor_date: date,
    rate: float,
    max_tenor_years: float = 60.0,
    currency: str = "EUR"
) -> Curve:
    """
    Create a flat continuously compounded zero curve.

    Args:
        anchor_date: Valuation date
        rate: Flat continuously compounded rate
        max_tenor_years: Last pillar in years
        currency: Currency code

    Returns:
        Flat curve
    """
    curve = Curve(anchor_date, currency, interpolation_method="linear")
    for t in [0.25, 0.5, 1, 2, 5, 10, 20, 30, max_tenor_years]:
        if t <= max_tenor_years:
            curve.add_zero_rate_node(t, rate)
    curve.build()
    return curve


__all__ = [
    "Curve",
    "CurveNode",
    "create_flat_curve",
]
