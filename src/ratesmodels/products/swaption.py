"""
Physically settled European swaption.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..conventions import SwapConventions
from .swap import IborIndex, Swap, fixed_ibor_swap_from_fixing


@dataclass(frozen=True)
class Swaption:
    """
    Physical swaption: the right to enter the underlying swap at expiry.

    Attributes:
        expiry_date: Exercise date
        underlying: Underlying fixed versus Ibor swap
        long: True for a long position
    """
    expiry_date: date
    underlying: Swap
    long: bool = True

    def __post_init__(self):
        if self.underlying.start_date < self.expiry_date:
            raise ValueError("Underlying swap starts before the swaption expiry")

    @property
    def sign(self) -> float:
        return 1.0 if self.long else -1.0

    @property
    def strike(self) -> float:
        """Fixed rate of the underlying (rate of the first fixed period)."""
        return self.underlying.fixed_leg().periods[0].rate

    @property
    def is_payer(self) -> bool:
        """True when the underlying pays the fixed leg."""
        return self.underlying.fixed_leg().periods[0].notional < 0

    @property
    def notional(self) -> float:
        return abs(self.underlying.fixed_leg().periods[0].notional)


def swaption(
    expiry_date: date,
    tenor: str,
    strike: float,
    notional: float,
    index: IborIndex,
    payer: bool = True,
    long: bool = True,
    conventions: Optional[SwapConventions] = None
) -> Swaption:
    """Swaption on a spot starting swap after expiry."""
    underlying = fixed_ibor_swap_from_fixing(
        expiry_date, tenor, strike, notional, index, pay_fixed=payer, conventions=conventions
    )
    return Swaption(expiry_date, underlying, long)


__all__ = ["Swaption", "swaption"]
