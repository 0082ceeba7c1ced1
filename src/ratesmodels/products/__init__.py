"""
Products package - resolved rates products.

Provides:
- Fixed versus Ibor swaps and their builders
- CMS and CMS spread periods on swap indices
- Physical swaptions
"""

from .swap import (
    FixedPeriod,
    IborIndex,
    IborPeriod,
    LegType,
    PayReceive,
    Swap,
    SwapLeg,
    fixed_ibor_swap,
    fixed_ibor_swap_from_fixing,
)
from .cms import CmsPeriod, CmsPeriodType, CmsSpreadPeriod, SwapIndex, cms_period, cms_spread_period
from .swaption import Swaption, swaption

__all__ = [
    "FixedPeriod",
    "IborIndex",
    "IborPeriod",
    "LegType",
    "PayReceive",
    "Swap",
    "SwapLeg",
    "fixed_ibor_swap",
    "fixed_ibor_swap_from_fixing",
    "CmsPeriod",
    "CmsPeriodType",
    "CmsSpreadPeriod",
    "SwapIndex",
    "cms_period",
    "cms_spread_period",
    "Swaption",
    "swaption",
]
