"""
Calibration package - fit model parameters to swaption quotes.

Provides:
- LMM volatility calibrators (one level, two-level skew, N interpolated levels)
- SwaptionRootPriceCalibrator: generic root-price calibrator of any model
"""

from .lmm import (
    LmmSwaptionCalibrator,
    LmmSwaptionVolatility1LevelCalibrator,
    LmmSwaptionVolatility2SkewCalibrator,
    LmmSwaptionVolatilityNLevelCalibrator,
)
from .root_price import SwaptionRootPriceCalibrator

__all__ = [
    "LmmSwaptionCalibrator",
    "LmmSwaptionVolatility1LevelCalibrator",
    "LmmSwaptionVolatility2SkewCalibrator",
    "LmmSwaptionVolatilityNLevelCalibrator",
    "SwaptionRootPriceCalibrator",
]
