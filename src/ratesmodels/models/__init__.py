"""
Models package - interest rate model parameter sets and their formulas.

Provides:
- ParameterizedModel protocol and piecewise-constant grid helpers
- G2ppParameters (two-factor additive Gaussian) and its formulas
- HullWhiteParameters (one-factor) and its formulas
- Rational one-factor and two-factor multi-curve models
- LmmParameters (displaced diffusion LMM) and its factories
"""

from .parameters import (
    VOLATILITY_TIME_SENTINEL,
    ParameterizedModel,
    ParameterizedModelMixin,
    bucket_index,
    refined_partition,
)
from .g2pp import G2ppParameters
from .hullwhite import HullWhiteParameters
from .rational import RationalOneFactorParameters, RationalTwoFactorParameters, swap_coefficients
from .lmm import LmmParameters
from .lmm_utils import lmm_1factor, lmm_2angle, lmm_hw, model_period_dates

__all__ = [
    "VOLATILITY_TIME_SENTINEL",
    "ParameterizedModel",
    "ParameterizedModelMixin",
    "bucket_index",
    "refined_partition",
    "G2ppParameters",
    "HullWhiteParameters",
    "RationalOneFactorParameters",
    "RationalTwoFactorParameters",
    "swap_coefficients",
    "LmmParameters",
    "lmm_hw",
    "lmm_1factor",
    "lmm_2angle",
    "model_period_dates",
]
