"""
Pricers package - discounting, model swaption and CMS pricers.

Provides:
- DiscountingSwapPricer: swap present value, PVBP and par rate
- Physical swaption pricers in Hull-White, rational and LMM models
- CMS period pricers: explicit and numerical integration in Hull-White,
  Monte Carlo in the LMM (CMS and CMS spread)
"""

from .swap_discounting import DiscountingSwapPricer
from .swaption_common import ModelSwaptionPricer, swaption_bachelier_price, swaption_implied_volatility
from .swaption_hullwhite import HullWhiteSwaptionPhysicalPricer
from .swaption_rational import RationalOneFactorSwaptionPhysicalPricer, RationalTwoFactorSwaptionPhysicalPricer
from .swaption_lmm import LmmSwaptionPhysicalExplicitApproxPricer, LmmSwaptionPhysicalMonteCarloPricer
from .cms_explicit import HullWhiteCmsPeriodExplicitPricer
from .cms_integration import HullWhiteCmsPeriodNumericalIntegrationPricer
from .cms_montecarlo import LmmCmsPeriodMonteCarloPricer, LmmCmsSpreadPeriodMonteCarloPricer
from .quadrature import gaussian_quad

__all__ = [
    "DiscountingSwapPricer",
    "ModelSwaptionPricer",
    "swaption_bachelier_price",
    "swaption_implied_volatility",
    "HullWhiteSwaptionPhysicalPricer",
    "RationalOneFactorSwaptionPhysicalPricer",
    "RationalTwoFactorSwaptionPhysicalPricer",
    "LmmSwaptionPhysicalExplicitApproxPricer",
    "LmmSwaptionPhysicalMonteCarloPricer",
    "HullWhiteCmsPeriodExplicitPricer",
    "HullWhiteCmsPeriodNumericalIntegrationPricer",
    "LmmCmsPeriodMonteCarloPricer",
    "LmmCmsSpreadPeriodMonteCarloPricer",
    "gaussian_quad",
]
