"""
RatesModels: Term Structure Models, Swaption & CMS Pricing Library

A modular library for:
- Piecewise constant volatility Gaussian models (G2++, Hull-White) and
  their closed-form variance / covariance formulas
- Rational one-factor and two-factor multi-curve models
- Displaced diffusion Libor Market Model with deterministic spreads and
  its single jump Monte Carlo evolution
- Physical swaption and CMS coupon / caplet / floorlet pricing (explicit,
  numerical integration, Monte Carlo)
- Calibration of model volatilities to swaption implied volatilities

Scope: single currency, European products with a single decision date.
"""

__version__ = "0.1.0"

# Core modules
from .conventions import DayCount, BusinessDayConvention, SwapConventions, year_fraction
from .dates import DateUtils, ScheduleInfo
from .errors import (
    CalibrationError,
    InstrumentOrderError,
    IntegrationError,
    MissingFixingError,
    ParameterValidationError,
)
from .config import IntegrationSettings, MonteCarloSettings, RootSearchSettings, TaylorSettings
from .market_state import RatesEnvironment

# Curves
from .curves import Curve, create_flat_curve, create_interpolator

# Products
from .products import (
    CmsPeriod,
    CmsPeriodType,
    CmsSpreadPeriod,
    IborIndex,
    Swap,
    SwapIndex,
    Swaption,
    cms_period,
    cms_spread_period,
    fixed_ibor_swap,
    swaption,
)

# Models
from .models import (
    G2ppParameters,
    HullWhiteParameters,
    LmmParameters,
    RationalOneFactorParameters,
    RationalTwoFactorParameters,
    lmm_1factor,
    lmm_2angle,
    lmm_hw,
    model_period_dates,
)

# Monte Carlo
from .montecarlo import LmmMonteCarloEvolution, NumpyNormalGenerator

# Pricers
from .pricers import (
    DiscountingSwapPricer,
    HullWhiteCmsPeriodExplicitPricer,
    HullWhiteCmsPeriodNumericalIntegrationPricer,
    HullWhiteSwaptionPhysicalPricer,
    LmmCmsPeriodMonteCarloPricer,
    LmmCmsSpreadPeriodMonteCarloPricer,
    LmmSwaptionPhysicalExplicitApproxPricer,
    LmmSwaptionPhysicalMonteCarloPricer,
    RationalOneFactorSwaptionPhysicalPricer,
    RationalTwoFactorSwaptionPhysicalPricer,
)

# Calibration
from .calibration import (
    LmmSwaptionVolatility1LevelCalibrator,
    LmmSwaptionVolatility2SkewCalibrator,
    LmmSwaptionVolatilityNLevelCalibrator,
    SwaptionRootPriceCalibrator,
)

# Risk
from .risk import cms_zero_rate_sensitivities, parallel_dv01, parameter_sensitivities

__all__ = [
    "__version__",
    # Core
    "DayCount",
    "BusinessDayConvention",
    "SwapConventions",
    "year_fraction",
    "DateUtils",
    "ScheduleInfo",
    "CalibrationError",
    "InstrumentOrderError",
    "IntegrationError",
    "MissingFixingError",
    "ParameterValidationError",
    "IntegrationSettings",
    "MonteCarloSettings",
    "RootSearchSettings",
    "TaylorSettings",
    "RatesEnvironment",
    # Curves
    "Curve",
    "create_flat_curve",
    "create_interpolator",
    # Products
    "CmsPeriod",
    "CmsPeriodType",
    "CmsSpreadPeriod",
    "IborIndex",
    "Swap",
    "SwapIndex",
    "Swaption",
    "cms_period",
    "cms_spread_period",
    "fixed_ibor_swap",
    "swaption",
    # Models
    "G2ppParameters",
    "HullWhiteParameters",
    "LmmParameters",
    "RationalOneFactorParameters",
    "RationalTwoFactorParameters",
    "lmm_1factor",
    "lmm_2angle",
    "lmm_hw",
    "model_period_dates",
    # Monte Carlo
    "LmmMonteCarloEvolution",
    "NumpyNormalGenerator",
    # Pricers
    "DiscountingSwapPricer",
    "HullWhiteCmsPeriodExplicitPricer",
    "HullWhiteCmsPeriodNumericalIntegrationPricer",
    "HullWhiteSwaptionPhysicalPricer",
    "LmmCmsPeriodMonteCarloPricer",
    "LmmCmsSpreadPeriodMonteCarloPricer",
    "LmmSwaptionPhysicalExplicitApproxPricer",
    "LmmSwaptionPhysicalMonteCarloPricer",
    "RationalOneFactorSwaptionPhysicalPricer",
    "RationalTwoFactorSwaptionPhysicalPricer",
    # Calibration
    "LmmSwaptionVolatility1LevelCalibrator",
    "LmmSwaptionVolatility2SkewCalibrator",
    "LmmSwaptionVolatilityNLevelCalibrator",
    "SwaptionRootPriceCalibrator",
    # Risk
    "cms_zero_rate_sensitivities",
    "parallel_dv01",
    "parameter_sensitivities",
]
