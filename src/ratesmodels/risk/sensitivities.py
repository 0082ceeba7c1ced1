"""
Model parameter and curve sensitivities.

Provides:
- parameter_sensitivities: bump-and-reprice over the indexed parameter view
  of any model, as a pandas Series labelled by parameter metadata
- parallel_dv01: bump-and-reprice of the discount and forward curves
- cms_zero_rate_sensitivities: backward sweep zero rate sensitivities of a
  CMS coupon in Hull-White
- BumpResult: base and bumped values of a bump
"""

from dataclasses import dataclass, field
from typing import Callable, Optional

import numpy as np
import pandas as pd

from ..models.hullwhite import HullWhiteParameters
from ..models.parameters import ParameterizedModel
from ..pricers.cms_explicit import HullWhiteCmsPeriodExplicitPricer
from ..products.cms import CmsPeriod


@dataclass
class BumpResult:
    """Result of a bump operation."""
    original_pv: float
    bumped_pv: float
    bump_size: float
    delta_pv: float = field(init=False)

    def __post_init__(self):
        self.delta_pv = self.bumped_pv - self.original_pv


def parameter_sensitivities(
    price: Callable[[ParameterizedModel], float],
    model: ParameterizedModel,
    bump: float = 1.0e-6,
    central: bool = True
) -> pd.Series:
    """
    Derivatives of a price with respect to every model parameter.

    Args:
        price: Function of the model returning a present value
        model: Model to bump
        bump: Absolute bump of each parameter
        central: Central difference if True, forward difference otherwise

    Returns:
        Series of d price / d parameter indexed by parameter metadata
    """
    base = None if central else price(model)
    values = np.zeros(model.parameter_count())
    for i in range(model.parameter_count()):
        p = model.get_parameter(i)
        up = price(model.with_replaced(i, p + bump))
        if central:
            down = price(model.with_replaced(i, p - bump))
            values[i] = (up - down) / (2.0 * bump)
        else:
            values[i] = (up - base) / bump
    labels = [model.parameter_metadata(i) for i in range(model.parameter_count())]
    return pd.Series(values, index=labels, name="sensitivity")


def parallel_bump(price: Callable[[object], float], env, bump_bp: float = 1.0) -> BumpResult:
    """
    Reprice with the discount curve and all forward curves shifted in parallel.

    Args:
        price: Function of the environment returning a present value
        env: RatesEnvironment
        bump_bp: Zero rate shift in basis points
    """
    bumped_forwards = {name: curve.bump_parallel(bump_bp) for name, curve in env.forward_curves.items()}
    bumped = env.with_discount_curve(env.discount_curve.bump_parallel(bump_bp), bumped_forwards)
    return BumpResult(price(env), price(bumped), bump_bp)


def parallel_dv01(price: Callable[[object], float], env, bump_bp: float = 1.0) -> float:
    """Central difference change of value for a 1bp parallel shift of all curves."""
    up = parallel_bump(price, env, bump_bp)
    down = parallel_bump(price, env, -bump_bp)
    return (up.bumped_pv - down.bumped_pv) / (2.0 * bump_bp)


def cms_zero_rate_sensitivities(
    cms: CmsPeriod,
    env,
    model: HullWhiteParameters,
    pricer: Optional[HullWhiteCmsPeriodExplicitPricer] = None
) -> pd.Series:
    """
    Zero rate point sensitivities of a CMS coupon, by date.

    The parallel sensitivity to a 1bp shift is the sum of the point
    sensitivities times 1e-4.

    Raises:
        NotImplementedError: For caplets and floorlets
    """
    pricer = pricer or HullWhiteCmsPeriodExplicitPricer()
    return pricer.present_value_sensitivity_rates(cms, env, model).rename("zero_rate_sensitivity")


__all__ = [
    "BumpResult",
    "parameter_sensitivities",
    "parallel_bump",
    "parallel_dv01",
    "cms_zero_rate_sensitivities",
]
