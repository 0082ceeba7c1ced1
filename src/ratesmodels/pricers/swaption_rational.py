"""
Physical swaptions in the rational multi-curve models.

One factor: at expiry the swap value is c0 + c1 X with X log-normal of
volatility a, so the swaption is a Black option on the two coefficients.

Two factors: conditional on the first factor the value is
c0 + c1 X1 + c2 X2 with X2 log-normal of volatility a2 sqrt(1 - rho^2);
the conditional Black price is integrated against the density of the
first factor.
"""

import logging
from typing import Optional

import numpy as np
from scipy.stats import norm

from ..config import IntegrationSettings
from ..models.rational import RationalOneFactorParameters, RationalTwoFactorParameters, swap_coefficients
from ..options.base_models import black_price
from ..products.swaption import Swaption
from .quadrature import gaussian_quad
from .swaption_common import ModelSwaptionPricer


logger = logging.getLogger(__name__)


def _black_on_coefficients(constant: float, slope: float, expiry: float, volatility: float) -> float:
    """E[(constant + slope M)^+] for M log-normal with mean 1."""
    if slope == 0.0:
        return max(constant, 0.0)
    if constant >= 0.0 and slope >= 0.0:
        return constant + slope
    if constant <= 0.0 and slope <= 0.0:
        return 0.0
    omega = np.sign(slope)
    return black_price(omega * slope, -omega * constant, expiry, volatility, slope > 0)


class RationalOneFactorSwaptionPhysicalPricer(ModelSwaptionPricer):
    """Explicit formula for physical swaptions in the rational one-factor model."""

    def present_value(self, swaption: Swaption, env, model: RationalOneFactorParameters) -> float:
        self.validate(swaption, env)
        c = swap_coefficients(swaption.underlying, env, model)
        expiry = env.time(swaption.expiry_date)
        pv = _black_on_coefficients(c[0], c[1], expiry, model.a)
        return swaption.sign * pv


class RationalTwoFactorSwaptionPhysicalPricer(ModelSwaptionPricer):
    """Semi-explicit formula for physical swaptions in the rational two-factor model."""

    def __init__(self, settings: Optional[IntegrationSettings] = None):
        self.settings = settings or IntegrationSettings()

    def present_value(self, swaption: Swaption, env, model: RationalTwoFactorParameters) -> float:
        self.validate(swaption, env)
        c = swap_coefficients(swaption.underlying, env, model)
        expiry = env.time(swaption.expiry_date)
        pv = self.integrate(c, expiry, model.a1, model.a2, model.correlation)
        return swaption.sign * pv

    def integrate(self, c: np.ndarray, expiry: float, a1: float, a2: float, rho: float) -> float:
        """
        E[(c0 + c1 X1 + c2 X2)^+] for correlated log-normal martingales X1, X2.

        Raises:
            IntegrationError: If the quadrature does not converge
        """
        sqrt_t = np.sqrt(expiry)
        conditional_vol = a2 * np.sqrt(max(1.0 - rho * rho, 0.0))

        def integrand(z: float) -> float:
            x1 = np.exp(a1 * sqrt_t * z - 0.5 * a1 * a1 * expiry)
            m = np.exp(a2 * rho * sqrt_t * z - 0.5 * a2 * a2 * rho * rho * expiry)
            value = _black_on_coefficients(c[0] + c[1] * x1, c[2] * m, expiry, conditional_vol)
            return value * norm.pdf(z)

        limit = self.settings.limit
        result = gaussian_quad(integrand, -limit, limit, self.settings)
        logger.debug("Rational two-factor swaption integral %.10f", result)
        return result


__all__ = ["RationalOneFactorSwaptionPhysicalPricer", "RationalTwoFactorSwaptionPhysicalPricer"]
