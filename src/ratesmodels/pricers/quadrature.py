"""
Adaptive quadrature used by the semi-explicit and integration pricers.

Failures reported by scipy quad are surfaced as IntegrationError rather
than left as warnings.
"""

import logging
from typing import Callable, Optional, Sequence

from scipy.integrate import quad

from ..config import IntegrationSettings
from ..errors import IntegrationError


logger = logging.getLogger(__name__)


def gaussian_quad(
    integrand: Callable[[float], float],
    lower: float,
    upper: float,
    settings: IntegrationSettings,
    points: Optional[Sequence[float]] = None
) -> float:
    """
    Integrate on [lower, upper] with scipy quad.

    Args:
        integrand: Function of one variable
        lower: Lower bound
        upper: Upper bound
        settings: Tolerances and number of subdivisions
        points: Break points inside the interval (kinks of the payoff)

    Returns:
        Value of the integral

    Raises:
        IntegrationError: If quad reports that the integral did not converge
    """
    if upper <= lower:
        return 0.0
    inner = [p for p in (points or ()) if lower < p < upper] or None
    result = quad(
        integrand, lower, upper,
        epsabs=settings.epsabs, epsrel=settings.epsrel,
        limit=settings.subdivisions, points=inner, full_output=1
    )
    # A fourth element (the message) is only returned on failure
    if len(result) > 3:
        raise IntegrationError(f"Quadrature did not converge: {result[3]}")
    value, error = result[0], result[1]
    logger.debug("Quadrature on [%.2f, %.2f]: %.12f (error %.2e)", lower, upper, value, error)
    return float(value)


__all__ = ["gaussian_quad"]
