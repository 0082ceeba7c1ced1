"""
Closed-form integrals of the Hull-White one-factor model.

Provides:
- alpha: volatility of log P(., u) / P(., theta) between two expiries
- alpha_cash_account: volatility of the bond discounted by the cash account
- alpha2_forward_g_part: common integral of forward and futures adjustments
- timing_adjustment_factor, futures_convexity_factor
- short_rate_variance, variance_cross_term
- exercise_boundary: critical value kappa of a physical swaption

Volatility integrals run over the refined partition {start, pillars, end}.
"""

import logging

import numpy as np
from scipy.optimize import brentq

from ..errors import CalibrationError
from .hullwhite import HullWhiteParameters
from .parameters import bucket_volatilities, refined_partition


logger = logging.getLogger(__name__)


def _eta2_partition(parameters: HullWhiteParameters, start: float, end: float):
    """Refined partition and squared volatilities of its periods."""
    s, index_start = refined_partition(parameters.volatility_time, start, end)
    eta = bucket_volatilities(parameters.volatility, index_start, len(s) - 1)
    return s, eta * eta


def alpha(
    parameters: HullWhiteParameters,
    start_expiry: float,
    end_expiry: float,
    numeraire_time: float,
    bond_maturity: float
) -> float:
    """
    Volatility of the ratio P(., bond_maturity) / P(., numeraire_time).

    alpha^2 = (exp(-a theta) - exp(-a u))^2 sum eta^2 (exp(2 a s_{k+1}) - exp(2 a s_k)) / (2 a^3)

    Args:
        parameters: Hull-White parameters
        start_expiry: Start of the integration
        end_expiry: End of the integration
        numeraire_time: Numeraire bond maturity theta
        bond_maturity: Bond maturity u

    Returns:
        Signed alpha (positive when u > theta)
    """
    a = parameters.mean_reversion
    factor1 = np.exp(-a * numeraire_time) - np.exp(-a * bond_maturity)
    s, eta2 = _eta2_partition(parameters, start_expiry, end_expiry)
    factor2 = np.sum(eta2 * np.diff(np.exp(2 * a * s)))
    return float(factor1 * np.sqrt(factor2 / (2 * a ** 3)))


def alphas(
    parameters: HullWhiteParameters,
    start_expiry: float,
    end_expiry: float,
    numeraire_time: float,
    bond_maturities: np.ndarray
) -> np.ndarray:
    """Vectorised alpha over several bond maturities."""
    a = parameters.mean_reversion
    u = np.asarray(bond_maturities, dtype=np.float64)
    factor1 = np.exp(-a * numeraire_time) - np.exp(-a * u)
    s, eta2 = _eta2_partition(parameters, start_expiry, end_expiry)
    factor2 = np.sum(eta2 * np.diff(np.exp(2 * a * s)))
    return factor1 * np.sqrt(factor2 / (2 * a ** 3))


def alpha_cash_account(
    parameters: HullWhiteParameters,
    start_expiry: float,
    end_expiry: float,
    bond_maturity: float
) -> float:
    """Volatility of P(., bond_maturity) discounted by the cash account."""
    kappa = parameters.mean_reversion
    s, eta2 = _eta2_partition(parameters, start_expiry, end_expiry)
    exp_s = np.exp(kappa * s)
    factor1 = np.exp(-2 * kappa * bond_maturity) / (2 * kappa) * np.sum(eta2 * np.diff(exp_s * exp_s))
    factor2 = -2 * np.exp(-kappa * bond_maturity) / kappa * np.sum(eta2 * np.diff(exp_s))
    factor3 = np.sum(eta2 * np.diff(s))
    return float(np.sqrt(factor1 + factor2 + factor3) / kappa)


def alpha2_forward_g_part(parameters: HullWhiteParameters, start_expiry: float, end_expiry: float) -> float:
    """Integral sum eta^2 (exp(2 a s_{k+1}) - exp(2 a s_k)) / (2 a)."""
    kappa = parameters.mean_reversion
    s, eta2 = _eta2_partition(parameters, start_expiry, end_expiry)
    return float(np.sum(eta2 * np.diff(np.exp(2 * kappa * s))) / (2 * kappa))


def timing_adjustment_factor(parameters: HullWhiteParameters, s: float, t: float, v: float) -> float:
    """
    Adjustment factor of a payment at v of a rate fixing at s on a period ending at t.

    Args:
        parameters: Hull-White parameters
        s: Fixing time
        t: Period end time
        v: Payment time

    Returns:
        Multiplicative adjustment exp(gamma)
    """
    kappa = parameters.mean_reversion
    g = ((np.exp(-kappa * s) - np.exp(-kappa * t)) * (np.exp(-kappa * v) - np.exp(-kappa * t))
         / (kappa * kappa) * alpha2_forward_g_part(parameters, 0.0, s))
    return float(np.exp(g))


def futures_convexity_factor(
    parameters: HullWhiteParameters,
    s: float,
    t: float,
    u: float,
    v: float
) -> float:
    """
    Convexity adjustment factor of futures on the period [u, v], integrated on [s, t].

    Args:
        parameters: Hull-White parameters
        s: Start of the integration
        t: End of the integration (last trading time)
        u: Start of the underlying period
        v: End of the underlying period

    Returns:
        Multiplicative factor
    """
    if s > t:
        raise ValueError("start integration time must be before end integration time")
    a = parameters.mean_reversion
    factor1 = np.exp(-a * u) - np.exp(-a * v)
    q, eta2 = _eta2_partition(parameters, s, t)
    factor2 = np.sum(eta2 * np.diff(np.exp(a * q))
                     * (2 - np.exp(-a * (v - q[1:])) - np.exp(-a * (v - q[:-1]))))
    return float(np.exp(factor1 / (2 * a ** 3) * factor2))


def short_rate_variance(parameters: HullWhiteParameters, start_time: float, end_time: float) -> float:
    """Variance of the short rate at end_time accumulated from start_time."""
    a = parameters.mean_reversion
    s, eta2 = _eta2_partition(parameters, start_time, end_time)
    return float(np.exp(-2 * a * end_time) * np.sum(eta2 * np.diff(np.exp(2 * a * s))) / (2 * a))


def variance_cross_term(
    parameters: HullWhiteParameters,
    end_integral_time: float,
    t1: float,
    t2: float,
    t3: float,
    t4: float
) -> float:
    """
    Covariance of log P(., t2)/P(., t1) and log P(., t4)/P(., t3) accumulated on [0, end].
    """
    kappa = parameters.mean_reversion
    s, eta2 = _eta2_partition(parameters, 0.0, end_integral_time)
    factor1 = np.sum(eta2 * np.diff(np.exp(2 * kappa * s)))
    factor2 = ((np.exp(-kappa * t1) - np.exp(-kappa * t2)) * (np.exp(-kappa * t3) - np.exp(-kappa * t4))
               / (2 * kappa ** 3))
    return float(factor1 * factor2)


def exercise_boundary(discounted_cash_flows: np.ndarray, alpha_values: np.ndarray, tol: float = 1e-14) -> float:
    """
    Critical value kappa solving sum dcf_i exp(-alpha_i kappa - alpha_i^2 / 2) = 0.

    Args:
        discounted_cash_flows: Cash-flow equivalent amounts times discount factors
        alpha_values: Alphas of the cash flows
        tol: Absolute tolerance of the root search

    Returns:
        kappa, or +/- infinity when all alphas vanish

    Raises:
        CalibrationError: If no sign change can be bracketed
    """
    dcf = np.asarray(discounted_cash_flows, dtype=np.float64)
    alpha_values = np.asarray(alpha_values, dtype=np.float64)
    if np.all(np.abs(alpha_values) < 1e-9):
        return np.inf if np.sum(dcf) >= 0 else -np.inf

    def swap_value(x: float) -> float:
        return float(np.sum(dcf * np.exp(-alpha_values * x - 0.5 * alpha_values * alpha_values)))

    lower, upper = -2.0, 2.0
    for _ in range(60):
        if swap_value(lower) * swap_value(upper) < 0:
            break
        lower *= 2.0
        upper *= 2.0
    else:
        raise CalibrationError("Could not bracket the swaption exercise boundary")
    kappa, result = brentq(swap_value, lower, upper, xtol=tol, full_output=True)
    logger.debug("Exercise boundary %.12f after %d iterations", kappa, result.iterations)
    return float(kappa)


__all__ = [
    "alpha",
    "alphas",
    "alpha_cash_account",
    "alpha2_forward_g_part",
    "timing_adjustment_factor",
    "futures_convexity_factor",
    "short_rate_variance",
    "variance_cross_term",
    "exercise_boundary",
]
