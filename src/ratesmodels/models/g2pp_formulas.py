"""
Closed-form integrals of the G2++ model with piecewise-constant volatilities.

Provides:
- volatility_maturity_part: H_i(u, v) = (exp(-a_i u) - exp(-a_i v)) / a_i
- gamma: covariance of the factor integrals between two expiries
- alpha_ratio_discount_factors: variance components of log P(., v) / P(., u)
- alpha_collateral_account: variance components of the collateral-account
  discounted bond
- covariance_discount_factors: 2x2 covariance of two G2++ models sharing
  their factors

All integrals run over the refined partition {start, pillars, end}; the
result is zero for an empty interval.
"""

from typing import Union

import numpy as np

from .g2pp import G2ppParameters
from .parameters import bucket_volatilities, refined_partition


def volatility_maturity_part(
    parameters: G2ppParameters,
    u: float,
    v: Union[float, np.ndarray]
) -> np.ndarray:
    """
    Maturity dependent part of the factor volatilities.

    Args:
        parameters: G2++ parameters
        u: Denominator bond maturity
        v: Numerator bond maturity, scalar or array

    Returns:
        Array of shape (2,) or (2, len(v))
    """
    a = parameters.mean_reversions
    v = np.asarray(v, dtype=np.float64)
    a_col = a.reshape((2,) + (1,) * v.ndim)
    return (np.exp(-a_col * u) - np.exp(-a_col * v)) / a_col


def gamma(parameters: G2ppParameters, start_expiry: float, end_expiry: float) -> np.ndarray:
    """
    Covariance matrix of the factor integrals between two expiries.

    gamma_ij = sum_k eta_i eta_j (exp((a_i + a_j) s_{k+1}) - exp((a_i + a_j) s_k)) / (a_i + a_j)

    Args:
        parameters: G2++ parameters
        start_expiry: Start of the integration
        end_expiry: End of the integration

    Returns:
        Symmetric 2x2 array; the off-diagonal term excludes the correlation
    """
    a = parameters.mean_reversions
    s, index_start = refined_partition(parameters.volatility_time, start_expiry, end_expiry)
    n_periods = len(s) - 1
    eta = np.vstack([
        bucket_volatilities(parameters.volatility1, index_start, n_periods),
        bucket_volatilities(parameters.volatility2, index_start, n_periods),
    ])
    result = np.zeros((2, 2))
    for i in range(2):
        for j in range(2):
            a_ij = a[i] + a[j]
            exp_s = np.exp(a_ij * s)
            result[i, j] = np.sum(eta[i] * eta[j] * np.diff(exp_s)) / a_ij
    return result


def alpha_ratio_discount_factors(
    parameters: G2ppParameters,
    start_expiry: float,
    end_expiry: float,
    denominator_maturity: float,
    numerator_maturity: float
) -> np.ndarray:
    """
    Variance components of the ratio P(., v) / P(., u) between two expiries.

    Args:
        parameters: G2++ parameters
        start_expiry: Start of the integration
        end_expiry: End of the integration
        denominator_maturity: Bond maturity u
        numerator_maturity: Bond maturity v

    Returns:
        Array [alpha_1^2, alpha_2^2, tau^2] where tau^2 includes the
        correlated cross term
    """
    h = volatility_maturity_part(parameters, denominator_maturity, numerator_maturity)
    g = gamma(parameters, start_expiry, end_expiry)
    alpha1_2 = h[0] * h[0] * g[0, 0]
    alpha2_2 = h[1] * h[1] * g[1, 1]
    tau2 = alpha1_2 + alpha2_2 + 2 * parameters.correlation * g[0, 1] * h[0] * h[1]
    return np.array([alpha1_2, alpha2_2, tau2])


def alpha_collateral_account(
    parameters: G2ppParameters,
    start_expiry: float,
    end_expiry: float,
    maturity: float
) -> np.ndarray:
    """
    Variance components of the bond P(., maturity) discounted by the collateral account.

    Args:
        parameters: G2++ parameters
        start_expiry: Start of the integration
        end_expiry: End of the integration
        maturity: Bond maturity

    Returns:
        Array [alpha_1^2, alpha_2^2, total variance]
    """
    kappa = parameters.mean_reversions
    rho = parameters.correlation
    s, index_start = refined_partition(parameters.volatility_time, start_expiry, end_expiry)
    n_periods = len(s) - 1
    eta = np.vstack([
        bucket_volatilities(parameters.volatility1, index_start, n_periods),
        bucket_volatilities(parameters.volatility2, index_start, n_periods),
    ])
    ds = np.diff(s)
    exp_u = np.exp(-kappa * maturity)

    alpha = np.zeros(3)
    for i in range(2):
        eta2 = eta[i] * eta[i]
        term1 = np.sum(eta2 * ds)
        term2 = np.sum(eta2 * np.diff(np.exp(kappa[i] * s)))
        term3 = np.sum(eta2 * np.diff(np.exp(2 * kappa[i] * s)))
        alpha[i] = (term1 - 2.0 / kappa[i] * exp_u[i] * term2
                    + exp_u[i] * exp_u[i] * term3 / (2.0 * kappa[i])) / (kappa[i] * kappa[i])

    eta12 = eta[0] * eta[1]
    cross1 = np.sum(eta12 * ds)
    cross2 = np.sum(eta12 * np.diff(np.exp(kappa[0] * s)))
    cross3 = np.sum(eta12 * np.diff(np.exp(kappa[1] * s)))
    cross4 = np.sum(eta12 * np.diff(np.exp((kappa[0] + kappa[1]) * s)))
    alpha[2] = alpha[0] + alpha[1] + 2.0 * rho / (kappa[0] * kappa[1]) * (
        cross1 - exp_u[0] / kappa[0] * cross2 - exp_u[1] / kappa[1] * cross3
        + exp_u[0] * exp_u[1] / (kappa[0] + kappa[1]) * cross4
    )
    return alpha


def covariance_discount_factors(
    parameters1: G2ppParameters,
    parameters2: G2ppParameters,
    start_expiry: float,
    end_expiry: float,
    maturity1: float,
    maturity2: float
) -> np.ndarray:
    """
    Factor-by-factor covariance of two collateral-discounted bonds in two G2++ models.

    The two models must share their factors: same correlation and same
    volatility grid.

    Args:
        parameters1: First model
        parameters2: Second model
        start_expiry: Start of the integration
        end_expiry: End of the integration
        maturity1: Bond maturity in the first model
        maturity2: Bond maturity in the second model

    Returns:
        2x2 array, entry [k1, k2] for factor k1 of model 1 and k2 of model 2;
        off-diagonal entries include the correlation
    """
    if parameters1.correlation != parameters2.correlation:
        raise ValueError("G2++ models must be based on same factors with same correlation")
    if not np.array_equal(parameters1.volatility_time, parameters2.volatility_time):
        raise ValueError("G2++ models must share the same volatility time grid")
    rho = parameters1.correlation
    kappa = np.vstack([parameters1.mean_reversions, parameters2.mean_reversions])
    s, index_start = refined_partition(parameters1.volatility_time, start_expiry, end_expiry)
    n_periods = len(s) - 1
    eta1 = [bucket_volatilities(v, index_start, n_periods)
            for v in (parameters1.volatility1, parameters1.volatility2)]
    eta2 = [bucket_volatilities(v, index_start, n_periods)
            for v in (parameters2.volatility1, parameters2.volatility2)]
    ds = np.diff(s)

    covariance = np.zeros((2, 2))
    for k1 in range(2):
        for k2 in range(2):
            a1 = kappa[0, k1]
            a2 = kappa[1, k2]
            eta12 = eta1[k1] * eta2[k2]
            term1 = np.sum(eta12 * ds)
            term2 = np.sum(eta12 * np.diff(np.exp(a1 * s))) * -np.exp(-a1 * maturity1) / a1
            term3 = np.sum(eta12 * np.diff(np.exp(a2 * s))) * -np.exp(-a2 * maturity2) / a2
            term4 = (np.sum(eta12 * np.diff(np.exp((a1 + a2) * s)))
                     * np.exp(-a1 * maturity1 - a2 * maturity2) / (a1 + a2))
            covariance[k1, k2] = (term1 + term2 + term3 + term4) / (a1 * a2)
            if k1 != k2:
                covariance[k1, k2] *= rho
    return covariance


__all__ = [
    "volatility_maturity_part",
    "gamma",
    "alpha_ratio_discount_factors",
    "alpha_collateral_account",
    "covariance_discount_factors",
]
