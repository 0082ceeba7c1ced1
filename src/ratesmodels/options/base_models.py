"""
Option formulas used to quote model prices.

Implements:
- Bachelier (normal) price, the market quote of swaption volatilities
- Black price on a displaced or shifted forward, used by the LMM
  swaption approximation and the rational model pricers
- Implied Bachelier volatility of a price
"""

import logging
from typing import Optional

import numpy as np
from scipy.optimize import brentq
from scipy.stats import norm


logger = logging.getLogger(__name__)

N = norm.cdf
n = norm.pdf


def bachelier_price(
    forward: float,
    strike: float,
    expiry: float,
    volatility: float,
    is_call: bool = True,
    annuity: float = 1.0
) -> float:
    """
    Bachelier price of an option on a forward following d forward = volatility dW.

    Args:
        forward: Forward rate
        strike: Strike
        expiry: Time to expiry in years
        volatility: Normal volatility
        is_call: True for a call (payer swaption), False for a put
        annuity: Discount factor or swap annuity multiplying the payoff

    Returns:
        Option price; the discounted intrinsic value without time value
    """
    omega = 1.0 if is_call else -1.0
    if expiry <= 0 or volatility <= 0:
        return annuity * max(omega * (forward - strike), 0.0)
    sd = volatility * np.sqrt(expiry)
    d = (forward - strike) / sd
    return float(annuity * (omega * (forward - strike) * N(omega * d) + sd * n(d)))


def black_price(
    forward: float,
    strike: float,
    expiry: float,
    volatility: float,
    is_call: bool = True,
    annuity: float = 1.0
) -> float:
    """
    Black price of an option on a positive forward.

    A non-positive strike is always exercised for a call and worthless for
    a put, which is how the displaced and rational pricers reach the
    degenerate boundaries.

    Raises:
        ValueError: If the forward is not positive
    """
    if forward <= 0:
        raise ValueError(f"Forward must be positive for Black model, got {forward}")
    omega = 1.0 if is_call else -1.0
    if strike <= 0:
        return annuity * (forward - strike) if is_call else 0.0
    if expiry <= 0 or volatility <= 0:
        return annuity * max(omega * (forward - strike), 0.0)
    sd = volatility * np.sqrt(expiry)
    d1 = np.log(forward / strike) / sd + 0.5 * sd
    d2 = d1 - sd
    return float(annuity * omega * (forward * N(omega * d1) - strike * N(omega * d2)))


def implied_vol_bachelier(
    price: float,
    forward: float,
    strike: float,
    expiry: float,
    annuity: float = 1.0,
    is_call: bool = True,
    tol: float = 1e-14,
    max_iter: int = 200,
    vol_upper: Optional[float] = None
) -> float:
    """
    Normal volatility reproducing an option price.

    The volatility is bracketed between 0 and an upper bound doubled until
    it prices above the target, then solved with Brent's method.

    Args:
        price: Option price (long position)
        forward: Forward rate
        strike: Strike
        expiry: Time to expiry in years
        annuity: Discount factor or swap annuity
        is_call: True for a call, False for a put
        tol: Absolute tolerance on the volatility
        max_iter: Maximal number of Brent iterations
        vol_upper: First upper bound of the bracket

    Returns:
        Implied normal volatility, 0 for a price at intrinsic value

    Raises:
        ValueError: If the option expired or the price is below intrinsic value
    """
    if expiry <= 0:
        raise ValueError("Cannot compute implied vol for expired option")
    intrinsic = annuity * max((forward - strike) if is_call else (strike - forward), 0.0)
    if price < intrinsic - 1e-14 * max(1.0, abs(annuity)):
        raise ValueError(f"Price {price} is below intrinsic value {intrinsic}")
    if price <= intrinsic:
        return 0.0

    def residual(volatility: float) -> float:
        return bachelier_price(forward, strike, expiry, volatility, is_call, annuity) - price

    upper = vol_upper or max(abs(forward - strike) / np.sqrt(expiry), 0.01)
    while residual(upper) < 0:
        upper *= 2.0
    volatility, result = brentq(residual, 0.0, upper, xtol=tol, rtol=4 * np.finfo(float).eps,
                                maxiter=max_iter, full_output=True)
    logger.debug("Implied Bachelier vol %.10f after %d iterations", volatility, result.iterations)
    return float(volatility)


__all__ = ["N", "n", "bachelier_price", "black_price", "implied_vol_bachelier"]
