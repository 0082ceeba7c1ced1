"""
Physical swaptions in the displaced diffusion LMM.

Provides:
- LmmSwaptionPhysicalExplicitApproxPricer: explicit approximation freezing
  the drift and the swap weights at a mid point between the swap value
  today and the strike, giving an effective Black volatility
- LmmSwaptionPhysicalMonteCarloPricer: Monte Carlo on the multi-curve
  equivalent of the underlying swap

The instrument dates should match the model dates up to the model time
tolerance.
"""

import logging
from typing import Optional

import numpy as np

from ..decomposition.cash_flow_equivalent import cash_flow_equivalent_swap
from ..models.lmm import LmmParameters
from ..montecarlo.european import LmmMonteCarloEuropeanPricer, MulticurveLayout
from ..options.base_models import black_price
from ..products.swaption import Swaption
from .swaption_common import ModelSwaptionPricer, swaption_implied_volatility


logger = logging.getLogger(__name__)


def mean_reversion_impact(mean_reversion: float, expiry: float) -> float:
    """Integral of exp(2 a s) on [0, expiry]; expiry for a vanishing mean reversion."""
    if abs(mean_reversion) < 1.0e-6:
        return expiry
    return (np.exp(2.0 * mean_reversion * expiry) - 1.0) / (2.0 * mean_reversion)


def _cumulative_loadings(rate_ratio: np.ndarray, gamma: np.ndarray) -> np.ndarray:
    """mu_k = sum_{l <= k} ratio_l gamma_l, one row per period."""
    return np.cumsum(rate_ratio[:, None] * gamma, axis=0)


class LmmSwaptionPhysicalExplicitApproxPricer(ModelSwaptionPricer):
    """
    Explicit approximation of physical swaptions in the LMM.

    The underlying is replaced by its cash-flow equivalent aggregated on the
    model dates. The first amount plays the role of the strike; the others
    are the bond weights of a basket whose Black volatility is computed
    with the loadings frozen at the mid point bM = (b0 + bK) / 2.
    """

    def present_value(self, swaption: Swaption, env, model: LmmParameters) -> float:
        self.validate(swaption, env)
        cfe = cash_flow_equivalent_swap(swaption.underlying, env)
        cf_times = env.times(p.payment_date for p in cfe)
        cf_indices = model.ibor_time_index(cf_times)
        if np.any(cf_indices > model.period_count):
            raise ValueError("Swaption cash flows extend beyond the last model date")
        ind_start = int(cf_indices.min())
        ind_end = int(cf_indices.max())
        n_dates = ind_end - ind_start + 1

        amounts = np.zeros(n_dates)
        np.add.at(amounts, cf_indices - ind_start, [p.amount for p in cfe])
        amount0 = amounts[0]
        if amount0 > 0.0:
            amounts = -amounts
        is_call = amount0 < 0.0

        expiry = env.time(swaption.expiry_date)
        times = model.ibor_times[ind_start:ind_end + 1]
        df = np.array([env.discount_curve.discount_factor(float(t)) for t in times])
        periods = slice(ind_start, ind_end)
        gamma = model.volatilities[periods]
        delta = model.accrual_factors[periods]
        displacement = model.displacements[periods]
        forward = (df[:-1] / df[1:] - 1.0) / delta

        # Strike amount first, then the bond weights with a zero weight on the first date
        weights = np.concatenate([[0.0], amounts[1:]])
        p0 = df / df[0]
        d_p = weights * p0
        b0 = float(np.sum(d_p))
        b_k = -amounts[0]
        b_m = 0.5 * (b0 + b_k)
        impact = mean_reversion_impact(model.mean_reversion, expiry)

        rate0_ratio = (forward + displacement) / (forward + 1.0 / delta)
        mu0 = _cumulative_loadings(rate0_ratio, gamma)
        tau2 = np.zeros(n_dates)
        tau2[1:] = np.sum(mu0 * mu0, axis=1) * impact
        tau = np.sqrt(tau2)

        x_bar = (np.sum(d_p - 0.5 * d_p * tau2) - b_m) / np.sum(d_p * tau)
        p_m = p0 * (1.0 - x_bar * tau - 0.5 * tau2)
        libor_m = (p_m[:-1] / p_m[1:] - 1.0) / delta
        alpha_m = weights * p_m / b_m
        rate_m_ratio = (libor_m + displacement) / (libor_m + 1.0 / delta)
        mu_m = _cumulative_loadings(rate_m_ratio, gamma)
        sigma_m = alpha_m[1:] @ mu_m
        black_vol = float(np.sqrt(np.sum(sigma_m * sigma_m) * impact))
        logger.debug("LMM swaption effective Black volatility %.8f (b0 %.8f, bK %.8f)", black_vol, b0, b_k)

        pv = df[0] * black_price(b0, b_k, 1.0, black_vol, is_call)
        return swaption.sign * pv


class LmmSwaptionPhysicalMonteCarloPricer(LmmMonteCarloEuropeanPricer):
    """
    Monte Carlo pricer of physical swaptions.

    On each path the underlying is valued from the simulated forwards at
    expiry and the holder exercises when the value is positive.
    """

    def aggregation(self, product: Swaption, layout: MulticurveLayout, forwards: np.ndarray,
                    discounting: np.ndarray) -> np.ndarray:
        value = discounting[:, layout.df_indices] @ layout.df_amounts
        effective = layout.ibor_effective_indices
        ibor_rates = self.model.ibor_rate_from_dsc_forwards(forwards[:, effective], effective)
        value = value + (ibor_rates * discounting[:, layout.ibor_payment_indices]) @ layout.ibor_amounts
        return np.maximum(value, 0.0)

    def present_value(self, swaption: Swaption, env) -> float:
        ModelSwaptionPricer.validate(swaption, env)
        return swaption.sign * self.present_value_monte_carlo(swaption, env)

    def implied_volatility(self, swaption: Swaption, env, pv: Optional[float] = None) -> float:
        """Bachelier volatility of the Monte Carlo price (or of a price already computed)."""
        if pv is None:
            pv = self.present_value(swaption, env)
        return swaption_implied_volatility(swaption, env, pv)


__all__ = [
    "mean_reversion_impact",
    "LmmSwaptionPhysicalExplicitApproxPricer",
    "LmmSwaptionPhysicalMonteCarloPricer",
]
