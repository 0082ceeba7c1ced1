"""
Physical swaption in the Hull-White one-factor model.

The underlying is replaced by its cash-flow equivalent (c_i, t_i). With
alpha_i the volatility of P(., t_i) / P(., theta) up to the expiry theta,
the exercise boundary kappa solves

    sum c_i P(0, t_i) exp(-alpha_i kappa - alpha_i^2 / 2) = 0

and the swaption value is

    sum c_i P(0, t_i) N(omega (kappa + alpha_i))

with omega = -1 for a payer and +1 for a receiver.
"""

import numpy as np
from scipy.stats import norm

from ..decomposition.cash_flow_equivalent import cash_flow_equivalent_swap
from ..models.hullwhite import HullWhiteParameters
from ..models.hullwhite_formulas import alphas, exercise_boundary
from ..products.swaption import Swaption
from .swaption_common import ModelSwaptionPricer


N = norm.cdf


class HullWhiteSwaptionPhysicalPricer(ModelSwaptionPricer):
    """Explicit formula for physical swaptions in Hull-White."""

    def present_value(self, swaption: Swaption, env, model: HullWhiteParameters) -> float:
        self.validate(swaption, env)
        expiry = env.time(swaption.expiry_date)
        cfe = cash_flow_equivalent_swap(swaption.underlying, env)
        times = env.times(p.payment_date for p in cfe)
        dcf = np.array([p.amount for p in cfe]) * env.discount_factors(p.payment_date for p in cfe)
        alpha = alphas(model, 0.0, expiry, expiry, times)
        kappa = exercise_boundary(dcf, alpha)
        omega = -1.0 if swaption.is_payer else 1.0
        pv = float(np.sum(dcf * N(omega * (kappa + alpha))))
        return swaption.sign * pv


__all__ = ["HullWhiteSwaptionPhysicalPricer"]
