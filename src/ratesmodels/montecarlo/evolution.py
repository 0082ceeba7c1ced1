"""
Monte Carlo evolution of the displaced diffusion LMM.

Forward rates are evolved from today to a decision time in a single jump
(or a few jumps of at most max_jump years). Over a jump [t0, t1] the
loadings gamma_i exp(a t) are deterministic, so the factor integrals are
drawn exactly with variance

    v = (exp(2 a t1) - exp(2 a t0)) / (2 a)

The state dependent drift of the terminal measure is approximated by a
predictor-corrector average of its values at the start and at the end of
the jump. Rates whose period has started before t1 are not evolved.
"""

import logging
import math
from typing import Optional

import numpy as np

from ..models.lmm import LmmParameters
from .random import NormalGenerator


logger = logging.getLogger(__name__)


def integrated_variance(mean_reversion: float, t0: float, t1: float) -> float:
    """Integral of exp(2 a s) on [t0, t1]; t1 - t0 for a vanishing mean reversion."""
    if abs(mean_reversion) < 1.0e-6:
        return t1 - t0
    a2 = 2.0 * mean_reversion
    return (math.exp(a2 * t1) - math.exp(a2 * t0)) / a2


class LmmMonteCarloEvolution:
    """
    Evolution engine of the LMM forward rates.

    The engine holds no state besides its jump size; the randomness comes
    from the generator passed to each call.
    """

    def __init__(self, max_jump: Optional[float] = None):
        """
        Args:
            max_jump: Maximal length of a jump in years; None for a single jump
        """
        if max_jump is not None and max_jump <= 0:
            raise ValueError(f"max_jump must be positive, got {max_jump}")
        self.max_jump = max_jump

    def jump_times(self, decision_time: float) -> np.ndarray:
        """Times [0, ..., decision_time] of the jumps."""
        if self.max_jump is None or decision_time <= self.max_jump:
            return np.array([0.0, decision_time])
        n_jumps = int(math.ceil(decision_time / self.max_jump))
        return np.linspace(0.0, decision_time, n_jumps + 1)

    def evolve(
        self,
        model: LmmParameters,
        initial_forwards: np.ndarray,
        decision_time: float,
        n_paths: int,
        generator: NormalGenerator
    ) -> np.ndarray:
        """
        Draw the forward rates at the decision time.

        Args:
            model: LMM parameters
            initial_forwards: Discount forwards today, one per model period
            decision_time: Time of the decision date
            n_paths: Number of paths
            generator: Source of standard normal numbers

        Returns:
            Array of shape (n_paths, number of periods)

        Raises:
            ValueError: If 1 + delta * f becomes non-positive on a path
        """
        initial_forwards = np.asarray(initial_forwards, dtype=np.float64)
        if initial_forwards.shape != (model.period_count,):
            raise ValueError(
                f"Expected {model.period_count} initial forwards, got shape {initial_forwards.shape}"
            )
        forwards = np.tile(initial_forwards, (n_paths, 1))
        if decision_time <= 0.0:
            return forwards
        times = self.jump_times(decision_time)
        for t0, t1 in zip(times[:-1], times[1:]):
            forwards = self._jump(model, forwards, t0, t1, generator)
        return forwards

    def _jump(
        self,
        model: LmmParameters,
        forwards: np.ndarray,
        t0: float,
        t1: float,
        generator: NormalGenerator
    ) -> np.ndarray:
        n_paths = forwards.shape[0]
        normals = generator.normals(model.factor_count, n_paths)
        start = int(model.ibor_time_index(t1))
        if start >= model.period_count:
            return forwards

        gamma = model.volatilities[start:]
        s = gamma @ gamma.T
        variance = integrated_variance(model.mean_reversion, t0, t1)
        displacement = model.displacements[start:, None]
        inverse_delta = 1.0 / model.accrual_factors[start:, None]
        n_rates = gamma.shape[0]

        f = forwards[:, start:].T.copy()
        cc = (gamma @ normals) * math.sqrt(variance) - 0.5 * np.diag(s)[:, None] * variance
        coef_predict = (f + displacement) / (f + inverse_delta)
        coef_correct = np.zeros_like(f)
        # Backward: rate j only depends on the rates after it
        for j in range(n_rates - 1, -1, -1):
            drift = 0.0
            if j < n_rates - 1:
                k = j + 1
                coef_correct[k] = (f[k] + displacement[k]) / (f[k] + inverse_delta[k])
                weights = s[k:, j]
                mu_predict = weights @ coef_predict[k:]
                mu_correct = weights @ coef_correct[k:]
                drift = -0.5 * (mu_predict + mu_correct) * variance
            f[j] = (f[j] + displacement[j]) * np.exp(drift + cc[j]) - displacement[j]

        if np.any(1.0 + f / inverse_delta <= 0.0):
            raise ValueError("Evolved forward rate with 1 + delta * f <= 0; displaced log-normal update undefined")
        logger.debug("Evolved %d rates over [%.4f, %.4f] on %d paths", n_rates, t0, t1, n_paths)
        result = forwards.copy()
        result[:, start:] = f.T
        return result


__all__ = ["integrated_variance", "LmmMonteCarloEvolution"]
