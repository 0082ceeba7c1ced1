"""
European Monte Carlo pricing in the displaced diffusion LMM.

Provides:
- MulticurveLayout: multi-curve equivalent mapped onto the model periods
- LmmMonteCarloEuropeanPricer: base pricer evolving the forward rates to
  the decision date block by block and averaging a product aggregation

Values are expressed in the numeraire P(t, t_N) of the last model date:
the rebased discount factor of model date i on a path is

    P(t, t_i) / P(t, t_N) = prod_{k >= i} (1 + delta_k f_k)

and the present value is the average rebased payoff times P(0, t_N).
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from ..config import MonteCarloSettings
from ..decomposition.multicurve_equivalent import MulticurveEquivalent, decision_schedule
from ..models.lmm import LmmParameters
from .evolution import LmmMonteCarloEvolution
from .random import NormalGenerator, NumpyNormalGenerator


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MulticurveLayout:
    """
    Amounts of a multi-curve equivalent with their model period indices.

    Attributes:
        df_amounts: Discount factor payment amounts
        df_indices: Model date index of each discount factor payment
        ibor_amounts: Ibor payment amounts
        ibor_payment_indices: Model date index of each Ibor payment
        ibor_effective_indices: Model period of each Ibor computation
        splits: Per-swap counts of discount factor payments and Ibor computations
    """
    df_amounts: np.ndarray
    df_indices: np.ndarray
    ibor_amounts: np.ndarray
    ibor_payment_indices: np.ndarray
    ibor_effective_indices: np.ndarray
    splits: Tuple[Tuple[int, int], ...]

    def swap_slices(self):
        """Slices of discount factor payments and Ibor computations of each swap."""
        df_start = ibor_start = 0
        for n_df, n_ibor in self.splits:
            yield slice(df_start, df_start + n_df), slice(ibor_start, ibor_start + n_ibor)
            df_start += n_df
            ibor_start += n_ibor


class LmmMonteCarloEuropeanPricer:
    """
    Base Monte Carlo pricer of products with a single decision date.

    Subclasses implement aggregation(product, layout, forwards, discounting),
    returning the rebased value of each path.
    """

    def __init__(
        self,
        model: LmmParameters,
        settings: Optional[MonteCarloSettings] = None,
        generator: Optional[NormalGenerator] = None,
        evolution: Optional[LmmMonteCarloEvolution] = None
    ):
        """
        Args:
            model: LMM parameters
            settings: Path count, block size and jump size
            generator: Normal generator shared by all valuations; by default each
                valuation draws from a fresh numpy generator seeded from the settings
            evolution: Evolution engine; built from the settings by default
        """
        self.model = model
        self.settings = settings or MonteCarloSettings()
        self.generator = generator
        self.evolution = evolution or LmmMonteCarloEvolution(self.settings.max_jump)

    def multicurve_equivalent(self, product) -> MulticurveEquivalent:
        return decision_schedule(product)

    def numeraire_initial_value(self, env) -> float:
        """Discount factor of the last model date."""
        return env.discount_curve.discount_factor(float(self.model.ibor_times[-1]))

    def initial_forwards(self, env) -> np.ndarray:
        """Discount curve forwards on the model periods."""
        dfs = np.array([env.discount_curve.discount_factor(float(t)) for t in self.model.ibor_times])
        return (dfs[:-1] / dfs[1:] - 1.0) / self.model.accrual_factors

    def discounting(self, forwards: np.ndarray) -> np.ndarray:
        """Rebased discount factors, shape (n_paths, number of periods + 1)."""
        n_paths, n_periods = forwards.shape
        growth = 1.0 + forwards * self.model.accrual_factors
        result = np.ones((n_paths, n_periods + 1))
        result[:, :-1] = np.cumprod(growth[:, ::-1], axis=1)[:, ::-1]
        return result

    def layout(self, mce: MulticurveEquivalent, env) -> MulticurveLayout:
        """Map the payments and Ibor computations of an equivalent to model indices."""
        df_times = env.times(p.payment_date for p in mce.discount_factor_payments)
        pay_times = env.times(p.payment_date for p in mce.ibor_payments)
        eff_times = env.times(c.effective_date for c in mce.ibor_computations)
        layout = MulticurveLayout(
            df_amounts=np.array([p.amount for p in mce.discount_factor_payments]),
            df_indices=self.model.ibor_time_index(df_times),
            ibor_amounts=np.array([p.amount for p in mce.ibor_payments]),
            ibor_payment_indices=self.model.ibor_time_index(pay_times),
            ibor_effective_indices=self.model.ibor_time_index(eff_times),
            splits=mce.splits()
        )
        n_periods = self.model.period_count
        if (np.any(layout.df_indices > n_periods) or np.any(layout.ibor_payment_indices > n_periods)
                or np.any(layout.ibor_effective_indices >= n_periods)):
            raise ValueError("Product dates extend beyond the last model date")
        return layout

    def swap_rates(
        self,
        layout: MulticurveLayout,
        forwards: np.ndarray,
        discounting: np.ndarray,
        df_slice: slice,
        ibor_slice: slice
    ) -> np.ndarray:
        """
        Par rate of a unit swap on each path.

        The swap pays a fixed rate of 1, so its discount factor payments are
        minus the annuity and the rate is - Ibor leg / fixed leg.
        """
        pvbp = discounting[:, layout.df_indices[df_slice]] @ layout.df_amounts[df_slice]
        effective = layout.ibor_effective_indices[ibor_slice]
        ibor_rates = self.model.ibor_rate_from_dsc_forwards(forwards[:, effective], effective)
        pv_ibor = (ibor_rates * discounting[:, layout.ibor_payment_indices[ibor_slice]]) \
            @ layout.ibor_amounts[ibor_slice]
        return -pv_ibor / pvbp

    def aggregation(self, product, layout: MulticurveLayout, forwards: np.ndarray,
                    discounting: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def present_value_monte_carlo(self, product, env) -> float:
        """
        Monte Carlo present value, before any product-specific shortcut.

        Paths are simulated in full blocks followed by a residual block, all
        drawing sequentially from the same generator. Without an injected
        generator the stream restarts from the seed, so repeated valuations
        agree.
        """
        generator = self.generator or NumpyNormalGenerator(self.settings.seed)
        mce = self.multicurve_equivalent(product)
        layout = self.layout(mce, env)
        initial = self.initial_forwards(env)
        decision_time = env.time(mce.decision_date)
        full_blocks, block_size, residual = self.settings.decomposition()
        total = 0.0
        for size in [block_size] * full_blocks + ([residual] if residual > 0 else []):
            forwards = self.evolution.evolve(self.model, initial, decision_time, size, generator)
            total += float(np.sum(self.aggregation(product, layout, forwards, self.discounting(forwards))))
        pv = total / self.settings.n_paths * self.numeraire_initial_value(env)
        logger.debug("Monte Carlo value %.6f on %d paths", pv, self.settings.n_paths)
        return pv


__all__ = ["MulticurveLayout", "LmmMonteCarloEuropeanPricer"]
