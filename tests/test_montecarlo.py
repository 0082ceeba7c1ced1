"""
Tests for the LMM Monte Carlo engine: settings, normal generators,
evolution and the European pricer building blocks.
"""

from datetime import date

import numpy as np
import pytest

from ratesmodels.config import MonteCarloSettings
from ratesmodels.models import LmmParameters, lmm_1factor, model_period_dates
from ratesmodels.montecarlo import (
    LmmMonteCarloEvolution,
    NormalGenerator,
    NumpyNormalGenerator,
    integrated_variance,
)
from ratesmodels.pricers import LmmSwaptionPhysicalMonteCarloPricer
from ratesmodels.products import swaption


@pytest.fixture
def short_lmm(euribor6m, env, valuation_date):
    """Four semi-annual periods up to January 2026."""
    dates = model_period_dates(valuation_date, date(2026, 1, 17), euribor6m)
    return lmm_1factor(0.0, 0.1, 0.05, dates, euribor6m, env)


class TestMonteCarloSettings:

    def test_decomposition(self):
        assert MonteCarloSettings(n_paths=10_000, block_size=1_000).decomposition() == (10, 1_000, 0)
        assert MonteCarloSettings(n_paths=2_500, block_size=1_000).decomposition() == (2, 1_000, 500)

    def test_invalid_settings(self):
        with pytest.raises(ValueError):
            MonteCarloSettings(n_paths=0)
        with pytest.raises(ValueError):
            MonteCarloSettings(block_size=0)
        with pytest.raises(ValueError):
            MonteCarloSettings(max_jump=-1.0)


class TestNumpyNormalGenerator:
    """Seeded, sequentially consumed normal numbers."""

    def test_protocol(self):
        assert isinstance(NumpyNormalGenerator(1), NormalGenerator)

    def test_shape(self):
        assert NumpyNormalGenerator(1).normals(2, 5).shape == (2, 5)

    def test_reproducible(self):
        first = NumpyNormalGenerator(42)
        second = NumpyNormalGenerator(42)
        np.testing.assert_array_equal(first.normals(1, 10), second.normals(1, 10))

    def test_sequential_consumption(self):
        generator = NumpyNormalGenerator(42)
        assert not np.array_equal(generator.normals(1, 10), generator.normals(1, 10))


class TestEvolution:
    """Single jump evolution of the forward rates."""

    def test_integrated_variance(self):
        assert integrated_variance(0.0, 0.5, 2.0) == pytest.approx(1.5)
        assert integrated_variance(0.1, 0.0, 1.0) == pytest.approx((np.exp(0.2) - 1.0) / 0.2)

    def test_jump_times(self):
        np.testing.assert_allclose(LmmMonteCarloEvolution().jump_times(2.0), [0.0, 2.0])
        np.testing.assert_allclose(LmmMonteCarloEvolution(0.4).jump_times(1.0), [0.0, 1 / 3, 2 / 3, 1.0])
        np.testing.assert_allclose(LmmMonteCarloEvolution(5.0).jump_times(1.0), [0.0, 1.0])
        with pytest.raises(ValueError):
            LmmMonteCarloEvolution(0.0)

    def test_decision_today(self, short_lmm):
        initial = np.full(short_lmm.period_count, 0.02)
        forwards = LmmMonteCarloEvolution().evolve(short_lmm, initial, 0.0, 3, NumpyNormalGenerator(1))
        np.testing.assert_allclose(forwards, np.tile(initial, (3, 1)))

    def test_wrong_initial_size(self, short_lmm):
        with pytest.raises(ValueError):
            LmmMonteCarloEvolution().evolve(short_lmm, np.zeros(2), 1.0, 3, NumpyNormalGenerator(1))

    def test_zero_volatility(self, short_lmm):
        model = short_lmm.with_volatilities(np.zeros((short_lmm.period_count, 1)))
        initial = np.array([0.02, 0.021, 0.022, 0.023])
        forwards = LmmMonteCarloEvolution().evolve(model, initial, 1.0, 10, NumpyNormalGenerator(1))
        np.testing.assert_allclose(forwards, np.tile(initial, (10, 1)), rtol=1e-12)

    def test_started_periods_are_frozen(self, short_lmm):
        initial = np.array([0.02, 0.021, 0.022, 0.023])
        forwards = LmmMonteCarloEvolution().evolve(short_lmm, initial, 1.0, 100, NumpyNormalGenerator(1))
        np.testing.assert_array_equal(forwards[:, :2], np.tile(initial[:2], (100, 1)))
        assert np.std(forwards[:, 3]) > 0.0

    def test_last_rate_is_martingale(self, short_lmm):
        """The last forward has no drift under the terminal measure."""
        initial = np.array([0.02, 0.021, 0.022, 0.023])
        forwards = LmmMonteCarloEvolution().evolve(short_lmm, initial, 1.0, 20_000, NumpyNormalGenerator(7))
        assert np.mean(forwards[:, 3]) == pytest.approx(0.023, abs=3e-4)

    def test_several_jumps(self, short_lmm):
        initial = np.array([0.02, 0.021, 0.022, 0.023])
        forwards = LmmMonteCarloEvolution(0.25).evolve(short_lmm, initial, 1.0, 20_000, NumpyNormalGenerator(7))
        assert np.mean(forwards[:, 3]) == pytest.approx(0.023, abs=3e-4)

    def test_undefined_update_raises(self):
        """A displacement above 1 / delta lets 1 + delta f cross zero."""
        model = LmmParameters(
            ibor_times=[0.0, 1.5, 2.0],
            accrual_factors=[1.5, 0.5],
            multiplicative_spreads=[1.0, 1.0],
            displacements=[10.0, 10.0],
            volatilities=[[2.0], [2.0]]
        )
        with pytest.raises(ValueError):
            LmmMonteCarloEvolution().evolve(model, np.array([0.02, 0.02]), 1.0, 1_000, NumpyNormalGenerator(3))


class TestEuropeanPricer:
    """Building blocks of the Monte Carlo European pricer."""

    @pytest.fixture
    def pricer(self, short_lmm):
        return LmmSwaptionPhysicalMonteCarloPricer(short_lmm, MonteCarloSettings.quick(seed=1))

    def test_initial_forwards(self, pricer, short_lmm, env):
        dfs = np.exp(-0.02 * short_lmm.ibor_times)
        expected = (dfs[:-1] / dfs[1:] - 1.0) / short_lmm.accrual_factors
        np.testing.assert_allclose(pricer.initial_forwards(env), expected, rtol=1e-12)
        assert pricer.numeraire_initial_value(env) == pytest.approx(dfs[-1])

    def test_discounting(self, pricer, short_lmm):
        forwards = np.array([[0.02, 0.03, 0.04, 0.05]])
        growth = 1.0 + forwards[0] * short_lmm.accrual_factors
        expected = [np.prod(growth), np.prod(growth[1:]), np.prod(growth[2:]), growth[3], 1.0]
        np.testing.assert_allclose(pricer.discounting(forwards)[0], expected)

    def test_product_beyond_model(self, pricer, env, euribor6m):
        option = swaption(date(2025, 1, 15), "5Y", 0.02, 1.0, euribor6m)
        with pytest.raises(ValueError):
            pricer.present_value(option, env)

    def test_default_generator_from_seed(self, short_lmm, env, euribor6m):
        option = swaption(date(2024, 7, 15), "1Y", 0.02, 1.0, euribor6m)
        first = LmmSwaptionPhysicalMonteCarloPricer(short_lmm, MonteCarloSettings.quick(seed=11))
        second = LmmSwaptionPhysicalMonteCarloPricer(short_lmm, MonteCarloSettings.quick(seed=11))
        assert first.present_value(option, env) == second.present_value(option, env)

    def test_repeated_valuations_agree(self, short_lmm, env, euribor6m):
        option = swaption(date(2024, 7, 15), "1Y", 0.02, 1.0, euribor6m)
        pricer = LmmSwaptionPhysicalMonteCarloPricer(short_lmm, MonteCarloSettings.quick(seed=7))
        assert pricer.present_value(option, env) == pricer.present_value(option, env)

    def test_injected_generator_continues_stream(self, short_lmm, env, euribor6m):
        option = swaption(date(2024, 7, 15), "1Y", 0.02, 1.0, euribor6m)
        pricer = LmmSwaptionPhysicalMonteCarloPricer(
            short_lmm, MonteCarloSettings.quick(seed=7), generator=NumpyNormalGenerator(7))
        assert pricer.present_value(option, env) != pricer.present_value(option, env)

    def test_residual_block(self, short_lmm, env, euribor6m):
        option = swaption(date(2024, 7, 15), "1Y", 0.02, 1.0, euribor6m)
        settings = MonteCarloSettings(n_paths=2_500, block_size=1_000, seed=5)
        pv = LmmSwaptionPhysicalMonteCarloPricer(short_lmm, settings).present_value(option, env)
        assert np.isfinite(pv)
        assert pv > 0.0
