"""
Tests for the CMS period pricers: Hull-White explicit and numerical
integration, LMM Monte Carlo for CMS and CMS spread periods.
"""

from dataclasses import replace
from datetime import date

import numpy as np
import pytest

from ratesmodels.config import MonteCarloSettings
from ratesmodels.errors import MissingFixingError
from ratesmodels.models import HullWhiteParameters
from ratesmodels.pricers import (
    DiscountingSwapPricer,
    HullWhiteCmsPeriodExplicitPricer,
    HullWhiteCmsPeriodNumericalIntegrationPricer,
    LmmCmsPeriodMonteCarloPricer,
    LmmCmsSpreadPeriodMonteCarloPricer,
)
from ratesmodels.products import CmsPeriodType, Swap, SwapIndex, cms_period, cms_spread_period


START = date(2025, 1, 17)
END = date(2025, 7, 17)
NOTIONAL = 1_000_000
STRIKE = 0.02


def _factor(cms, env):
    return cms.notional * cms.year_fraction * env.discount_factor(cms.payment_date)


@pytest.fixture
def coupon(swap_index_10y):
    return cms_period(swap_index_10y, START, END, NOTIONAL)


@pytest.fixture
def caplet(swap_index_10y):
    return cms_period(swap_index_10y, START, END, NOTIONAL, CmsPeriodType.CAPLET, STRIKE)


@pytest.fixture
def floorlet(swap_index_10y):
    return cms_period(swap_index_10y, START, END, NOTIONAL, CmsPeriodType.FLOORLET, STRIKE)


@pytest.fixture
def past_period(swap_index_10y):
    """Period fixed on 13 October 2023 and paid on 17 April 2024."""
    return cms_period(swap_index_10y, date(2023, 10, 17), date(2024, 4, 17), NOTIONAL)


class TestHullWhiteCmsPricers:
    """Explicit expansion against numerical integration."""

    def test_coupon_explicit_vs_integration(self, coupon, env, hull_white):
        explicit = HullWhiteCmsPeriodExplicitPricer().present_value(coupon, env, hull_white)
        integrated = HullWhiteCmsPeriodNumericalIntegrationPricer().present_value(coupon, env, hull_white)
        assert explicit == pytest.approx(integrated, rel=1e-3)

    def test_options_explicit_vs_integration(self, caplet, floorlet, env, hull_white):
        explicit = HullWhiteCmsPeriodExplicitPricer()
        integration = HullWhiteCmsPeriodNumericalIntegrationPricer()
        for option in (caplet, floorlet):
            pv = explicit.present_value(option, env, hull_white)
            assert pv > 0.0
            assert pv == pytest.approx(integration.present_value(option, env, hull_white), rel=1e-2)

    def test_cap_floor_parity(self, coupon, caplet, floorlet, env, hull_white):
        pricer = HullWhiteCmsPeriodExplicitPricer()
        difference = pricer.present_value(caplet, env, hull_white) - pricer.present_value(floorlet, env, hull_white)
        expected = pricer.present_value(coupon, env, hull_white) - STRIKE * _factor(coupon, env)
        assert difference == pytest.approx(expected, rel=1e-10)

    def test_coupon_without_volatility_pays_par_rate(self, coupon, env):
        model = HullWhiteParameters.constant(0.02, 1e-8)
        pv = HullWhiteCmsPeriodExplicitPricer().present_value(coupon, env, model)
        par = DiscountingSwapPricer(env).par_rate(coupon.underlying_swap)
        assert pv / _factor(coupon, env) == pytest.approx(par, rel=1e-6)

    def test_convexity_adjustment_positive(self, coupon, env, hull_white):
        pv = HullWhiteCmsPeriodExplicitPricer().present_value(coupon, env, hull_white)
        par = DiscountingSwapPricer(env).par_rate(coupon.underlying_swap)
        assert pv / _factor(coupon, env) > par

    @pytest.mark.parametrize("strike", [0.0, 0.01, 0.02, 0.03])
    def test_caplet_strike_range(self, swap_index_10y, env, hull_white, strike):
        caplet = cms_period(swap_index_10y, START, END, NOTIONAL, CmsPeriodType.CAPLET, strike)
        explicit = HullWhiteCmsPeriodExplicitPricer().present_value(caplet, env, hull_white)
        integrated = HullWhiteCmsPeriodNumericalIntegrationPricer().present_value(caplet, env, hull_white)
        assert explicit == pytest.approx(integrated, rel=5e-3)

    @pytest.mark.parametrize("strike", [0.01, 0.02, 0.03])
    def test_floorlet_strike_range(self, swap_index_10y, env, hull_white, strike):
        floorlet = cms_period(swap_index_10y, START, END, NOTIONAL, CmsPeriodType.FLOORLET, strike)
        explicit = HullWhiteCmsPeriodExplicitPricer().present_value(floorlet, env, hull_white)
        integrated = HullWhiteCmsPeriodNumericalIntegrationPricer().present_value(floorlet, env, hull_white)
        assert explicit == pytest.approx(integrated, rel=5e-3)

    @pytest.mark.parametrize("moneyness", [-0.005, 0.0, 0.005])
    def test_zero_volatility_pays_intrinsic(self, swap_index_10y, coupon, env, moneyness):
        model = HullWhiteParameters.constant(0.02, 0.0)
        par = DiscountingSwapPricer(env).par_rate(coupon.underlying_swap)
        strike = par + moneyness
        for period_type, intrinsic in ((CmsPeriodType.CAPLET, max(par - strike, 0.0)),
                                       (CmsPeriodType.FLOORLET, max(strike - par, 0.0))):
            option = cms_period(swap_index_10y, START, END, NOTIONAL, period_type, strike)
            expected = intrinsic * _factor(option, env)
            for pricer in (HullWhiteCmsPeriodExplicitPricer(), HullWhiteCmsPeriodNumericalIntegrationPricer()):
                pv = pricer.present_value(option, env, model)
                assert np.isfinite(pv)
                assert pv == pytest.approx(expected, rel=1e-9, abs=1e-6)

    def test_paid_period(self, swap_index_10y, env, hull_white):
        paid = cms_period(swap_index_10y, date(2023, 1, 17), date(2023, 7, 17), NOTIONAL)
        assert HullWhiteCmsPeriodExplicitPricer().present_value(paid, env, hull_white) == 0.0
        assert HullWhiteCmsPeriodNumericalIntegrationPricer().present_value(paid, env, hull_white) == 0.0

    def test_fixed_period(self, past_period, env, hull_white):
        env = env.with_fixing("EUR-EURIBORSWAP-10Y", past_period.fixing_date, 0.03)
        expected = 0.03 * _factor(past_period, env)
        assert HullWhiteCmsPeriodExplicitPricer().present_value(past_period, env, hull_white) == \
            pytest.approx(expected)

    def test_missing_fixing(self, past_period, env, hull_white):
        with pytest.raises(MissingFixingError):
            HullWhiteCmsPeriodExplicitPricer().present_value(past_period, env, hull_white)

    def test_underlying_without_ibor_leg(self, coupon, env, hull_white):
        fixed_only = Swap(legs=(coupon.underlying_swap.fixed_leg(),))
        with pytest.raises(ValueError):
            HullWhiteCmsPeriodExplicitPricer().present_value(
                replace(coupon, underlying_swap=fixed_only), env, hull_white)


class TestLmmCmsMonteCarlo:
    """Monte Carlo CMS prices on the Hull-White equivalent LMM."""

    def test_coupon_close_to_hull_white(self, coupon, env, hull_white, lmm_hull_white):
        settings = MonteCarloSettings(n_paths=10_000, block_size=2_500, seed=2024)
        pv_mc = LmmCmsPeriodMonteCarloPricer(lmm_hull_white, settings).present_value(coupon, env)
        pv_hw = HullWhiteCmsPeriodExplicitPricer().present_value(coupon, env, hull_white)
        assert pv_mc == pytest.approx(pv_hw, rel=2e-2)

    def test_caplet_close_to_hull_white(self, caplet, env, hull_white, lmm_hull_white):
        settings = MonteCarloSettings(n_paths=20_000, block_size=5_000, seed=2024)
        pv_mc = LmmCmsPeriodMonteCarloPricer(lmm_hull_white, settings).present_value(caplet, env)
        pv_hw = HullWhiteCmsPeriodNumericalIntegrationPricer().present_value(caplet, env, hull_white)
        assert pv_mc == pytest.approx(pv_hw, rel=5e-2)

    def test_repeated_valuations_agree(self, coupon, env, lmm_hull_white):
        pricer = LmmCmsPeriodMonteCarloPricer(lmm_hull_white, MonteCarloSettings(n_paths=2_000, block_size=500, seed=7))
        assert pricer.present_value(coupon, env) == pricer.present_value(coupon, env)

    def test_error_shrinks_with_path_count(self, coupon, env, hull_white, lmm_hull_white):
        pv_hw = HullWhiteCmsPeriodExplicitPricer().present_value(coupon, env, hull_white)

        def rms_error(n_paths):
            errors = [
                LmmCmsPeriodMonteCarloPricer(
                    lmm_hull_white, MonteCarloSettings(n_paths=n_paths, block_size=n_paths, seed=seed)
                ).present_value(coupon, env) - pv_hw
                for seed in range(8)
            ]
            return np.sqrt(np.mean(np.square(errors)))

        coarse = rms_error(500)
        fine = rms_error(32_000)
        assert fine < coarse
        assert fine < 2e-2 * pv_hw

    def test_five_year_expiry_one_year_tenor(self, euribor6m, env, hull_white, lmm_hull_white):
        index_1y = SwapIndex("EUR-EURIBORSWAP-1Y", "1Y", euribor6m)
        coupon = cms_period(index_1y, date(2029, 1, 17), date(2029, 7, 17), NOTIONAL)
        settings = MonteCarloSettings(n_paths=200_000, block_size=50_000, seed=55)
        pv_mc = LmmCmsPeriodMonteCarloPricer(lmm_hull_white, settings).present_value(coupon, env)
        pv_hw = HullWhiteCmsPeriodExplicitPricer().present_value(coupon, env, hull_white)
        assert pv_mc == pytest.approx(pv_hw, rel=1.5e-2)

    def test_fixed_period(self, past_period, env, lmm_hull_white):
        env = env.with_fixing("EUR-EURIBORSWAP-10Y", past_period.fixing_date, 0.03)
        pv = LmmCmsPeriodMonteCarloPricer(lmm_hull_white).present_value(past_period, env)
        assert pv == pytest.approx(0.03 * _factor(past_period, env))


class TestLmmCmsSpreadMonteCarlo:
    """CMS spread periods."""

    @pytest.fixture
    def settings(self):
        return MonteCarloSettings(n_paths=2_000, block_size=1_000, seed=9)

    def test_identical_indices(self, swap_index_10y, env, lmm_hull_white, settings):
        spread = cms_spread_period(swap_index_10y, swap_index_10y, START, END, NOTIONAL)
        pv = LmmCmsSpreadPeriodMonteCarloPricer(lmm_hull_white, settings).present_value(spread, env)
        assert pv == pytest.approx(0.0, abs=1e-9)

    def test_zero_second_weight_is_cms(self, coupon, swap_index_10y, swap_index_2y, env, lmm_hull_white,
                                       settings):
        """Same seed, same decision date: the spread reduces to the CMS coupon path by path."""
        spread = cms_spread_period(swap_index_10y, swap_index_2y, START, END, NOTIONAL, weight2=0.0)
        pv_spread = LmmCmsSpreadPeriodMonteCarloPricer(lmm_hull_white, settings).present_value(spread, env)
        pv_cms = LmmCmsPeriodMonteCarloPricer(lmm_hull_white, settings).present_value(coupon, env)
        assert pv_spread == pytest.approx(pv_cms, rel=1e-12)

    def test_spread_sign(self, swap_index_10y, swap_index_2y, env, lmm_hull_white, settings):
        """Flat curve: the annual 10Y and 2Y rates are close, the capped spread is positive."""
        capped = cms_spread_period(swap_index_10y, swap_index_2y, START, END, NOTIONAL, caplet=0.0)
        pv = LmmCmsSpreadPeriodMonteCarloPricer(lmm_hull_white, settings).present_value(capped, env)
        assert pv > 0.0

    def test_fixed_period(self, swap_index_10y, swap_index_2y, env, lmm_hull_white):
        spread = cms_spread_period(swap_index_10y, swap_index_2y, date(2023, 10, 17), date(2024, 4, 17), NOTIONAL)
        env = env.with_fixing("EUR-EURIBORSWAP-10Y", spread.fixing_date, 0.03)
        env = env.with_fixing("EUR-EURIBORSWAP-2Y", spread.fixing_date, 0.025)
        pv = LmmCmsSpreadPeriodMonteCarloPricer(lmm_hull_white).present_value(spread, env)
        expected = NOTIONAL * spread.year_fraction * 0.005 * env.discount_factor(spread.payment_date)
        assert pv == pytest.approx(expected)

    def test_paid_period(self, swap_index_10y, swap_index_2y, env, lmm_hull_white):
        spread = cms_spread_period(swap_index_10y, swap_index_2y, date(2023, 1, 17), date(2023, 7, 17), NOTIONAL)
        assert LmmCmsSpreadPeriodMonteCarloPricer(lmm_hull_white).present_value(spread, env) == 0.0

    def test_missing_fixing(self, swap_index_10y, swap_index_2y, env, lmm_hull_white):
        spread = cms_spread_period(swap_index_10y, swap_index_2y, date(2023, 10, 17), date(2024, 4, 17), NOTIONAL)
        env = env.with_fixing("EUR-EURIBORSWAP-10Y", spread.fixing_date, 0.03)
        with pytest.raises(MissingFixingError):
            LmmCmsSpreadPeriodMonteCarloPricer(lmm_hull_white).present_value(spread, env)
