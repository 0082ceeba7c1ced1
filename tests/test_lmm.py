"""
Tests for the displaced diffusion LMM parameters and their factories.
"""

from datetime import date

import numpy as np
import pytest

from ratesmodels.errors import ParameterValidationError
from ratesmodels.models import LmmParameters, lmm_1factor, lmm_2angle, lmm_hw, model_period_dates


@pytest.fixture
def two_factor_lmm():
    return LmmParameters(
        ibor_times=[0.0, 0.5, 1.0, 1.5],
        accrual_factors=[0.5, 0.5, 0.5],
        multiplicative_spreads=[1.0, 1.001, 1.002],
        displacements=[0.1, 0.1, 0.1],
        volatilities=[[0.1, 0.01], [0.11, 0.02], [0.12, 0.03]],
        mean_reversion=0.01
    )


class TestLmmParameters:
    """Construction invariants and indexed parameter view."""

    def test_dimensions(self, two_factor_lmm):
        assert two_factor_lmm.period_count == 3
        assert two_factor_lmm.factor_count == 2
        assert two_factor_lmm.parameter_count() == 6

    def test_parameter_view_by_period_then_factor(self, two_factor_lmm):
        assert two_factor_lmm.get_parameter(3) == 0.02
        assert two_factor_lmm.parameter_metadata(3) == "volatility-1-1"
        assert two_factor_lmm.parameter_metadata(4) == "volatility-2-0"

    def test_with_replaced(self, two_factor_lmm):
        updated = two_factor_lmm.with_replaced(3, 0.5)
        assert updated.volatilities[1, 1] == 0.5
        assert updated.volatilities[1, 0] == 0.11
        assert two_factor_lmm.volatilities[1, 1] == 0.02

    def test_replacing_is_idempotent(self, two_factor_lmm):
        restored = two_factor_lmm.with_parameters(two_factor_lmm.parameter_vector())
        np.testing.assert_array_equal(restored.volatilities, two_factor_lmm.volatilities)
        once = two_factor_lmm.with_replaced(2, 0.2)
        twice = once.with_replaced(2, 0.2)
        assert once.get_parameter(2) == 0.2
        np.testing.assert_array_equal(twice.parameter_vector(), once.parameter_vector())
        unchanged = [0, 1, 3, 4, 5]
        np.testing.assert_array_equal(once.parameter_vector()[unchanged], two_factor_lmm.parameter_vector()[unchanged])

    def test_invalid_parameters(self):
        with pytest.raises(ParameterValidationError):
            LmmParameters([0.0], [], [], [], np.zeros((0, 1)))
        with pytest.raises(ParameterValidationError):
            LmmParameters([0.0, 0.5, 0.4], [0.5, 0.5], [1.0, 1.0], [0.1, 0.1], [[0.1], [0.1]])
        with pytest.raises(ParameterValidationError):
            LmmParameters([0.0, 0.5, 1.0], [0.5], [1.0, 1.0], [0.1, 0.1], [[0.1], [0.1]])
        with pytest.raises(ParameterValidationError):
            LmmParameters([0.0, 0.5, 1.0], [0.5, 0.5], [1.0, 1.0], [0.1, 0.1], [[0.1]])
        with pytest.raises(ParameterValidationError):
            LmmParameters([0.0, 0.5, 1.0], [0.5, 0.0], [1.0, 1.0], [0.1, 0.1], [[0.1], [0.1]])

    def test_ibor_time_index(self, two_factor_lmm):
        """Times within the tolerance of a model time map to that time, including 0."""
        np.testing.assert_array_equal(
            two_factor_lmm.ibor_time_index(np.array([0.0, 0.49, 0.5, 0.51, 0.7, 1.5])),
            [0, 1, 1, 1, 2, 3]
        )
        assert two_factor_lmm.ibor_time_index(2.0) == 4

    def test_ibor_rate_from_dsc_forwards(self, two_factor_lmm):
        forward = 0.02
        assert two_factor_lmm.ibor_rate_from_dsc_forwards(forward, 0) == pytest.approx(forward)
        expected = (1.002 * (1.0 + 0.5 * forward) - 1.0) / 0.5
        assert two_factor_lmm.ibor_rate_from_dsc_forwards(forward, 2) == pytest.approx(expected)


class TestLmmFactories:
    """Parameter sets built on model dates."""

    def test_model_period_dates(self, euribor6m, valuation_date):
        dates = model_period_dates(valuation_date, date(2026, 1, 17), euribor6m)
        assert dates == [
            date(2024, 1, 17), date(2024, 7, 17), date(2025, 1, 17),
            date(2025, 7, 17), date(2026, 1, 19),
        ]

    def test_lmm_hw(self, lmm_hull_white, lmm_dates, env):
        model = lmm_hull_white
        times = env.times(lmm_dates)
        np.testing.assert_allclose(model.ibor_times, times)
        np.testing.assert_allclose(model.displacements, 1.0 / model.accrual_factors)
        expected = 0.01 / 0.02 * (np.exp(-0.02 * times[:-1]) - np.exp(-0.02 * times[1:]))
        np.testing.assert_allclose(model.volatilities[:, 0], expected)
        assert model.mean_reversion == 0.02
        assert model.period_count == len(lmm_dates) - 1

    def test_single_curve_spreads_close_to_one(self, lmm_hull_white):
        np.testing.assert_allclose(lmm_hull_white.multiplicative_spreads, 1.0, atol=1e-3)

    def test_multicurve_spreads(self, lmm_dates, euribor6m, multicurve_env):
        model = lmm_hw(0.02, 0.01, lmm_dates, euribor6m, multicurve_env)
        assert np.all(model.multiplicative_spreads > 1.0)

    def test_lmm_1factor(self, lmm_dates, euribor6m, env):
        model = lmm_1factor(0.01, 0.15, 0.05, lmm_dates, euribor6m, env)
        assert model.factor_count == 1
        np.testing.assert_allclose(model.volatilities, 0.15)
        np.testing.assert_allclose(model.displacements, 0.05)

    def test_lmm_2angle(self, lmm_dates, euribor6m, env):
        model = lmm_2angle(0.01, 0.1, np.pi / 2, 0.05, 0.05, lmm_dates, euribor6m, env)
        assert model.volatilities.shape == (len(lmm_dates) - 1, 2)
        np.testing.assert_allclose(model.volatilities[0], [0.1, 0.15])

    def test_lmm_2angle_slope(self, lmm_dates, euribor6m, env):
        model = lmm_2angle(0.01, 0.1, 0.0, 0.05, 0.05, lmm_dates, euribor6m, env, vol_angle_slope=0.02)
        np.testing.assert_allclose(model.volatilities[:, 0], 0.1)
        assert model.volatilities[0, 1] == pytest.approx(0.15)
        assert model.volatilities[-1, 1] == pytest.approx(0.17)
        assert np.all(np.diff(model.volatilities[:, 1]) > 0.0)
