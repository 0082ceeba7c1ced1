"""
Tests for the rates environment: model time, curves and fixings.
"""

from datetime import date

import numpy as np
import pandas as pd
import pytest

from ratesmodels.curves import create_flat_curve
from ratesmodels.errors import MissingFixingError
from ratesmodels.market_state import RatesEnvironment
from ratesmodels.products import fixed_ibor_swap


class TestRatesEnvironment:
    """Time measure and curve access."""

    def test_anchor_must_match_valuation_date(self, curve):
        with pytest.raises(ValueError):
            RatesEnvironment(date(2024, 1, 18), curve)

    def test_time(self, env, valuation_date):
        assert env.time(valuation_date) == 0.0
        assert env.time(date(2025, 1, 16)) == pytest.approx(1.0)
        assert env.time(date(2024, 1, 10)) == pytest.approx(-7 / 365)
        np.testing.assert_allclose(env.times([date(2025, 1, 16), date(2026, 1, 16)]), [1.0, 2.0])

    def test_forward_curve_fallback(self, env, multicurve_env):
        assert env.forward_curve("EUR-EURIBOR-6M") is env.discount_curve
        assert multicurve_env.forward_curve("EUR-EURIBOR-6M") is not multicurve_env.discount_curve
        assert multicurve_env.forward_curve("USD-LIBOR-3M") is multicurve_env.discount_curve

    def test_ibor_forward_rate(self, env, euribor6m):
        start, end = date(2024, 1, 17), date(2024, 7, 17)
        accrual = 182 / 360
        expected = (np.exp(0.02 * 182 / 365) - 1.0) / accrual
        assert env.ibor_forward_rate(euribor6m, start, end) == pytest.approx(expected)

    def test_discount_factors(self, env):
        dfs = env.discount_factors([date(2025, 1, 16), date(2026, 1, 16)])
        np.testing.assert_allclose(dfs, np.exp(-0.02 * np.array([1.0, 2.0])))


class TestFixings:
    """Historical fixings and fixed Ibor periods."""

    INDEX = "EUR-EURIBOR-6M"

    def test_with_fixing(self, env):
        updated = env.with_fixing(self.INDEX, date(2024, 1, 15), 0.039)
        assert updated.fixing(self.INDEX, date(2024, 1, 15)) == pytest.approx(0.039)
        assert self.INDEX not in env.fixings

    def test_with_fixing_replaces_value(self, env):
        updated = env.with_fixing(self.INDEX, date(2024, 1, 15), 0.039)
        updated = updated.with_fixing(self.INDEX, date(2024, 1, 15), 0.041)
        assert len(updated.fixings[self.INDEX]) == 1
        assert updated.fixing(self.INDEX, date(2024, 1, 15)) == pytest.approx(0.041)

    def test_missing_fixing(self, env):
        with pytest.raises(MissingFixingError) as excinfo:
            env.fixing(self.INDEX, date(2024, 1, 15))
        assert excinfo.value.index_name == self.INDEX
        updated = env.with_fixing(self.INDEX, date(2024, 1, 12), 0.039)
        with pytest.raises(MissingFixingError):
            updated.fixing(self.INDEX, date(2024, 1, 15))

    def test_nan_fixing_is_missing(self, curve, valuation_date):
        series = pd.Series([np.nan], index=pd.DatetimeIndex([pd.Timestamp(2024, 1, 15)]))
        env = RatesEnvironment(valuation_date, curve, fixings={self.INDEX: series})
        with pytest.raises(MissingFixingError):
            env.fixing(self.INDEX, date(2024, 1, 15))

    def test_ibor_rate_uses_fixing_when_fixed(self, env, euribor6m):
        swap = fixed_ibor_swap(date(2023, 10, 17), "2Y", 0.03, 1_000_000, euribor6m)
        fixed_period, next_period = swap.ibor_leg().periods[:2]
        assert fixed_period.fixing_date == date(2023, 10, 13)
        with pytest.raises(MissingFixingError):
            env.ibor_rate(fixed_period)
        updated = env.with_fixing(self.INDEX, date(2023, 10, 13), 0.039)
        assert updated.ibor_rate(fixed_period) == pytest.approx(0.039)
        expected = updated.ibor_forward_rate(euribor6m, next_period.effective_date, next_period.maturity_date)
        assert updated.ibor_rate(next_period) == pytest.approx(expected)


class TestBumpedEnvironment:

    def test_with_discount_curve(self, env, valuation_date):
        bumped_curve = env.discount_curve.bump_parallel(10.0)
        forward = create_flat_curve(valuation_date, 0.03)
        bumped = env.with_discount_curve(bumped_curve, {"EUR-EURIBOR-6M": forward})
        assert bumped.discount_curve is bumped_curve
        assert bumped.forward_curve("EUR-EURIBOR-6M") is forward
        assert env.forward_curves == {}
