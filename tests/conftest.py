"""
Shared market fixtures.

The valuation date falls on the 17th of January so that swaps starting on
the 17th of January or July share their schedule dates with the LMM
periods built by model_period_dates.
"""

from datetime import date

import pytest

from ratesmodels.curves import create_flat_curve
from ratesmodels.market_state import RatesEnvironment
from ratesmodels.models import HullWhiteParameters, lmm_hw, model_period_dates
from ratesmodels.products import IborIndex, SwapIndex


VALUATION_DATE = date(2024, 1, 17)
FLAT_RATE = 0.02


@pytest.fixture
def valuation_date():
    return VALUATION_DATE


@pytest.fixture
def curve():
    """Flat 2% continuously compounded curve."""
    return create_flat_curve(VALUATION_DATE, FLAT_RATE)


@pytest.fixture
def env(curve):
    return RatesEnvironment(VALUATION_DATE, curve)


@pytest.fixture
def multicurve_env(curve):
    """Discount at 2%, Euribor 6M projected at 2.5%."""
    forward = create_flat_curve(VALUATION_DATE, 0.025)
    return RatesEnvironment(VALUATION_DATE, curve, forward_curves={"EUR-EURIBOR-6M": forward})


@pytest.fixture
def euribor6m():
    return IborIndex.euribor_6m()


@pytest.fixture
def swap_index_10y(euribor6m):
    return SwapIndex("EUR-EURIBORSWAP-10Y", "10Y", euribor6m)


@pytest.fixture
def swap_index_2y(euribor6m):
    return SwapIndex("EUR-EURIBORSWAP-2Y", "2Y", euribor6m)


@pytest.fixture
def hull_white():
    return HullWhiteParameters.constant(0.02, 0.01)


@pytest.fixture
def lmm_dates(euribor6m):
    """Semi-annual model dates from the valuation date to July 2035."""
    return model_period_dates(VALUATION_DATE, date(2035, 7, 17), euribor6m)


@pytest.fixture
def lmm_hull_white(lmm_dates, euribor6m, env):
    """One-factor LMM with the dynamics of the hull_white fixture."""
    return lmm_hw(0.02, 0.01, lmm_dates, euribor6m, env)
