"""
Tests for the rational multi-curve models and their swaption pricers.
"""

from datetime import date

import numpy as np
import pytest

from ratesmodels.errors import ParameterValidationError
from ratesmodels.models import RationalOneFactorParameters, RationalTwoFactorParameters, swap_coefficients
from ratesmodels.pricers import (
    DiscountingSwapPricer,
    RationalOneFactorSwaptionPhysicalPricer,
    RationalTwoFactorSwaptionPhysicalPricer,
)
from ratesmodels.products import swaption


EXPIRY = date(2025, 1, 15)


@pytest.fixture
def one_factor():
    return RationalOneFactorParameters(a=0.1, b00=0.5, eta=0.001, kappa=0.1)


@pytest.fixture
def two_factor():
    return RationalTwoFactorParameters(
        a1=0.1, a2=0.2, correlation=0.3, b00=0.5, eta1=0.0005, kappa1=0.5,
        eta2=0.001, kappa2=0.1, c1=1.0, c2=0.5
    )


def _swaptions(euribor6m, strike=0.021):
    payer = swaption(EXPIRY, "5Y", strike, 1.0, euribor6m, payer=True)
    receiver = swaption(EXPIRY, "5Y", strike, 1.0, euribor6m, payer=False)
    return payer, receiver


class TestRationalParameters:
    """Parameter view and model coefficients."""

    def test_one_factor_view(self, one_factor):
        assert one_factor.parameter_labels() == ["a", "b_0_0", "eta", "kappa"]
        assert one_factor.with_replaced(1, 0.6).b00 == 0.6
        assert one_factor.b00 == 0.5

    def test_two_factor_view(self, two_factor):
        assert two_factor.parameter_count() == 10
        assert two_factor.get_parameter(2) == 0.3
        assert two_factor.with_replaced(9, 0.7).c2 == 0.7

    def test_replacing_is_idempotent(self, one_factor, two_factor):
        for model in (one_factor, two_factor):
            restored = model.with_parameters(model.parameter_vector())
            np.testing.assert_array_equal(restored.parameter_vector(), model.parameter_vector())
            index = model.parameter_count() - 1
            value = 1.1 * model.get_parameter(index)
            once = model.with_replaced(index, value)
            twice = once.with_replaced(index, value)
            assert once.get_parameter(index) == value
            np.testing.assert_array_equal(twice.parameter_vector(), once.parameter_vector())
            np.testing.assert_array_equal(once.parameter_vector()[:index], model.parameter_vector()[:index])

    def test_invalid_parameters(self):
        with pytest.raises(ParameterValidationError):
            RationalOneFactorParameters(a=0.0, b00=0.5, eta=0.001, kappa=0.1)
        with pytest.raises(ParameterValidationError):
            RationalTwoFactorParameters(0.1, 0.2, 1.2, 0.5, 0.0, 0.5, 0.001, 0.1, 1.0, 0.5)

    def test_b0_at_valuation_date(self, one_factor, env, valuation_date):
        assert one_factor.b0(env, valuation_date) == pytest.approx(0.5)

    def test_two_factor_ibor_coefficients(self, two_factor, env, euribor6m):
        period = swaption(EXPIRY, "5Y", 0.02, 1.0, euribor6m).underlying.ibor_leg().periods[0]
        assert two_factor.b2(env, period) == pytest.approx(0.5 * two_factor.b1(env, period))

    def test_discount_factor_today(self, one_factor, env, valuation_date):
        x = np.array([-1.0, 0.0, 2.0])
        np.testing.assert_allclose(one_factor.martingale(0.0, x), np.zeros(3))
        np.testing.assert_allclose(
            one_factor.discount_factor(env, valuation_date, date(2030, 1, 17), x),
            np.full(3, env.discount_factor(date(2030, 1, 17)))
        )

    def test_swap_coefficients_sum_to_swap_value(self, one_factor, two_factor, env, euribor6m):
        payer, _ = _swaptions(euribor6m)
        value = DiscountingSwapPricer(env).present_value(payer.underlying)
        assert np.sum(swap_coefficients(payer.underlying, env, one_factor)) == pytest.approx(value, abs=1e-14)
        c = swap_coefficients(payer.underlying, env, two_factor)
        assert len(c) == 3
        assert np.sum(c) == pytest.approx(value, abs=1e-14)


class TestRationalSwaptionPricers:
    """Explicit and semi-explicit swaption formulas."""

    def test_one_factor_parity(self, one_factor, env, euribor6m):
        payer, receiver = _swaptions(euribor6m)
        pricer = RationalOneFactorSwaptionPhysicalPricer()
        swap_value = DiscountingSwapPricer(env).present_value(payer.underlying)
        pv_payer = pricer.present_value(payer, env, one_factor)
        pv_receiver = pricer.present_value(receiver, env, one_factor)
        assert pv_payer > 0.0
        assert pv_receiver > 0.0
        assert pv_payer - pv_receiver == pytest.approx(swap_value, abs=1e-12)

    def test_short_position(self, one_factor, env, euribor6m):
        payer, _ = _swaptions(euribor6m)
        short = swaption(EXPIRY, "5Y", 0.021, 1.0, euribor6m, payer=True, long=False)
        pricer = RationalOneFactorSwaptionPhysicalPricer()
        assert pricer.present_value(short, env, one_factor) == pytest.approx(
            -pricer.present_value(payer, env, one_factor))

    def test_two_factor_reduces_to_one_factor(self, one_factor, env, euribor6m):
        """Without second factor loading and with the same b0 shape, both models agree."""
        reduced = RationalTwoFactorParameters(
            a1=0.1, a2=0.2, correlation=0.3, b00=0.5, eta1=0.0, kappa1=0.5,
            eta2=0.001, kappa2=0.1, c1=1.0, c2=0.0
        )
        payer, _ = _swaptions(euribor6m)
        expected = RationalOneFactorSwaptionPhysicalPricer().present_value(payer, env, one_factor)
        pv = RationalTwoFactorSwaptionPhysicalPricer().present_value(payer, env, reduced)
        assert pv == pytest.approx(expected, rel=1e-6)

    def test_two_factor_parity(self, two_factor, env, euribor6m):
        payer, receiver = _swaptions(euribor6m)
        pricer = RationalTwoFactorSwaptionPhysicalPricer()
        swap_value = np.sum(swap_coefficients(payer.underlying, env, two_factor))
        difference = pricer.present_value(payer, env, two_factor) - pricer.present_value(receiver, env, two_factor)
        assert difference == pytest.approx(swap_value, abs=1e-8)

    def test_implied_volatility_positive(self, one_factor, env, euribor6m):
        payer, _ = _swaptions(euribor6m)
        assert RationalOneFactorSwaptionPhysicalPricer().implied_volatility(payer, env, one_factor) > 0.0
