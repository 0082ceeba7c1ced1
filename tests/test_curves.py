"""
Unit tests for curves module.
"""

from datetime import date
import numpy as np
import pytest

from ratesmodels.curves import (
    Curve,
    LinearInterpolator,
    create_flat_curve,
    create_interpolator,
)


class TestInterpolators:
    """Tests for interpolation methods."""

    @pytest.fixture
    def sample_data(self):
        """Sample interpolation data."""
        x = np.array([0.0, 1.0, 2.0])
        y = np.array([0.0, 1.0, 4.0])
        return x, y

    def test_linear_interpolator(self, sample_data):
        x, y = sample_data
        interp = LinearInterpolator().fit(x, y)
        assert interp(1.0) == pytest.approx(1.0)
        assert interp(1.5) == pytest.approx(2.5)

    def test_flat_extrapolation(self, sample_data):
        x, y = sample_data
        interp = LinearInterpolator().fit(x, y)
        assert interp(-1.0) == pytest.approx(0.0)
        assert interp(3.0) == pytest.approx(4.0)

    def test_linear_extrapolation(self, sample_data):
        x, y = sample_data
        interp = LinearInterpolator("linear", "linear").fit(x, y)
        assert interp(3.0) == pytest.approx(7.0)
        assert interp(-1.0) == pytest.approx(-1.0)

    def test_unsorted_nodes_are_sorted(self):
        interp = LinearInterpolator().fit([2.0, 0.0, 1.0], [4.0, 0.0, 1.0])
        assert interp(0.5) == pytest.approx(0.5)

    def test_invalid_inputs(self):
        with pytest.raises(ValueError):
            LinearInterpolator().fit([1.0], [1.0])
        with pytest.raises(ValueError):
            LinearInterpolator().fit([0.0, 1.0], [1.0])
        with pytest.raises(ValueError):
            LinearInterpolator(left_extrapolation="quadratic")
        with pytest.raises(RuntimeError):
            LinearInterpolator().interpolate(1.0)

    def test_factory(self):
        assert isinstance(create_interpolator("linear"), LinearInterpolator)
        assert create_interpolator("linear", "flat", "linear").right_extrapolation == "linear"
        with pytest.raises(ValueError):
            create_interpolator("cubic_spline")


class TestCurve:
    """Tests for Curve class."""

    @pytest.fixture
    def flat_curve(self):
        return create_flat_curve(date(2024, 1, 17), 0.02)

    def test_flat_zero_rates(self, flat_curve):
        assert flat_curve.zero_rate(0.1) == pytest.approx(0.02)
        assert flat_curve.zero_rate(7.3) == pytest.approx(0.02)
        assert flat_curve.zero_rate(80.0) == pytest.approx(0.02)

    def test_discount_factors(self, flat_curve):
        assert flat_curve.discount_factor(5.0) == pytest.approx(np.exp(-0.1))
        assert flat_curve.discount_factor(date(2025, 1, 16)) == pytest.approx(np.exp(-0.02))
        assert flat_curve.discount_factor(date(2023, 1, 1)) == 1.0
        assert flat_curve.discount_factor(0.0) == 1.0

    def test_forward_rate(self, flat_curve):
        assert flat_curve.forward_rate(1.0, 2.0) == pytest.approx(np.exp(0.02) - 1.0)
        assert flat_curve.forward_rate(1.0, 1.5, accrual=0.5) == pytest.approx((np.exp(0.01) - 1.0) / 0.5)
        with pytest.raises(ValueError):
            flat_curve.forward_rate(2.0, 1.0)

    def test_bump_parallel(self, flat_curve):
        bumped = flat_curve.bump_parallel(1.0)
        assert bumped.zero_rate(3.0) == pytest.approx(0.0201)
        assert flat_curve.zero_rate(3.0) == pytest.approx(0.02)

    def test_nodes(self):
        curve = Curve(date(2024, 1, 17))
        curve.add_node(1.0, 0.98)
        curve.add_node(2.0, 0.95)
        curve.add_node(1.0, 0.97)
        assert curve.discount_factor(1.0) == pytest.approx(0.97)
        assert curve.discount_factor(2.0) == pytest.approx(0.95)
        with pytest.raises(ValueError):
            curve.add_node(0.0, 1.0)
        with pytest.raises(ValueError):
            curve.add_node(1.0, -0.5)

    def test_build_empty_curve(self):
        with pytest.raises(ValueError):
            Curve(date(2024, 1, 17)).build()
