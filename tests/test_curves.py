"""
Unit tests for curves module.
"""

import math
import numpy as np
import pytest
from scipy.interpolate import CubicSpline

from sovcurves.conventions import FitSolver, InterpolationMethod, NelsonSiegelConfig
from sovcurves.curves import (
    CubicSplineInterpolator,
    LinearInterpolator,
    NelsonSiegel,
    NelsonSiegelParameters,
    RatePoint,
    YieldCurve,
    create_interpolator,
    fit_nelson_siegel,
    nelson_siegel_yield,
)


class TestInterpolators:
    """Tests for interpolation methods."""

    @pytest.fixture
    def sample_data(self):
        """Sample yield data (year fractions, percent)."""
        x = np.array([0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0])
        y = np.array([3.10, 3.05, 2.95, 2.80, 2.90, 3.20, 3.60])
        return x, y

    def test_linear_interpolator(self, sample_data):
        """Test linear interpolation."""
        x, y = sample_data
        interp = LinearInterpolator()
        interp.fit(x, y)

        # Test exact points
        for xi, yi in zip(x, y):
            assert abs(interp(xi) - yi) < 1e-9

        # Test interpolated point
        assert abs(interp(1.5) - 2.875) < 1e-12
        assert abs(interp(7.5) - 3.05) < 1e-12

    def test_linear_requires_two_points(self):
        """Test linear fit rejects a single point."""
        with pytest.raises(ValueError):
            LinearInterpolator().fit([1.0], [2.0])

    def test_linear_not_fitted(self):
        """Test evaluation before fit raises."""
        with pytest.raises(RuntimeError):
            LinearInterpolator().interpolate(1.0)

    def test_linear_sorts_input(self):
        """Test unsorted knots are sorted before use."""
        interp = LinearInterpolator()
        interp.fit([5.0, 1.0], [3.0, 2.0])
        assert abs(interp(3.0) - 2.5) < 1e-12

    def test_cubic_spline_interpolator(self, sample_data):
        """Test cubic spline interpolation."""
        x, y = sample_data
        interp = CubicSplineInterpolator()
        interp.fit(x, y)

        # Test exact points
        for xi, yi in zip(x, y):
            assert abs(interp(xi) - yi) < 1e-9

        # Test smoothness (should be differentiable)
        result1 = interp(1.0)
        result2 = interp(1.001)
        assert result1 != result2

    def test_cubic_spline_matches_scipy(self, sample_data):
        """Test against scipy's natural cubic spline."""
        x, y = sample_data
        interp = CubicSplineInterpolator()
        interp.fit(x, y)
        reference = CubicSpline(x, y, bc_type="natural")

        for t in np.linspace(x[0], x[-1], 57):
            assert abs(interp(t) - float(reference(t))) < 1e-9

    def test_cubic_spline_natural_boundary(self, sample_data):
        """Test second derivative vanishes at both ends."""
        x, y = sample_data
        interp = CubicSplineInterpolator()
        interp.fit(x, y)

        assert interp.second_derivatives[0] == 0.0
        assert interp.second_derivatives[-1] == 0.0
        assert abs(interp.second_derivative(x[0])) < 1e-12
        assert abs(interp.second_derivative(x[-1])) < 1e-12

    def test_cubic_spline_two_points_is_linear(self):
        """Test spline degrades to linear with two knots."""
        spline = CubicSplineInterpolator()
        linear = LinearInterpolator()
        spline.fit([1.0, 10.0], [2.0, 3.5])
        linear.fit([1.0, 10.0], [2.0, 3.5])

        for t in [1.0, 2.0, 3.3, 7.0, 10.0]:
            assert spline(t) == linear(t)

    def test_cubic_spline_too_few_points(self):
        """Test spline yields NaN rather than raising with < 2 knots."""
        spline = CubicSplineInterpolator()
        spline.fit([2.0], [1.0])
        assert math.isnan(spline(2.0))

        spline.fit([], [])
        assert np.all(np.isnan(spline.evaluate([1.0, 2.0])))

    def test_cubic_spline_clamps_out_of_range(self, sample_data):
        """Test evaluation outside the knots uses the end segments."""
        x, y = sample_data
        interp = CubicSplineInterpolator()
        interp.fit(x, y)
        assert interp._segment(0.0) == 0
        assert interp._segment(40.0) == len(x) - 2
        assert np.isfinite(interp(40.0))

    def test_evaluate_vector(self, sample_data):
        """Test vector evaluation matches scalar calls."""
        x, y = sample_data
        interp = CubicSplineInterpolator()
        interp.fit(x, y)
        targets = [0.75, 3.0, 7.0, 20.0]
        values = interp.evaluate(targets)
        assert values.shape == (4,)
        for t, v in zip(targets, values):
            assert v == interp(t)

    def test_create_interpolator(self):
        """Test factory by method name and enum."""
        assert isinstance(create_interpolator("linear"), LinearInterpolator)
        assert isinstance(create_interpolator("cubic-spline"), CubicSplineInterpolator)
        assert isinstance(create_interpolator(InterpolationMethod.NELSON_SIEGEL), NelsonSiegel)
        with pytest.raises(ValueError):
            create_interpolator("log-linear")


class TestNelsonSiegel:
    """Tests for Nelson-Siegel fitting."""

    @pytest.fixture
    def true_params(self):
        return NelsonSiegelParameters(beta0=4.5, beta1=-2.5, beta2=0.0, lambda_=1.8)

    @pytest.fixture
    def synthetic_curve(self, true_params):
        """Smooth, upward-sloping curve generated from known parameters."""
        tenors = np.array([0.25, 0.5, 1, 2, 3, 5, 7, 10, 20, 30], dtype=float)
        return tenors, nelson_siegel_yield(tenors, true_params)

    def test_yield_at_zero_is_short_rate(self):
        """Test y(0) = beta0 + beta1."""
        p = NelsonSiegelParameters(beta0=4.0, beta1=-1.0, beta2=0.5, lambda_=2.0)
        assert nelson_siegel_yield(0.0, p) == 3.0
        assert abs(nelson_siegel_yield(1e-8, p) - 3.0) < 1e-6

    def test_long_end_tends_to_level(self):
        """Test y(τ) approaches beta0 for long maturities."""
        p = NelsonSiegelParameters(beta0=4.0, beta1=-1.0, beta2=0.5, lambda_=2.0)
        assert abs(nelson_siegel_yield(1e4, p) - 4.0) < 1e-3

    def test_vectorized_matches_scalar(self, synthetic_curve, true_params):
        """Test array evaluation equals scalar evaluation."""
        tenors, yields = synthetic_curve
        for t, y in zip(tenors, yields):
            assert abs(nelson_siegel_yield(float(t), true_params) - y) < 1e-12

    def test_initial_guess(self):
        """Test the level/slope/curvature starting point."""
        guess = NelsonSiegelParameters.initial_guess([1.0, 2.0, 4.0, 3.0, 5.0])
        assert guess.beta0 == 5.0
        assert guess.beta1 == -4.0
        assert guess.beta2 == 2 * 4.0 - 1.0 - 5.0
        assert guess.lambda_ == 1.5

    def test_fallback_with_two_points(self):
        """Test flat fallback below three points."""
        model = NelsonSiegel()
        model.fit([1.0, 5.0], [2.0, 3.0])
        assert model.params == NelsonSiegelParameters(beta0=2.5, beta1=0.0, beta2=0.0, lambda_=1.5)
        assert model.yield_at(3.0) == 2.5
        assert model.iterations == 0

    def test_fit_beats_flat_baseline(self, synthetic_curve):
        """Test fitted curve has lower error than the flat mean curve."""
        tenors, yields = synthetic_curve
        model = NelsonSiegel()
        model.fit(tenors, yields)

        baseline = float(np.mean((yields - np.mean(yields))**2))
        assert model.fit_error < baseline
        assert model.mse(tenors, yields) == pytest.approx(model.fit_error)
        assert model.params.lambda_ >= 0.1

    def test_early_stop(self, synthetic_curve):
        """Test loop stops once error is below tolerance."""
        tenors, yields = synthetic_curve
        model = NelsonSiegel(NelsonSiegelConfig(tolerance=100.0))
        model.fit(tenors, yields)
        assert model.iterations == 1
        assert model.converged

    def test_iteration_cap(self, synthetic_curve):
        """Test the iteration cap bounds the descent."""
        tenors, yields = synthetic_curve
        model = NelsonSiegel(NelsonSiegelConfig(tolerance=0.0, max_iterations=7))
        model.fit(tenors, yields)
        assert model.iterations == 7
        assert not model.converged

    def test_lambda_floor(self):
        """Test decay parameter never drops below its floor."""
        config = NelsonSiegelConfig(initial_lambda=0.1, learning_rate=1.0, max_iterations=50)
        model = NelsonSiegel(config)
        with np.errstate(all="ignore"):
            model.fit([0.1, 0.2, 0.3, 20.0, 30.0], [1.0, 5.0, 1.0, 5.0, 1.0])
        assert model.params.lambda_ >= 0.1

    def test_least_squares_solver(self, synthetic_curve, true_params):
        """Test scipy solver recovers the generating curve."""
        tenors, yields = synthetic_curve
        model = NelsonSiegel(NelsonSiegelConfig(solver=FitSolver.LEAST_SQUARES))
        model.fit(tenors, yields)
        assert model.fit_error < 1e-6
        assert abs(model.yield_at(15.0) - nelson_siegel_yield(15.0, true_params)) < 1e-3

    def test_not_fitted(self):
        """Test querying an unfitted model raises."""
        with pytest.raises(RuntimeError):
            NelsonSiegel().yield_at(1.0)

    def test_fit_nelson_siegel_helper(self, synthetic_curve):
        """Test convenience function returns parameters."""
        tenors, yields = synthetic_curve
        params = fit_nelson_siegel(tenors, yields)
        assert isinstance(params, NelsonSiegelParameters)
        assert params.lambda_ > 0


class TestYieldCurve:
    """Tests for the YieldCurve container."""

    def test_rates_are_copied_and_read_only(self):
        """Test curve never aliases or exposes a mutable rate map."""
        rates = {"1Y": 2.0, "2Y": None}
        curve = YieldCurve("Germany", rates)
        rates["1Y"] = 99.0

        assert curve.rates["1Y"] == 2.0
        with pytest.raises(TypeError):
            curve.rates["2Y"] = 1.0

    def test_known_points(self):
        """Test known points skip missing, non-finite and unparseable entries."""
        curve = YieldCurve("X", {"5Y": 3.0, "1Y": -0.1, "2Y": None, "junk": 1.0, "3Y": float("nan")})
        points = curve.known_points(["1Y", "2Y", "3Y", "5Y", "junk", "7Y"])
        assert points == [
            RatePoint("1Y", 1.0, -0.1),
            RatePoint("5Y", 5.0, 3.0),
        ]

    def test_with_rates_returns_new_curve(self):
        """Test merging leaves the original untouched."""
        curve = YieldCurve("X", {"1Y": 1.0, "2Y": None})
        updated = curve.with_rates({"2Y": 1.5})
        assert curve.rates["2Y"] is None
        assert updated.rates["2Y"] == 1.5
        assert updated.country == "X"

    def test_interpolated_maturities(self):
        """Test diff against the original curve."""
        original = YieldCurve("X", {"1Y": 1.0, "2Y": None, "3Y": None})
        filled = original.with_rates({"2Y": 1.5})
        assert filled.interpolated_maturities(original) == ["2Y"]

    def test_dict_round_trip(self):
        """Test provider record conversion."""
        record = {
            "country": "Japan",
            "slug": "japan",
            "rates": {"1Y": 0.62, "2Y": None, "5Y": "n/a"},
            "lastUpdated": "2024-01-15T10:00:00Z",
        }
        curve = YieldCurve.from_dict(record)
        assert dict(curve.rates) == {"1Y": 0.62, "2Y": None, "5Y": None}
        assert curve.last_updated == "2024-01-15T10:00:00Z"
        assert YieldCurve.from_dict(curve.to_dict()).to_dict() == curve.to_dict()

    def test_error_record(self):
        """Test error-flagged provider records with no rates."""
        curve = YieldCurve.from_dict({"country": "Ukraine", "slug": "ukraine", "rates": {}, "error": "timeout"})
        assert curve.error == "timeout"
        assert len(curve.rates) == 0
