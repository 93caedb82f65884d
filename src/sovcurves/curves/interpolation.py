"""
Interpolation methods for sovereign yield curves.

Provides:
- LinearInterpolator: Linear interpolation between bracketing knots
- CubicSplineInterpolator: Natural cubic spline (Thomas algorithm solve)

Both work with year fractions as x-coordinates and yields (percent) as
y-coordinates. Inputs are expected inside the knot range; the
bootstrapper never asks for anything else.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence
import numpy as np


class Interpolator(ABC):
    """Abstract base class for curve estimators."""

    @abstractmethod
    def fit(self, times: Sequence[float], values: Sequence[float]) -> None:
        """
        Fit the estimator to known points.

        Args:
            times: Year fractions (sorted ascending)
            values: Yields at those year fractions
        """
        pass

    @abstractmethod
    def interpolate(self, t: float) -> float:
        """
        Estimate the yield at a single point.

        Args:
            t: Year fraction

        Returns:
            Estimated yield
        """
        pass

    def __call__(self, t: float) -> float:
        """Convenience method to call interpolate."""
        return self.interpolate(t)

    def evaluate(self, targets: Sequence[float]) -> np.ndarray:
        """Estimate yields at several year fractions."""
        return np.array([self.interpolate(t) for t in targets], dtype=np.float64)


def _as_sorted_arrays(times, values):
    """Validate and stable-sort knot arrays by time."""
    if len(times) != len(values):
        raise ValueError("Times and values must have same length")

    times = np.asarray(times, dtype=np.float64)
    values = np.asarray(values, dtype=np.float64)
    idx = np.argsort(times, kind="stable")
    return times[idx], values[idx]


class LinearInterpolator(Interpolator):
    """
    Linear interpolation.

    Finds the first bracketing pair x_i <= x <= x_{i+1} by linear scan and
    interpolates between them. No range check: outside the knots the first
    segment is extended.
    """

    def __init__(self):
        self.times: Optional[np.ndarray] = None
        self.values: Optional[np.ndarray] = None

    def fit(self, times: Sequence[float], values: Sequence[float]) -> None:
        """Fit linear interpolator."""
        if len(times) < 2:
            raise ValueError("Need at least 2 points for interpolation")
        self.times, self.values = _as_sorted_arrays(times, values)

    def interpolate(self, t: float) -> float:
        """Linear interpolation on the bracketing segment."""
        if self.times is None:
            raise RuntimeError("Interpolator not fitted")

        x, y = self.times, self.values

        # Find bracket
        idx = 0
        for i in range(len(x) - 1):
            if x[i] <= t <= x[i + 1]:
                idx = i
                break

        return float(y[idx] + (t - x[idx]) * (y[idx + 1] - y[idx]) / (x[idx + 1] - x[idx]))


class CubicSplineInterpolator(Interpolator):
    """
    Natural cubic spline interpolation.

    Value, slope and curvature are continuous at every interior knot and
    the second derivative is zero at both ends. With two knots the spline
    is the straight line between them; with fewer it yields NaN.
    """

    def __init__(self):
        self.times: Optional[np.ndarray] = None
        self.values: Optional[np.ndarray] = None
        self.steps: Optional[np.ndarray] = None  # h_i = x_{i+1} - x_i
        self.second_derivatives: Optional[np.ndarray] = None  # M_0..M_{n-1}
        self._linear: Optional[LinearInterpolator] = None

    def fit(self, times: Sequence[float], values: Sequence[float]) -> None:
        """
        Fit natural cubic spline.

        Solves the tridiagonal system for the second derivatives with the
        Thomas algorithm.
        """
        self.times, self.values = _as_sorted_arrays(times, values)

        n = len(self.times)
        self._linear = None
        if n < 2:
            self.steps = None
            self.second_derivatives = None
            return
        if n == 2:
            # No curvature information; degrade to linear
            self._linear = LinearInterpolator()
            self._linear.fit(self.times, self.values)

        x, y = self.times, self.values
        h = np.diff(x)
        self.steps = h

        M = np.zeros(n)
        if n > 2:
            # Forward elimination: l, mu, z
            # 6x right-hand side gives true second derivatives (matches scipy natural spline)
            # h[i-1] M[i-1] + 2(h[i-1] + h[i]) M[i] + h[i] M[i+1]
            #     = 6 ((y[i+1] - y[i]) / h[i] - (y[i] - y[i-1]) / h[i-1])
            l = np.ones(n)
            mu = np.zeros(n)
            z = np.zeros(n)
            for i in range(1, n - 1):
                rhs = 6.0 * ((y[i + 1] - y[i]) / h[i] - (y[i] - y[i - 1]) / h[i - 1])
                l[i] = 2.0 * (x[i + 1] - x[i - 1]) - h[i - 1] * mu[i - 1]
                mu[i] = h[i] / l[i]
                z[i] = (rhs - h[i - 1] * z[i - 1]) / l[i]

            # Back substitution; M[0] = M[n-1] = 0 (natural)
            for j in range(n - 2, 0, -1):
                M[j] = z[j] - mu[j] * M[j + 1]

        self.second_derivatives = M

    def _segment(self, t: float) -> int:
        """Index i of the segment [x_i, x_{i+1}] containing t."""
        x = self.times
        last = len(x) - 2
        if t < x[0]:
            return 0
        if t > x[-1]:
            return last
        for i in range(last + 1):
            if x[i] <= t <= x[i + 1]:
                return i
        return last

    def interpolate(self, t: float) -> float:
        """Evaluate cubic spline at point t."""
        if self.times is None:
            raise RuntimeError("Interpolator not fitted")
        if self.second_derivatives is None:
            return float("nan")
        if self._linear is not None:
            return self._linear.interpolate(t)

        i = self._segment(t)
        x, y, M = self.times, self.values, self.second_derivatives
        h = self.steps[i]

        a = (x[i + 1] - t) / h
        b = (t - x[i]) / h

        return float(
            a * y[i] + b * y[i + 1]
            + ((a**3 - a) * M[i] + (b**3 - b) * M[i + 1]) * h**2 / 6.0
        )

    def second_derivative(self, t: float) -> float:
        """Second derivative of the spline at t (linear between knots)."""
        if self.second_derivatives is None:
            return float("nan")

        i = self._segment(t)
        x, M = self.times, self.second_derivatives
        h = self.steps[i]
        return float(((x[i + 1] - t) * M[i] + (t - x[i]) * M[i + 1]) / h)


def create_interpolator(method, nelson_siegel_config=None) -> Interpolator:
    """
    Factory function to create an estimator by method.

    Args:
        method: InterpolationMethod or its name ("linear", "cubic-spline",
            "nelson-siegel")
        nelson_siegel_config: Fitting settings for the Nelson-Siegel model

    Returns:
        Unfitted Interpolator instance
    """
    from ..conventions import InterpolationMethod
    from .nelson_siegel import NelsonSiegel

    method = InterpolationMethod.coerce(method)

    if method is InterpolationMethod.LINEAR:
        return LinearInterpolator()
    elif method is InterpolationMethod.CUBIC_SPLINE:
        return CubicSplineInterpolator()
    elif method is InterpolationMethod.NELSON_SIEGEL:
        return NelsonSiegel(nelson_siegel_config)
    raise ValueError(f"Unknown interpolation method: {method}")


__all__ = [
    "Interpolator",
    "LinearInterpolator",
    "CubicSplineInterpolator",
    "create_interpolator",
]
