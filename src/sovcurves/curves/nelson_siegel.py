"""
Nelson-Siegel (NS) parametric yield curve model.

The NS model represents the yield curve with 4 parameters:

    y(τ) = β₀ + β₁ * [(1-e^(-τ/λ))/(τ/λ)]
             + β₂ * [(1-e^(-τ/λ))/(τ/λ) - e^(-τ/λ)]

Parameters:
    β₀: Long-term level (asymptotic rate)
    β₁: Short-term component (slope)
    β₂: Medium-term hump (curvature)
    λ:  Decay scale (> 0)

At τ = 0 the model takes its limit β₀ + β₁.

Fitting follows the dashboard's estimator: fixed-step gradient descent on
the mean squared error with central-difference gradients, starting from a
guess read off the short, medium and long end of the data. A scipy
least-squares solver can be selected instead.
"""

from dataclasses import dataclass, replace
import logging
from typing import Optional, Sequence, Tuple
import numpy as np
from scipy.optimize import least_squares

from ..conventions import FitSolver, NelsonSiegelConfig
from .interpolation import Interpolator

logger = logging.getLogger(__name__)

PARAMETER_NAMES = ("beta0", "beta1", "beta2", "lambda_")


@dataclass(frozen=True)
class NelsonSiegelParameters:
    """Nelson-Siegel parameters."""
    beta0: float  # Long-term level
    beta1: float  # Short-term component
    beta2: float  # Medium-term hump
    lambda_: float  # Decay

    @classmethod
    def flat(cls, level: float, lambda_: float = 1.5) -> "NelsonSiegelParameters":
        """Flat curve at ``level``."""
        return cls(beta0=level, beta1=0.0, beta2=0.0, lambda_=lambda_)

    @classmethod
    def initial_guess(
        cls,
        yields: Sequence[float],
        lambda_: float = 1.5
    ) -> "NelsonSiegelParameters":
        """
        Starting point from yields sorted by maturity.

        Level from the long end, slope from short minus long, curvature
        from the middle observation.
        """
        short_yield = float(yields[0])
        long_yield = float(yields[-1])
        mid_yield = float(yields[len(yields) // 2])
        return cls(
            beta0=long_yield,
            beta1=short_yield - long_yield,
            beta2=2 * mid_yield - short_yield - long_yield,
            lambda_=lambda_
        )

    def to_array(self) -> np.ndarray:
        """Convert to numpy array for optimization."""
        return np.array([self.beta0, self.beta1, self.beta2, self.lambda_])

    @classmethod
    def from_array(cls, arr: np.ndarray) -> "NelsonSiegelParameters":
        """Create from numpy array."""
        return cls(
            beta0=float(arr[0]), beta1=float(arr[1]),
            beta2=float(arr[2]), lambda_=float(arr[3])
        )

    def to_dict(self) -> dict:
        return {
            "beta0": self.beta0,
            "beta1": self.beta1,
            "beta2": self.beta2,
            "lambda": self.lambda_,
        }


def nelson_siegel_yield(tau, params: NelsonSiegelParameters):
    """
    Compute NS yield at maturity tau.

    Args:
        tau: Time to maturity in years (scalar or array)
        params: NS parameters

    Returns:
        Yield(s) at tau, same shape as the input
    """
    tau = np.asarray(tau, dtype=np.float64)
    positive = tau > 0
    # Placeholder maturity where tau <= 0 avoids 0/0; those entries use the limit
    safe_tau = np.where(positive, tau, 1.0)

    scaled = safe_tau / params.lambda_
    exp_term = np.exp(-scaled)
    factor1 = (1 - exp_term) / scaled
    factor2 = factor1 - exp_term

    y = params.beta0 + params.beta1 * factor1 + params.beta2 * factor2
    y = np.where(positive, y, params.beta0 + params.beta1)

    if y.ndim == 0:
        return float(y)
    return y


class NelsonSiegel(Interpolator):
    """
    Nelson-Siegel yield curve model.

    Fits the NS model to known yields and evaluates it at other
    maturities. Unlike the spline estimators it can extrapolate.

    Attributes:
        config: Fitting settings
        params: Fitted NS parameters
        is_fitted: Whether model has been fitted
        iterations: Optimizer iterations used by the last fit
        converged: Whether the last fit reached the error tolerance
        fit_error: Mean squared error of the last fit
    """

    def __init__(self, config: Optional[NelsonSiegelConfig] = None):
        self.config = config or NelsonSiegelConfig()
        self.params: Optional[NelsonSiegelParameters] = None
        self.is_fitted = False
        self.iterations = 0
        self.converged = False
        self.fit_error: Optional[float] = None
        self._fit_residuals: Optional[np.ndarray] = None

    @property
    def residuals(self) -> Optional[np.ndarray]:
        """Fitted minus observed yields from the last fit."""
        return self._fit_residuals

    def fit(self, maturities: Sequence[float], yields: Sequence[float]) -> None:
        """
        Fit NS model to observed yields.

        With fewer than ``config.min_points`` observations the model falls
        back to a flat curve at the mean yield.

        Args:
            maturities: Maturities in years (sorted ascending)
            yields: Observed yields
        """
        if len(maturities) != len(yields):
            raise ValueError("Maturities and yields must have same length")
        if len(maturities) == 0:
            raise ValueError("Need at least 1 point to fit Nelson-Siegel model")

        tau = np.asarray(maturities, dtype=np.float64)
        y_obs = np.asarray(yields, dtype=np.float64)
        cfg = self.config

        if len(tau) < cfg.min_points:
            logger.debug("Nelson-Siegel fallback: %d points, flat curve at mean", len(tau))
            self.params = NelsonSiegelParameters.flat(float(np.mean(y_obs)), cfg.initial_lambda)
            self.iterations = 0
            self.converged = False
        else:
            initial = NelsonSiegelParameters.initial_guess(y_obs, cfg.initial_lambda)
            if cfg.solver is FitSolver.LEAST_SQUARES:
                self.params, self.iterations, self.converged = self._fit_least_squares(
                    tau, y_obs, initial
                )
            else:
                self.params, self.iterations, self.converged = self._fit_gradient_descent(
                    tau, y_obs, initial
                )

        self.is_fitted = True
        self._fit_residuals = nelson_siegel_yield(tau, self.params) - y_obs
        self.fit_error = float(np.mean(self._fit_residuals**2))

        logger.debug(
            "Nelson-Siegel fit (%s): %s, iterations=%d, mse=%.6g",
            cfg.solver.value, self.params, self.iterations, self.fit_error
        )

    def _fit_gradient_descent(
        self,
        tau: np.ndarray,
        y_obs: np.ndarray,
        params: NelsonSiegelParameters
    ) -> Tuple[NelsonSiegelParameters, int, bool]:
        """
        Minimize mean squared error by gradient descent.

        Each step takes central-difference derivatives of the model with
        respect to every parameter, averages 2·e·∂ŷ/∂p over the points and
        moves against it. λ is floored after every update. The loop stops
        once the error measured at the start of a step is below tolerance.
        """
        cfg = self.config
        n = len(tau)
        eps = cfg.epsilon

        for iteration in range(1, cfg.max_iterations + 1):
            errors = nelson_siegel_yield(tau, params) - y_obs
            mse = float(np.sum(errors**2)) / n

            gradients = {}
            for name in PARAMETER_NAMES:
                value = getattr(params, name)
                up = nelson_siegel_yield(tau, replace(params, **{name: value + eps}))
                down = nelson_siegel_yield(tau, replace(params, **{name: value - eps}))
                sensitivity = (up - down) / (2 * eps)
                gradients[name] = float(np.sum(2 * errors * sensitivity))

            params = NelsonSiegelParameters(
                beta0=params.beta0 - cfg.learning_rate * gradients["beta0"] / n,
                beta1=params.beta1 - cfg.learning_rate * gradients["beta1"] / n,
                beta2=params.beta2 - cfg.learning_rate * gradients["beta2"] / n,
                lambda_=max(
                    cfg.lambda_floor,
                    params.lambda_ - cfg.learning_rate * gradients["lambda_"] / n
                )
            )

            if mse < cfg.tolerance:
                return params, iteration, True

        return params, cfg.max_iterations, False

    def _fit_least_squares(
        self,
        tau: np.ndarray,
        y_obs: np.ndarray,
        initial: NelsonSiegelParameters
    ) -> Tuple[NelsonSiegelParameters, int, bool]:
        """Trust-region least squares with λ bounded below."""
        cfg = self.config

        def residuals(x):
            return nelson_siegel_yield(tau, NelsonSiegelParameters.from_array(x)) - y_obs

        x0 = initial.to_array()
        x0[3] = max(x0[3], cfg.lambda_floor)
        lower = [-np.inf, -np.inf, -np.inf, cfg.lambda_floor]
        upper = [np.inf, np.inf, np.inf, np.inf]

        result = least_squares(
            residuals,
            x0,
            bounds=(lower, upper),
            method="trf",
            max_nfev=cfg.max_iterations
        )

        params = NelsonSiegelParameters.from_array(result.x)
        mse = float(np.mean(result.fun**2))
        return params, int(result.nfev), bool(result.success) or mse < cfg.tolerance

    def yield_at(self, tau: float) -> float:
        """
        Get yield at maturity.

        Args:
            tau: Time to maturity in years

        Returns:
            Fitted yield
        """
        if not self.is_fitted:
            raise RuntimeError("Model not fitted - call fit() first")
        return nelson_siegel_yield(float(tau), self.params)

    def interpolate(self, t: float) -> float:
        return self.yield_at(t)

    def evaluate(self, targets: Sequence[float]) -> np.ndarray:
        if not self.is_fitted:
            raise RuntimeError("Model not fitted - call fit() first")
        return np.atleast_1d(nelson_siegel_yield(np.asarray(targets, dtype=np.float64), self.params))

    def mse(self, maturities: Sequence[float], yields: Sequence[float]) -> float:
        """Mean squared error of the fitted curve against observations."""
        predicted = self.evaluate(maturities)
        return float(np.mean((predicted - np.asarray(yields, dtype=np.float64))**2))

    def __repr__(self) -> str:
        if not self.is_fitted:
            return "NelsonSiegel(fitted=False)"
        p = self.params
        return (f"NelsonSiegel(β₀={p.beta0:.4f}, β₁={p.beta1:.4f}, "
                f"β₂={p.beta2:.4f}, λ={p.lambda_:.2f})")


def fit_nelson_siegel(
    maturities: Sequence[float],
    yields: Sequence[float],
    config: Optional[NelsonSiegelConfig] = None
) -> NelsonSiegelParameters:
    """
    Convenience function returning fitted NS parameters.

    Args:
        maturities: Maturities in years (sorted ascending)
        yields: Observed yields
        config: Fitting settings

    Returns:
        Fitted NelsonSiegelParameters
    """
    model = NelsonSiegel(config)
    model.fit(maturities, yields)
    return model.params


__all__ = [
    "NelsonSiegel",
    "NelsonSiegelParameters",
    "nelson_siegel_yield",
    "fit_nelson_siegel",
]
