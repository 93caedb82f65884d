"""
Bootstrapping conventions and configuration.

Interpolation methods:
- linear: Piecewise linear between bracketing known points
- cubic-spline: Natural cubic spline over all known points (default)
- nelson-siegel: Parametric Nelson-Siegel fit evaluated at missing maturities

Nelson-Siegel solvers:
- gradient-descent: Fixed-step descent with central-difference gradients
- least-squares: scipy trust-region least squares with a floor on lambda
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Mapping, Optional


class InterpolationMethod(Enum):
    """Method used to estimate missing curve points."""
    LINEAR = "linear"
    CUBIC_SPLINE = "cubic-spline"
    NELSON_SIEGEL = "nelson-siegel"

    @classmethod
    def from_string(cls, s: str) -> "InterpolationMethod":
        """Parse interpolation method from string representation."""
        mapping = {
            "linear": cls.LINEAR,
            "lin": cls.LINEAR,
            "cubic-spline": cls.CUBIC_SPLINE,
            "cubic": cls.CUBIC_SPLINE,
            "spline": cls.CUBIC_SPLINE,
            "nelson-siegel": cls.NELSON_SIEGEL,
            "ns": cls.NELSON_SIEGEL,
        }
        key = s.lower().strip().replace("_", "-").replace(" ", "-")
        if key in mapping:
            return mapping[key]
        raise ValueError(f"Unknown interpolation method: {s}")

    @classmethod
    def coerce(cls, method) -> "InterpolationMethod":
        """Accept either an enum member or its string form."""
        if isinstance(method, cls):
            return method
        return cls.from_string(method)


class FitSolver(Enum):
    """Optimizer used for the Nelson-Siegel fit."""
    GRADIENT_DESCENT = "gradient-descent"
    LEAST_SQUARES = "least-squares"

    @classmethod
    def from_string(cls, s: str) -> "FitSolver":
        """Parse solver from string representation."""
        key = s.lower().strip().replace("_", "-").replace(" ", "-")
        for member in cls:
            if member.value == key:
                return member
        if key in ("gd", "descent"):
            return cls.GRADIENT_DESCENT
        if key in ("lsq", "trf"):
            return cls.LEAST_SQUARES
        raise ValueError(f"Unknown Nelson-Siegel solver: {s}")


@dataclass(frozen=True)
class NelsonSiegelConfig:
    """
    Nelson-Siegel fitting settings.

    Attributes:
        learning_rate: Gradient descent step size
        max_iterations: Iteration cap (also bounds least-squares evaluations)
        epsilon: Central finite-difference perturbation
        tolerance: Stop once mean squared error falls below this
        lambda_floor: Lower bound on the decay parameter
        initial_lambda: Starting decay parameter (also used by the fallback)
        min_points: Fewer known points than this use the flat fallback
        solver: Optimizer choice
    """
    learning_rate: float = 0.01
    max_iterations: int = 500
    epsilon: float = 1e-4
    tolerance: float = 1e-4
    lambda_floor: float = 0.1
    initial_lambda: float = 1.5
    min_points: int = 3
    solver: FitSolver = FitSolver.GRADIENT_DESCENT

    def __post_init__(self):
        if self.max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")
        if self.epsilon <= 0:
            raise ValueError("epsilon must be positive")
        if self.lambda_floor <= 0:
            raise ValueError("lambda_floor must be positive")


@dataclass(frozen=True)
class BootstrapConventions:
    """
    Container for bootstrapping conventions.

    Attributes:
        method: Default interpolation method
        decimals: Rounding applied to filled values (percent points)
        min_known_points: Curves with fewer known points are left unchanged
        nelson_siegel: Nelson-Siegel fitting settings
    """
    method: InterpolationMethod = InterpolationMethod.CUBIC_SPLINE
    decimals: int = 2
    min_known_points: int = 2
    nelson_siegel: NelsonSiegelConfig = field(default_factory=NelsonSiegelConfig)

    @classmethod
    def dashboard(cls) -> "BootstrapConventions":
        """Settings used by the yield table view."""
        return cls()

    @classmethod
    def parametric(cls) -> "BootstrapConventions":
        """Nelson-Siegel with the scipy least-squares solver."""
        return cls(
            method=InterpolationMethod.NELSON_SIEGEL,
            nelson_siegel=NelsonSiegelConfig(solver=FitSolver.LEAST_SQUARES)
        )

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "BootstrapConventions":
        """
        Build conventions from a plain mapping (e.g. parsed JSON).

        Unknown keys raise ValueError. A nested ``nelson_siegel`` mapping
        configures the fitter.
        """
        if not data:
            return cls()

        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown bootstrap settings: {sorted(unknown)}")

        kwargs = dict(data)
        if "method" in kwargs:
            kwargs["method"] = InterpolationMethod.coerce(kwargs["method"])

        ns = kwargs.get("nelson_siegel")
        if isinstance(ns, Mapping):
            ns_known = {f.name for f in fields(NelsonSiegelConfig)}
            ns_unknown = set(ns) - ns_known
            if ns_unknown:
                raise ValueError(f"Unknown Nelson-Siegel settings: {sorted(ns_unknown)}")
            ns = dict(ns)
            if isinstance(ns.get("solver"), str):
                ns["solver"] = FitSolver.from_string(ns["solver"])
            kwargs["nelson_siegel"] = NelsonSiegelConfig(**ns)

        return cls(**kwargs)


__all__ = [
    "InterpolationMethod",
    "FitSolver",
    "NelsonSiegelConfig",
    "BootstrapConventions",
]
