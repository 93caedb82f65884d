"""
SovCurves: Sovereign Yield Curve Bootstrapping Library

A small library for:
- Parsing maturity labels and resolving the maturity set of a data batch
- Filling missing points of sparse sovereign yield curves with linear,
  natural cubic spline or Nelson-Siegel estimation
- Tabulating bootstrapped curves for display and CSV export

Scope: estimation only; fetching and rendering rates live elsewhere.
"""

__version__ = "0.1.0"

# Core modules
from .conventions import (
    InterpolationMethod,
    FitSolver,
    NelsonSiegelConfig,
    BootstrapConventions,
)
from .maturities import (
    DEFAULT_MATURITIES,
    MaturityUtils,
    maturity_to_years,
    sort_maturities,
    filter_maturities,
    resolve_maturities,
)

# Curves
from .curves import (
    RatePoint,
    YieldCurve,
    LinearInterpolator,
    CubicSplineInterpolator,
    NelsonSiegel,
    NelsonSiegelParameters,
    BootstrapStatus,
    BootstrapResult,
    CurveBootstrapper,
    BatchBootstrapper,
    bootstrap_yield_curve,
    bootstrap_all_yield_curves,
)

# Reporting
from .reporting import (
    YieldTableFormatter,
    yield_table,
    interpolation_mask,
    bootstrap_summary,
    export_to_csv,
)

__all__ = [
    # Version
    "__version__",
    # Conventions
    "InterpolationMethod",
    "FitSolver",
    "NelsonSiegelConfig",
    "BootstrapConventions",
    # Maturities
    "DEFAULT_MATURITIES",
    "MaturityUtils",
    "maturity_to_years",
    "sort_maturities",
    "filter_maturities",
    "resolve_maturities",
    # Curves
    "RatePoint",
    "YieldCurve",
    "LinearInterpolator",
    "CubicSplineInterpolator",
    "NelsonSiegel",
    "NelsonSiegelParameters",
    "BootstrapStatus",
    "BootstrapResult",
    "CurveBootstrapper",
    "BatchBootstrapper",
    "bootstrap_yield_curve",
    "bootstrap_all_yield_curves",
    # Reporting
    "YieldTableFormatter",
    "yield_table",
    "interpolation_mask",
    "bootstrap_summary",
    "export_to_csv",
]
