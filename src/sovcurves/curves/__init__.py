"""
Curves package - sovereign yield curve bootstrapping.

Provides:
- YieldCurve: Sparse rate grid for one entity
- LinearInterpolator / CubicSplineInterpolator: Interpolating estimators
- NelsonSiegel: Parametric curve fitting
- CurveBootstrapper / BatchBootstrapper: Fill missing maturities
"""

from .curve import RatePoint, YieldCurve
from .interpolation import (
    Interpolator,
    LinearInterpolator,
    CubicSplineInterpolator,
    create_interpolator,
)
from .nelson_siegel import (
    NelsonSiegel,
    NelsonSiegelParameters,
    nelson_siegel_yield,
    fit_nelson_siegel,
)
from .bootstrap import (
    BootstrapStatus,
    BootstrapResult,
    CurveBootstrapper,
    BatchBootstrapper,
    bootstrap_yield_curve,
    bootstrap_all_yield_curves,
    round_half_up,
)

__all__ = [
    "RatePoint",
    "YieldCurve",
    "Interpolator",
    "LinearInterpolator",
    "CubicSplineInterpolator",
    "create_interpolator",
    "NelsonSiegel",
    "NelsonSiegelParameters",
    "nelson_siegel_yield",
    "fit_nelson_siegel",
    "BootstrapStatus",
    "BootstrapResult",
    "CurveBootstrapper",
    "BatchBootstrapper",
    "bootstrap_yield_curve",
    "bootstrap_all_yield_curves",
    "round_half_up",
]
