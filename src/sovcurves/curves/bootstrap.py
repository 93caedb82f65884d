"""
Yield curve bootstrapping engine.

Fills missing maturities of a sparse sovereign yield curve:
1. Collect known (year fraction, yield) points
2. Select missing maturities inside the known range
3. Estimate them with the chosen interpolation method
4. Merge rounded estimates into a new curve, leaving known values intact

Supports:
- Linear interpolation
- Natural cubic spline
- Nelson-Siegel fit
"""

from dataclasses import dataclass, field
from enum import Enum
import logging
import math
from typing import Dict, List, Optional, Sequence, Union

import numpy as np

from ..conventions import BootstrapConventions, InterpolationMethod
from ..maturities import MaturityUtils
from .curve import YieldCurve
from .interpolation import create_interpolator
from .nelson_siegel import NelsonSiegel, NelsonSiegelParameters

logger = logging.getLogger(__name__)

MethodLike = Union[InterpolationMethod, str]


def round_half_up(value: float, decimals: int) -> float:
    """Round to ``decimals`` places with exact ties rounded up."""
    scale = 10 ** decimals
    return math.floor(value * scale + 0.5) / scale


class BootstrapStatus(Enum):
    """Outcome of bootstrapping a single curve."""
    BOOTSTRAPPED = "bootstrapped"
    NOTHING_TO_FILL = "nothing_to_fill"
    INSUFFICIENT_DATA = "insufficient_data"
    FAILED = "failed"


@dataclass
class BootstrapResult:
    """Result of curve bootstrap."""
    curve: YieldCurve
    status: BootstrapStatus
    method: InterpolationMethod
    known_count: int = 0
    filled: List[str] = field(default_factory=list)
    message: str = ""
    nelson_siegel: Optional[NelsonSiegelParameters] = None

    @property
    def success(self) -> bool:
        return self.status in (BootstrapStatus.BOOTSTRAPPED, BootstrapStatus.NOTHING_TO_FILL)


class CurveBootstrapper:
    """
    Bootstrap missing points of sovereign yield curves.

    The bootstrapper:
    1. Extracts known points in maturity order and sorts them by year fraction
    2. Targets missing maturities between the shortest and longest known point
    3. Estimates targets with the selected method and rounds them

    No extrapolation is performed for any method; maturities outside the
    known range stay empty.

    Attributes:
        method: Interpolation method
        conventions: Rounding, minimum data and Nelson-Siegel settings
    """

    def __init__(
        self,
        method: Optional[MethodLike] = None,
        conventions: Optional[BootstrapConventions] = None
    ):
        self.conventions = conventions or BootstrapConventions()
        self.method = (
            InterpolationMethod.coerce(method) if method is not None
            else self.conventions.method
        )

    def run(self, curve: YieldCurve, maturities: Sequence[str]) -> BootstrapResult:
        """
        Bootstrap a curve and report what happened.

        Args:
            curve: Sparse yield curve
            maturities: Canonical ordered maturity labels

        Returns:
            BootstrapResult with the filled curve and diagnostics
        """
        known = curve.known_points(maturities)

        if len(known) < self.conventions.min_known_points:
            logger.debug(
                "Skipping %s: %d known points", curve.country, len(known)
            )
            return BootstrapResult(
                curve=curve,
                status=BootstrapStatus.INSUFFICIENT_DATA,
                method=self.method,
                known_count=len(known),
                message=f"Need at least {self.conventions.min_known_points} known points"
            )

        # Stable sort by year fraction
        known.sort(key=lambda p: p.years)
        known_x = [p.years for p in known]
        known_y = [p.rate for p in known]
        min_years, max_years = known_x[0], known_x[-1]

        targets = []
        for m in maturities:
            if not curve.is_missing(m):
                continue
            years = MaturityUtils.to_years(m)
            if not math.isnan(years) and min_years <= years <= max_years:
                targets.append((m, years))

        if not targets:
            return BootstrapResult(
                curve=curve,
                status=BootstrapStatus.NOTHING_TO_FILL,
                method=self.method,
                known_count=len(known),
                message="No missing maturities inside the known range"
            )

        estimator = create_interpolator(self.method, self.conventions.nelson_siegel)
        try:
            with np.errstate(all="ignore"):
                estimator.fit(known_x, known_y)
                estimates = estimator.evaluate([years for _, years in targets])
        except (ArithmeticError, ValueError) as e:
            logger.warning(
                "Bootstrap failed for %s (%s): %s", curve.country, self.method.value, e
            )
            return BootstrapResult(
                curve=curve,
                status=BootstrapStatus.FAILED,
                method=self.method,
                known_count=len(known),
                message=f"Estimation failed: {e}"
            )

        updates: Dict[str, float] = {}
        for (maturity, _), value in zip(targets, estimates):
            if np.isfinite(value):
                updates[maturity] = round_half_up(float(value), self.conventions.decimals)
            else:
                logger.debug("Dropping non-finite estimate for %s %s", curve.country, maturity)

        ns_params = estimator.params if isinstance(estimator, NelsonSiegel) else None

        logger.debug(
            "Bootstrapped %s with %s: %d known, %d filled",
            curve.country, self.method.value, len(known), len(updates)
        )

        return BootstrapResult(
            curve=curve.with_rates(updates),
            status=BootstrapStatus.BOOTSTRAPPED,
            method=self.method,
            known_count=len(known),
            filled=list(updates),
            message=f"Filled {len(updates)} of {len(targets)} missing maturities",
            nelson_siegel=ns_params
        )

    def bootstrap(self, curve: YieldCurve, maturities: Sequence[str]) -> YieldCurve:
        """Bootstrap a curve, returning only the filled curve."""
        return self.run(curve, maturities).curve


class BatchBootstrapper:
    """
    Bootstrap a collection of curves independently.

    Results keep input order; curves do not interact.
    """

    def __init__(
        self,
        method: Optional[MethodLike] = None,
        conventions: Optional[BootstrapConventions] = None
    ):
        self.bootstrapper = CurveBootstrapper(method, conventions)

    @property
    def method(self) -> InterpolationMethod:
        return self.bootstrapper.method

    def run(
        self,
        curves: Sequence[YieldCurve],
        maturities: Sequence[str]
    ) -> List[BootstrapResult]:
        """Bootstrap every curve and return per-curve results."""
        results = [self.bootstrapper.run(curve, maturities) for curve in curves]

        counts: Dict[BootstrapStatus, int] = {}
        for r in results:
            counts[r.status] = counts.get(r.status, 0) + 1
        logger.info(
            "Bootstrapped %d curves with %s: %s",
            len(results), self.method.value,
            ", ".join(f"{s.value}={c}" for s, c in counts.items()) or "none"
        )
        return results

    def bootstrap(
        self,
        curves: Sequence[YieldCurve],
        maturities: Sequence[str]
    ) -> List[YieldCurve]:
        """Bootstrap every curve, returning filled curves in input order."""
        return [r.curve for r in self.run(curves, maturities)]


def bootstrap_yield_curve(
    curve: YieldCurve,
    maturities: Sequence[str],
    method: MethodLike = InterpolationMethod.CUBIC_SPLINE,
    conventions: Optional[BootstrapConventions] = None
) -> YieldCurve:
    """
    Fill missing maturities of a single curve.

    Args:
        curve: Sparse yield curve
        maturities: Canonical ordered maturity labels
        method: "linear", "cubic-spline" or "nelson-siegel"
        conventions: Optional bootstrapping settings

    Returns:
        New curve with in-range gaps filled (input curve if < 2 known points)
    """
    return CurveBootstrapper(method, conventions).bootstrap(curve, maturities)


def bootstrap_all_yield_curves(
    curves: Sequence[YieldCurve],
    maturities: Sequence[str],
    method: MethodLike = InterpolationMethod.CUBIC_SPLINE,
    conventions: Optional[BootstrapConventions] = None
) -> List[YieldCurve]:
    """
    Fill missing maturities of every curve in a batch.

    Returns:
        Filled curves in input order
    """
    return BatchBootstrapper(method, conventions).bootstrap(curves, maturities)


__all__ = [
    "BootstrapStatus",
    "BootstrapResult",
    "CurveBootstrapper",
    "BatchBootstrapper",
    "bootstrap_yield_curve",
    "bootstrap_all_yield_curves",
    "round_half_up",
]
