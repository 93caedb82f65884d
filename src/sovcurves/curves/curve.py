"""
Sovereign yield curve representation.

A YieldCurve holds one entity's rate grid: a mapping from maturity labels
to an optional yield in percent. ``None`` marks a maturity that was not
observed. Curves are immutable; every transformation returns a new curve.
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional
import math

from ..maturities import MaturityUtils


@dataclass(frozen=True)
class RatePoint:
    """A known observation on a curve."""
    maturity: str
    years: float  # Year fraction
    rate: float  # Percent, may be negative


def _is_observed(rate: Any) -> bool:
    """True for a finite numeric rate."""
    if rate is None or isinstance(rate, bool):
        return False
    try:
        return math.isfinite(rate)
    except TypeError:
        return False


@dataclass(frozen=True)
class YieldCurve:
    """
    Yield curve for a single entity (country).

    Attributes:
        country: Display name of the entity
        slug: Provider identifier for the entity
        rates: Read-only mapping maturity label -> yield (percent) or None
        last_updated: Provider timestamp (optional)
        error: Provider error message when the fetch failed (optional)

    The rate map is copied on construction so that the curve never aliases
    a caller's dictionary.
    """
    country: str
    rates: Mapping[str, Optional[float]] = field(default_factory=dict)
    slug: str = ""
    last_updated: Optional[str] = None
    error: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "rates", MappingProxyType(dict(self.rates)))

    def rate(self, maturity: str) -> Optional[float]:
        """Rate at a maturity, None if missing or unobserved."""
        value = self.rates.get(maturity)
        return value if _is_observed(value) else None

    def is_missing(self, maturity: str) -> bool:
        """True when the maturity has no rate (absent key or None)."""
        return self.rates.get(maturity) is None

    def known_points(self, maturities: Iterable[str]) -> List[RatePoint]:
        """
        Observed points for the given maturities, in maturity-list order.

        Maturities without a finite rate or with an unparseable label are
        skipped.
        """
        points = []
        for m in maturities:
            rate = self.rate(m)
            if rate is None:
                continue
            years = MaturityUtils.to_years(m)
            if math.isnan(years):
                continue
            points.append(RatePoint(maturity=m, years=years, rate=rate))
        return points

    def with_rates(self, updates: Mapping[str, Optional[float]]) -> "YieldCurve":
        """Return a new curve with ``updates`` merged into the rate map."""
        merged = dict(self.rates)
        merged.update(updates)
        return replace(self, rates=merged)

    def interpolated_maturities(self, original: "YieldCurve") -> List[str]:
        """
        Maturities filled in this curve that were missing in ``original``.

        Used by the table view to flag interpolated cells.
        """
        return [
            m for m, v in self.rates.items()
            if v is not None and original.is_missing(m)
        ]

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the rate provider's record layout."""
        result = {
            "country": self.country,
            "slug": self.slug,
            "rates": dict(self.rates),
        }
        if self.last_updated is not None:
            result["lastUpdated"] = self.last_updated
        if self.error is not None:
            result["error"] = self.error
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "YieldCurve":
        """
        Create a curve from a rate provider record.

        Non-numeric rate values are treated as unobserved.
        """
        raw = data.get("rates") or {}
        rates = {}
        for m, v in raw.items():
            rates[m] = float(v) if _is_observed(v) else None
        return cls(
            country=data.get("country", ""),
            rates=rates,
            slug=data.get("slug", ""),
            last_updated=data.get("lastUpdated", data.get("last_updated")),
            error=data.get("error"),
        )

    def __repr__(self) -> str:
        observed = sum(1 for v in self.rates.values() if _is_observed(v))
        return (f"YieldCurve(country={self.country!r}, "
                f"observed={observed}/{len(self.rates)})")


__all__ = [
    "RatePoint",
    "YieldCurve",
]
