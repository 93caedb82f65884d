"""
Maturity label utilities for sovereign yield grids.

Provides:
- Maturity label parsing ("3M", "10Y", "1W") to year fractions
- Chronological sorting and filtering of label sets
- Resolution of the canonical maturity list shared by a batch of curves
"""

from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence, Tuple
import math
import re

if TYPE_CHECKING:
    from .curves.curve import YieldCurve


# Shown when neither the rate provider nor the data report any maturities
DEFAULT_MATURITIES: Tuple[str, ...] = (
    "1M", "3M", "6M", "1Y", "2Y", "3Y", "5Y", "7Y", "10Y", "20Y", "30Y"
)

MAX_MATURITY_YEARS = 30.0


class MaturityUtils:
    """Utility class for maturity label handling."""

    # Maturity regex pattern: number + unit (M/Y/W)
    MATURITY_PATTERN = re.compile(r'^(\d+)([MYW])$')

    @staticmethod
    def parse_maturity(maturity: str) -> Tuple[int, str]:
        """
        Parse a maturity label into (amount, unit).

        Args:
            maturity: Label like "1W", "3M", "10Y" (case-insensitive)

        Returns:
            Tuple of (amount, unit) where unit is M/Y/W

        Raises:
            ValueError: If the label format is invalid
        """
        if not isinstance(maturity, str):
            raise ValueError(f"Invalid maturity label: {maturity!r}")

        match = MaturityUtils.MATURITY_PATTERN.match(maturity.upper().strip())
        if not match:
            raise ValueError(
                f"Invalid maturity format: {maturity}. Expected format like '3M', '10Y', '1W'"
            )

        return int(match.group(1)), match.group(2)

    @staticmethod
    def to_years(maturity: str) -> float:
        """
        Convert a maturity label to a year fraction.

        Months count as N/12, weeks as N/52 and years as-is.

        Returns:
            Year fraction, or NaN when the label cannot be parsed
        """
        try:
            amount, unit = MaturityUtils.parse_maturity(maturity)
        except ValueError:
            return math.nan

        if unit == 'M':
            return amount / 12.0
        elif unit == 'W':
            return amount / 52.0
        return float(amount)

    @staticmethod
    def sort_key(maturity: str) -> float:
        """Chronological sort key; unparseable labels sort last."""
        years = MaturityUtils.to_years(maturity)
        return math.inf if math.isnan(years) else years


def maturity_to_years(maturity: str) -> float:
    """Convert a maturity label to years (NaN if unparseable)."""
    return MaturityUtils.to_years(maturity)


def is_valid_maturity(maturity: str) -> bool:
    """True when the label parses to a year fraction."""
    return not math.isnan(MaturityUtils.to_years(maturity))


def sort_maturities(maturities: Iterable[str]) -> List[str]:
    """
    Sort maturity labels chronologically.

    Returns a new list; ties keep their input order and unparseable
    labels are moved to the end.
    """
    return sorted(maturities, key=MaturityUtils.sort_key)


def filter_maturities(
    maturities: Iterable[str],
    max_years: float = MAX_MATURITY_YEARS
) -> List[str]:
    """
    Keep parseable labels no longer than ``max_years``.

    Args:
        maturities: Candidate labels
        max_years: Longest maturity to keep (inclusive)

    Returns:
        Filtered labels in input order
    """
    kept = []
    for m in maturities:
        years = MaturityUtils.to_years(m)
        if not math.isnan(years) and years <= max_years:
            kept.append(m)
    return kept


def resolve_maturities(
    curves: Sequence["YieldCurve"],
    reported: Optional[Sequence[str]] = None,
    max_years: float = MAX_MATURITY_YEARS
) -> List[str]:
    """
    Build the canonical maturity list for a batch of curves.

    The list reported by the rate provider wins when non-empty; otherwise
    the union of maturities present in the curves' rate maps is used.
    Labels are deduplicated, capped at ``max_years`` and sorted
    chronologically.

    Args:
        curves: Curves fetched in the current cycle
        reported: Maturity list reported alongside the data (optional)
        max_years: Longest maturity to keep

    Returns:
        Ordered maturity labels (DEFAULT_MATURITIES if nothing usable)
    """
    if reported:
        candidates = list(reported)
    else:
        candidates = [m for curve in curves for m in curve.rates]

    # Deduplicate preserving first occurrence
    unique = list(dict.fromkeys(candidates))
    resolved = sort_maturities(filter_maturities(unique, max_years))

    if not resolved:
        return list(DEFAULT_MATURITIES)
    return resolved


__all__ = [
    "DEFAULT_MATURITIES",
    "MAX_MATURITY_YEARS",
    "MaturityUtils",
    "maturity_to_years",
    "is_valid_maturity",
    "sort_maturities",
    "filter_maturities",
    "resolve_maturities",
]
