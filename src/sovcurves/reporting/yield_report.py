"""
Yield table reporting.

Provides pandas tables and console output for bootstrapped curves:
- Yield table (entity x maturity)
- Interpolation mask flagging estimated cells
- Per-entity bootstrap summary
- CSV import/export of yield grids
"""

from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence, Union

import numpy as np
import pandas as pd

from ..curves.bootstrap import BootstrapResult
from ..curves.curve import YieldCurve


def yield_table(
    curves: Sequence[YieldCurve],
    maturities: Sequence[str]
) -> pd.DataFrame:
    """
    Tabulate curves as an entity x maturity DataFrame.

    Args:
        curves: Yield curves
        maturities: Column order

    Returns:
        DataFrame indexed by country with NaN for missing rates
    """
    rows = []
    for curve in curves:
        rows.append([
            np.nan if curve.rate(m) is None else curve.rate(m)
            for m in maturities
        ])

    df = pd.DataFrame(
        rows,
        index=pd.Index([c.country for c in curves], name="country"),
        columns=list(maturities),
        dtype=float
    )
    return df


def interpolation_mask(
    original: Sequence[YieldCurve],
    filled: Sequence[YieldCurve],
    maturities: Sequence[str]
) -> pd.DataFrame:
    """
    Flag cells that were estimated by bootstrapping.

    Args:
        original: Curves before bootstrapping
        filled: Curves after bootstrapping, same order
        maturities: Column order

    Returns:
        Boolean DataFrame, True where a value was filled in
    """
    if len(original) != len(filled):
        raise ValueError("Original and filled curve lists must have same length")

    rows = []
    for before, after in zip(original, filled):
        interpolated = set(after.interpolated_maturities(before))
        rows.append([m in interpolated for m in maturities])

    return pd.DataFrame(
        rows,
        index=pd.Index([c.country for c in filled], name="country"),
        columns=list(maturities),
        dtype=bool
    )


def bootstrap_summary(results: Sequence[BootstrapResult]) -> pd.DataFrame:
    """
    Summarize bootstrap outcomes per entity.

    Returns:
        DataFrame with country, status, method, known and filled counts
    """
    rows = []
    for r in results:
        rows.append({
            "country": r.curve.country,
            "status": r.status.value,
            "method": r.method.value,
            "known": r.known_count,
            "filled": len(r.filled),
            "message": r.message,
        })

    columns = ["country", "status", "method", "known", "filled", "message"]
    return pd.DataFrame(rows, columns=columns)


def curves_from_frame(df: pd.DataFrame, country_column: str = "country") -> List[YieldCurve]:
    """
    Build curves from a wide yield table.

    Every column other than ``country_column`` (and an optional ``slug``
    column) is read as a maturity; NaN cells become missing rates.
    """
    if country_column not in df.columns:
        raise ValueError(f"Missing '{country_column}' column")

    maturity_cols = [c for c in df.columns if c not in (country_column, "slug")]
    curves = []
    for _, row in df.iterrows():
        rates = {}
        for m in maturity_cols:
            value = pd.to_numeric(row[m], errors="coerce")
            rates[str(m)] = None if pd.isna(value) else float(value)
        curves.append(YieldCurve(
            country=str(row[country_column]),
            rates=rates,
            slug="" if "slug" not in df.columns or pd.isna(row["slug"]) else str(row["slug"]),
        ))
    return curves


def read_yield_csv(path: Union[str, Path], country_column: str = "country") -> List[YieldCurve]:
    """Load curves from a wide CSV (one row per entity)."""
    df = pd.read_csv(path, comment="#")
    return curves_from_frame(df, country_column)


class YieldTableFormatter:
    """
    Formats yield tables for console output.
    """

    def __init__(
        self,
        width: int = 100,
        precision: int = 2,
        missing: str = "-",
        marker: str = "*"
    ):
        """
        Initialize formatter.

        Args:
            width: Console width
            precision: Decimal precision for yields
            missing: Placeholder for missing rates
            marker: Suffix for interpolated values
        """
        self.width = width
        self.precision = precision
        self.missing = missing
        self.marker = marker

    def format_rate(self, value: float, interpolated: bool = False) -> str:
        """Format a single yield cell."""
        if pd.isna(value):
            return self.missing
        text = f"{value:.{self.precision}f}"
        return f"{text}{self.marker}" if interpolated else text

    def header(self, title: str) -> str:
        """Create a header line."""
        return f"\n{'='*self.width}\n{title.center(self.width)}\n{'='*self.width}\n"

    def format_table(
        self,
        table: pd.DataFrame,
        mask: Optional[pd.DataFrame] = None
    ) -> str:
        """Format a yield table, marking interpolated cells."""
        if mask is not None and mask.shape != table.shape:
            raise ValueError("Mask shape must match table shape")

        cells = table.astype(object)
        for i in range(table.shape[0]):
            for j in range(table.shape[1]):
                flagged = bool(mask.iat[i, j]) if mask is not None else False
                cells.iat[i, j] = self.format_rate(table.iat[i, j], flagged)

        with pd.option_context('display.max_rows', None, 'display.width', self.width):
            return cells.to_string()

    def format_report(
        self,
        table: pd.DataFrame,
        mask: Optional[pd.DataFrame] = None,
        summary: Optional[pd.DataFrame] = None,
        title: str = "Sovereign Yield Curves"
    ) -> str:
        """Format a full report: table, legend and optional summary."""
        lines = [self.header(title)]
        lines.append(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        lines.append("")
        lines.append(self.format_table(table, mask))

        if mask is not None:
            lines.append(f"\n{self.marker} interpolated, {self.missing} not available")

        if summary is not None and not summary.empty:
            lines.append(f"\n{'-'*self.width}\nBootstrap Summary\n{'-'*self.width}")
            lines.append(summary.to_string(index=False))

        return "\n".join(lines)


def export_to_csv(
    table: pd.DataFrame,
    output_dir: Union[str, Path],
    prefix: str = "yields",
    mask: Optional[pd.DataFrame] = None,
    summary: Optional[pd.DataFrame] = None
) -> List[str]:
    """
    Export yield table (and optional mask and summary) to CSV files.

    Returns:
        List of created file paths
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    created_files = []

    table_file = output_path / f"{prefix}.csv"
    table.to_csv(table_file)
    created_files.append(str(table_file))

    if mask is not None:
        mask_file = output_path / f"{prefix}_interpolated.csv"
        mask.to_csv(mask_file)
        created_files.append(str(mask_file))

    if summary is not None:
        summary_file = output_path / f"{prefix}_summary.csv"
        summary.to_csv(summary_file, index=False)
        created_files.append(str(summary_file))

    return created_files


__all__ = [
    "yield_table",
    "interpolation_mask",
    "bootstrap_summary",
    "curves_from_frame",
    "read_yield_csv",
    "YieldTableFormatter",
    "export_to_csv",
]
