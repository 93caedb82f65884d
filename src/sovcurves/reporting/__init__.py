"""
Reporting module for bootstrapped yield curves.

Provides:
- Yield tables and interpolation masks (pandas)
- Console formatting
- CSV import/export
"""

from .yield_report import (
    yield_table,
    interpolation_mask,
    bootstrap_summary,
    curves_from_frame,
    read_yield_csv,
    YieldTableFormatter,
    export_to_csv,
)


__all__ = [
    "yield_table",
    "interpolation_mask",
    "bootstrap_summary",
    "curves_from_frame",
    "read_yield_csv",
    "YieldTableFormatter",
    "export_to_csv",
]
