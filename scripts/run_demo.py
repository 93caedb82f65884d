#!/usr/bin/env python
"""
Sovereign Yield Curve Bootstrapping Demo

This script demonstrates the bootstrapping workflow:
1. Load a sparse yield grid (CSV or built-in sample)
2. Resolve the canonical maturity list
3. Fill missing maturities with the selected method
4. Print the table with interpolated cells flagged
5. Optionally export CSV files

Usage:
    python run_demo.py [--input CSV] [--method METHOD] [--output-dir OUTPUT_DIR]
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sovcurves import (
    BatchBootstrapper,
    BootstrapConventions,
    InterpolationMethod,
    YieldCurve,
    resolve_maturities,
)
from sovcurves.reporting import (
    YieldTableFormatter,
    bootstrap_summary,
    export_to_csv,
    interpolation_mask,
    read_yield_csv,
    yield_table,
)


def sample_curves() -> List[YieldCurve]:
    """Sparse sample grid with gaps typical of scraped sovereign data."""
    return [
        YieldCurve("Germany", {"1M": 1.92, "3M": 1.95, "1Y": 2.01, "2Y": 2.05,
                               "5Y": 2.24, "10Y": 2.63, "30Y": 3.05}, slug="germany"),
        YieldCurve("Switzerland", {"1M": -0.05, "6M": -0.02, "2Y": 0.01,
                                   "10Y": 0.27, "20Y": 0.39}, slug="switzerland"),
        YieldCurve("Japan", {"3M": 0.45, "1Y": 0.62, "5Y": 1.08, "7Y": 1.27,
                             "10Y": 1.51, "30Y": 2.87}, slug="japan"),
        YieldCurve("United States", {"1M": 4.21, "3M": 4.05, "6M": 3.94, "2Y": 3.58,
                                     "3Y": 3.55, "10Y": 4.06, "30Y": 4.68}, slug="united-states"),
        YieldCurve("Kenya", {"10Y": 13.4}, slug="kenya"),
        YieldCurve("Ukraine", {}, slug="ukraine", error="No data"),
    ]


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Sovereign Yield Curve Bootstrapping Demo")
    parser.add_argument(
        "--input",
        type=str,
        default=None,
        help="Wide CSV with a 'country' column and one column per maturity"
    )
    parser.add_argument(
        "--method",
        type=str,
        default=None,
        choices=[m.value for m in InterpolationMethod],
        help="Interpolation method (default: from conventions, cubic-spline)"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="JSON file with bootstrap conventions"
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Output directory for CSV exports"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging"
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    conventions = BootstrapConventions()
    if args.config:
        with open(args.config) as fh:
            conventions = BootstrapConventions.from_dict(json.load(fh))

    curves = read_yield_csv(args.input) if args.input else sample_curves()
    maturities = resolve_maturities(curves)
    batch = BatchBootstrapper(args.method, conventions)

    print("=" * 60)
    print("SOVEREIGN YIELD CURVE BOOTSTRAP")
    print(f"Method: {batch.method.value}")
    print(f"Curves: {len(curves)}  Maturities: {', '.join(maturities)}")
    print("=" * 60)

    results = batch.run(curves, maturities)
    filled = [r.curve for r in results]

    table = yield_table(filled, maturities)
    mask = interpolation_mask(curves, filled, maturities)
    summary = bootstrap_summary(results)

    formatter = YieldTableFormatter()
    print(formatter.format_report(table, mask, summary))

    if args.output_dir:
        files = export_to_csv(table, args.output_dir, mask=mask, summary=summary)
        print(f"\nExported {len(files)} CSV files to {args.output_dir}")
        for f in files:
            print(f"  - {f}")


if __name__ == "__main__":
    main()
