#!/usr/bin/env python3
"""
derive_history.py: Backfill derived measures over an archived station export.

Reads a CSV or Parquet export of station records (tempf, humidity,
windspeedmph, solarradiation, ...), applies the same normalization and
formulas the exporter uses for live uploads, and writes the records back
with the derived columns appended (dewpoint, heatindex, windchill, ...).

Usage:
    python -m ambient_exporter.cli.derive_history --input data/archive.parquet --elevation 450
        [--output data/archive.derived.parquet] [--dry-run]
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

import numpy as np
import pandas as pd

from ambient_exporter.config import DERIVED_COLUMNS, HISTORY_FILE_TYPES
from ambient_exporter.core.derived_measures import derive_measures_frame
from ambient_exporter.core.report_parser import normalize_report_frame
from ambient_exporter.utils.log_util import app_logger

logger = app_logger(__name__)


def file_type(path: Path) -> str:
    """
    Return 'csv' or 'parquet' for path.

    :raises ValueError: For any other suffix
    """
    suffix = path.suffix.lower().lstrip(".")
    if suffix not in HISTORY_FILE_TYPES:
        raise ValueError(f"Unsupported file type: {path.suffix or '<none>'}")
    return suffix


def read_history(path: Path) -> pd.DataFrame:
    """Load an archive export."""
    logger.info(f"Load archive: {path}")
    if file_type(path) == "parquet":
        return pd.read_parquet(path)
    return pd.read_csv(path)


def write_history(df: pd.DataFrame, path: Path) -> None:
    """Save an archive export in the format implied by the suffix."""
    if file_type(path) == "parquet":
        df.to_parquet(path, index=False)
    else:
        df.to_csv(path, index=False)
    logger.info(f"Archive saved to: {path}")


def default_output(input_path: Path) -> Path:
    """archive.parquet -> archive.derived.parquet"""
    return input_path.with_name(f"{input_path.stem}.derived{input_path.suffix}")


def add_derived_columns(df: pd.DataFrame, elevation_ft: float) -> pd.DataFrame:
    """
    Return df with the derived-measure columns appended.

    Existing derived columns are replaced. Station columns are left in their
    original units.

    :param df: Archive records keyed by station field names
    :param elevation_ft: Station elevation in feet
    :return: New DataFrame
    """
    derived = derive_measures_frame(normalize_report_frame(df), elevation_ft)
    columns = list(DERIVED_COLUMNS.values())
    return pd.concat([df.drop(columns=columns, errors="ignore"), derived[columns]], axis=1)


def log_summary(df: pd.DataFrame) -> None:
    if df.empty:
        logger.info("Archive: <empty>")
        return
    logger.info(f"Total records: {len(df)}")
    for column in DERIVED_COLUMNS.values():
        s = df[column]
        logger.info(
            f"{column}: min={s.min():.2f} mean={s.mean():.2f} max={s.max():.2f} "
            f"(non-finite: {int((~np.isfinite(s)).sum())})"
        )


def run(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Append derived measures to an archived station export."
    )
    parser.add_argument("--input", type=Path, required=True, help="CSV or Parquet archive")
    parser.add_argument(
        "--elevation", type=float, required=True, help="station elevation in feet"
    )
    parser.add_argument("--output", type=Path, help="output path (default: <input>.derived)")
    parser.add_argument(
        "--dry-run", action="store_true", help="Log a summary without writing output"
    )
    args = parser.parse_args(argv)

    if args.elevation == 0:
        logger.error("elevation is required")
        return 1
    if not args.input.exists():
        logger.error(f"File not found: {args.input}")
        return 1

    output = args.output or default_output(args.input)
    try:
        file_type(output)
        df = read_history(args.input)
    except ValueError as e:
        logger.error(str(e))
        return 1

    enriched = add_derived_columns(df, args.elevation)
    log_summary(enriched)

    if args.dry_run:
        logger.info("Dry-run: NOT saving derived archive.")
        return 0

    write_history(enriched, output)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Console entry point: run() with unhandled errors logged, exit status 1."""
    try:
        return run(argv)
    except Exception as e:
        logger.exception(f"❌ Unhandled exception in derive_history: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
