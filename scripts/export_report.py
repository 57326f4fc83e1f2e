#!/usr/bin/env python
"""
Compose a report for a date range and write it as an Excel workbook.

Usage:
    python scripts/export_report.py --start 2024-01-01 --end 2024-01-31
    python scripts/export_report.py --start 2024-01-01 --end 2024-01-31 --out reports/
"""
import argparse
import logging
import sys
from pathlib import Path

# Add repository root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pandas as pd
from mis_report.config import config, REPORT_TYPES
from mis_report.data.loader import build_store, load_report_batch
from mis_report.errors import StoreError, ValidationError
from mis_report.exports import export_report_excel
from mis_report.logging_config import configure_logging
from mis_report.reports.composer import compose_report

logger = logging.getLogger("export_report")


def main():
    parser = argparse.ArgumentParser(description="Export an MIS report to Excel")
    parser.add_argument("--start", required=True, help="Start date (YYYY-MM-DD)")
    parser.add_argument("--end", required=True, help="End date (YYYY-MM-DD), inclusive")
    parser.add_argument("--type", dest="report_type", choices=list(REPORT_TYPES), default="daily")
    parser.add_argument("--out", type=Path, default=Path("."), help="Output directory")
    args = parser.parse_args()

    configure_logging()

    try:
        start = pd.Timestamp(args.start).date()
        end = pd.Timestamp(args.end).date()
    except ValueError as exc:
        parser.error(f"Invalid date: {exc}")

    try:
        df = load_report_batch(build_store(config))
    except StoreError as exc:
        logger.error("%s", exc)
        sys.exit(1)

    report = compose_report(df, start, end, args.report_type)

    print("=" * 60)
    print(f"{REPORT_TYPES[args.report_type]}: {start} to {end}")
    print("=" * 60)

    if report.is_empty:
        print("No data available for the selected period.")
        sys.exit(1)

    summary = report.summary
    print(f"Records:          {report.record_count:,}")
    print(f"Employees:        {summary.employee_count}")
    print(f"Teams:            {summary.team_count}")
    print(f"Total calls:      {summary.totals['calls_made']:,}")
    print(f"Connection rate:  {summary.connection_rate:.1f}%")
    print(f"Mail conversion:  {summary.mail_conversion_rate:.1f}%")
    print()
    for line in report.recommendations:
        print(f"  - {line}")

    try:
        excel_bytes, filename = export_report_excel(report)
    except ValidationError as exc:
        logger.error("%s", exc)
        sys.exit(1)

    args.out.mkdir(parents=True, exist_ok=True)
    out_path = args.out / filename
    out_path.write_bytes(excel_bytes)
    print(f"\nWrote {out_path}")


if __name__ == "__main__":
    main()
