"""
Export utilities for composed reports.
"""
import pandas as pd
from typing import Optional
from datetime import date, datetime
from io import BytesIO

from mis_report.config import EXPORT_COLUMNS, FORMAT_DATE
from mis_report.errors import ValidationError
from mis_report.reports.composer import Report

NOTHING_TO_EXPORT = "No data to export. Please generate a report first."


def build_export_frame(records: pd.DataFrame) -> pd.DataFrame:
    """
    Shape report records into the spreadsheet layout.

    Columns follow EXPORT_COLUMNS; company names are joined with ", ".
    """
    df = records.copy()

    for col in EXPORT_COLUMNS:
        if col not in df.columns:
            df[col] = None

    df["date"] = pd.to_datetime(df["date"], errors="coerce").dt.strftime(FORMAT_DATE)
    df["company_names"] = df["company_names"].apply(
        lambda names: ", ".join(names) if isinstance(names, (list, tuple)) else (names or "")
    )

    export_df = df[list(EXPORT_COLUMNS)].rename(columns=EXPORT_COLUMNS)
    return export_df.reset_index(drop=True)


def _require_data(report: Optional[Report]) -> pd.DataFrame:
    if report is None or report.is_empty:
        raise ValidationError(NOTHING_TO_EXPORT)
    return build_export_frame(report.records)


def report_filename(extension: str = "xlsx", on: Optional[date] = None) -> str:
    """MIS_Report_<YYYY-MM-DD>.<ext>, dated today unless `on` is given."""
    on = on or datetime.now().date()
    return f"MIS_Report_{on.isoformat()}.{extension}"


def export_report_excel(report: Optional[Report], filename: Optional[str] = None,
                        sheet_name: str = "Report") -> tuple:
    """
    Export report records to Excel bytes.

    Returns: (excel_bytes, filename)
    """
    export_df = _require_data(report)

    if filename is None:
        filename = report_filename("xlsx")

    buffer = BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        export_df.to_excel(writer, sheet_name=sheet_name, index=False)

    return buffer.getvalue(), filename


def export_report_csv(report: Optional[Report], filename: Optional[str] = None) -> tuple:
    """
    Export report records to CSV bytes.

    Returns: (csv_bytes, filename)
    """
    export_df = _require_data(report)

    if filename is None:
        filename = report_filename("csv")

    csv_bytes = export_df.to_csv(index=False).encode("utf-8")

    return csv_bytes, filename
