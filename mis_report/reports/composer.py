"""
Report composition: date-range filtering and the structured report sections.
"""
import pandas as pd
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional, Union

from mis_report.config import AppConfig, config
from mis_report.metrics.operations import (
    add_connection_rate,
    compute_totals,
    connection_rate,
    distinct_count,
    group_by_date,
    group_by_employee,
    group_by_team,
    mail_conversion_rate,
    top_by_calls,
)

DateLike = Union[str, date, datetime, pd.Timestamp]

NO_DATA_MESSAGE = "No data available for the selected period."
DATA_QUALITY_NOTE = "Ensure consistent daily data entry for better insights."


@dataclass(frozen=True)
class ExecutiveSummary:
    """Headline numbers for a report period."""
    totals: Dict[str, int]
    connection_rate: float
    mail_conversion_rate: float
    employee_count: int
    team_count: int
    period_start: date
    period_end: date


@dataclass(frozen=True)
class Report:
    """
    Composed report for one date range.

    `records` is the filtered record set the report was built from; it is
    what gets exported and is never modified after composition.
    """
    report_type: str
    period_start: date
    period_end: date
    records: pd.DataFrame
    summary: Optional[ExecutiveSummary] = None
    employee_breakdown: pd.DataFrame = field(default_factory=pd.DataFrame)
    team_breakdown: pd.DataFrame = field(default_factory=pd.DataFrame)
    daily: pd.DataFrame = field(default_factory=pd.DataFrame)
    top_employees: List[str] = field(default_factory=list)
    top_teams: List[str] = field(default_factory=list)
    insights: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    generated_at: datetime = field(default_factory=datetime.now)

    @property
    def is_empty(self) -> bool:
        return len(self.records) == 0

    @property
    def record_count(self) -> int:
        return len(self.records)


# =============================================================================
# FILTERING
# =============================================================================

def period_bounds(start_date: DateLike, end_date: DateLike) -> tuple:
    """
    Inclusive timestamp bounds for a period.

    The start is taken as given (midnight for a plain date); the end is
    pushed to 23:59:59.999 so the whole end day is included.
    """
    start = pd.Timestamp(start_date)
    end = pd.Timestamp(end_date).normalize() + pd.Timedelta(days=1) - pd.Timedelta(milliseconds=1)
    if start.tzinfo is not None:
        start = start.tz_convert(None)
    if end.tzinfo is not None:
        end = end.tz_convert(None)
    return start, end


def filter_by_date_range(df: pd.DataFrame, start_date: DateLike, end_date: DateLike) -> pd.DataFrame:
    """Records whose `date` lies within [start, end-of-day(end)]."""
    if len(df) == 0 or "date" not in df.columns:
        return df.copy()
    start, end = period_bounds(start_date, end_date)
    mask = (df["date"] >= start) & (df["date"] <= end)
    return df[mask].reset_index(drop=True)


# =============================================================================
# SECTIONS
# =============================================================================

def build_insights(summary: ExecutiveSummary,
                   top_employees: List[str],
                   top_teams: List[str]) -> List[str]:
    """Key insight lines for the report."""
    totals = summary.totals
    return [
        f"Connection Rate: {summary.connection_rate:.1f}% fresh call connection rate achieved",
        f"Mail Conversion: {totals['jd_received']} JDs received from "
        f"{totals['invite_mails_sent']} invitation mails sent",
        f"Top Employees: {', '.join(top_employees)}",
        f"Top Teams: {', '.join(top_teams)}",
    ]


def build_recommendations(totals: Dict[str, int],
                          app_config: AppConfig = config) -> List[str]:
    """
    Threshold-based advice.

    Thresholds apply to the unrounded rates: 29.96% displays as 30.0% but
    still gets the warning. A rate exactly at the threshold is affirming.
    """
    conn_rate = connection_rate(totals, decimals=None)
    mail_rate = mail_conversion_rate(totals, decimals=None)
    recommendations = []

    if conn_rate < app_config.connection_rate_threshold:
        recommendations.append(
            f"Connection Rate: Low connection rate ({conn_rate:.1f}%). "
            "Consider optimizing call timing and scripts."
        )
    else:
        recommendations.append(
            f"Connection Rate: Good connection rate ({conn_rate:.1f}%). "
            "Maintain current strategies."
        )

    if mail_rate < app_config.mail_conversion_threshold:
        recommendations.append(
            f"Mail Conversion: Low mail conversion rate ({mail_rate:.1f}%). "
            "Review email templates and targeting."
        )
    else:
        recommendations.append(
            f"Mail Conversion: Good mail conversion rate ({mail_rate:.1f}%). "
            "Continue current approach."
        )

    recommendations.append(f"Data Quality: {DATA_QUALITY_NOTE}")
    return recommendations


def compose_report(df: pd.DataFrame,
                   start_date: DateLike,
                   end_date: DateLike,
                   report_type: str = "daily",
                   app_config: AppConfig = config) -> Report:
    """
    Compose a report for records within [start_date, end_date].

    An empty filtered set yields the no-data variant (summary None, empty
    sections) rather than raising.
    """
    period_start = pd.Timestamp(start_date).date()
    period_end = pd.Timestamp(end_date).date()
    records = filter_by_date_range(df, start_date, end_date).copy()

    if len(records) == 0:
        return Report(
            report_type=report_type,
            period_start=period_start,
            period_end=period_end,
            records=records,
        )

    totals = compute_totals(records)
    conn_rate = connection_rate(totals)
    mail_rate = mail_conversion_rate(totals)

    summary = ExecutiveSummary(
        totals=totals,
        connection_rate=conn_rate,
        mail_conversion_rate=mail_rate,
        employee_count=distinct_count(records, "employee_name"),
        team_count=distinct_count(records, "team"),
        period_start=period_start,
        period_end=period_end,
    )

    employee_breakdown = add_connection_rate(group_by_employee(records))
    team_breakdown = add_connection_rate(group_by_team(records))

    top_employees = top_by_calls(employee_breakdown, "employee_name", app_config.top_employee_count)
    top_teams = top_by_calls(team_breakdown, "team", app_config.top_team_count)

    return Report(
        report_type=report_type,
        period_start=period_start,
        period_end=period_end,
        records=records,
        summary=summary,
        employee_breakdown=employee_breakdown,
        team_breakdown=team_breakdown,
        daily=group_by_date(records),
        top_employees=top_employees,
        top_teams=top_teams,
        insights=build_insights(summary, top_employees, top_teams),
        recommendations=build_recommendations(totals, app_config),
    )
