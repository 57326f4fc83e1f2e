"""
Reusable UI components and report blocks.
"""
import streamlit as st
import pandas as pd
from typing import Optional, Dict, Any

from mis_report.metrics.operations import connection_rate
from mis_report.reports.composer import NO_DATA_MESSAGE, Report
from mis_report.ui.formatting import fmt_count, fmt_date, fmt_percent, format_breakdown_df


def kpi_strip(metrics: Dict[str, Any],
              format_map: Optional[Dict[str, str]] = None):
    """
    Render horizontal strip of KPI cards.

    Args:
        metrics: Dict of {label: value}
        format_map: Dict of {label: format_type} where format_type is
                    'count' or 'percent'
    """
    if format_map is None:
        format_map = {}

    cols = st.columns(len(metrics))

    formatters = {
        "count": fmt_count,
        "percent": fmt_percent,
    }

    for i, (label, value) in enumerate(metrics.items()):
        with cols[i]:
            formatter = formatters.get(format_map.get(label, "count"), str)
            st.metric(label=label, value=formatter(value))


def metric_cards(totals: Dict[str, int]):
    """The four dashboard KPIs."""
    kpi_strip(
        {
            "Total Calls": totals["calls_made"],
            "Fresh Calls": totals["fresh_calls"],
            "Connection Rate": connection_rate(totals),
            "JD Received": totals["jd_received"],
        },
        format_map={"Connection Rate": "percent"},
    )


def no_data_message(message: str = "No data available"):
    st.info(message)


# =============================================================================
# REPORT SECTIONS
# =============================================================================

def executive_summary(report: Report):
    """Executive summary block: KPI strip plus period / headcount line."""
    summary = report.summary
    st.subheader("Executive Summary")

    kpi_strip(
        {
            "Total Calls Made": summary.totals["calls_made"],
            "Fresh Calls": summary.totals["fresh_calls"],
            "Connection Rate": summary.connection_rate,
            "JD Received": summary.totals["jd_received"],
        },
        format_map={"Connection Rate": "percent"},
    )

    st.caption(
        f"**Period:** {fmt_date(summary.period_start)} to {fmt_date(summary.period_end)} | "
        f"**Employees:** {summary.employee_count} | "
        f"**Teams:** {summary.team_count}"
    )


def breakdown_tables(report: Report):
    """Employee-wise and team-wise performance tables side by side."""
    col1, col2 = st.columns(2)

    with col1:
        st.markdown("#### Employee-wise Performance")
        st.dataframe(
            format_breakdown_df(report.employee_breakdown, "employee_name", "Employee"),
            use_container_width=True,
            hide_index=True,
        )

    with col2:
        st.markdown("#### Team-wise Performance")
        st.dataframe(
            format_breakdown_df(report.team_breakdown, "team", "Team"),
            use_container_width=True,
            hide_index=True,
        )


def _bullet_list(title: str, lines):
    st.markdown(f"#### {title}")
    for line in lines:
        label, _, text = line.partition(": ")
        st.markdown(f"- **{label}:** {text}" if text else f"- {line}")


def render_report(report: Report):
    """Render all report sections, or the no-data variant."""
    if report.is_empty:
        no_data_message(NO_DATA_MESSAGE)
        return

    executive_summary(report)
    st.markdown("---")
    breakdown_tables(report)
    st.markdown("---")

    col1, col2 = st.columns(2)
    with col1:
        _bullet_list("Key Insights & Observations", report.insights)
    with col2:
        _bullet_list("Actionable Recommendations", report.recommendations)


def records_preview(records: pd.DataFrame):
    """Raw filtered records behind the report."""
    with st.expander(f"Records ({len(records):,})", expanded=False):
        st.dataframe(records.drop(columns=["id"], errors="ignore"), use_container_width=True, hide_index=True)
