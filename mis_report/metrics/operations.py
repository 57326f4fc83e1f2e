"""
Operations metrics pack.

Single source of truth for: totals, connection rate, mail conversion rate,
per-employee / per-team / per-day rollups.
"""
import pandas as pd
import numpy as np
from typing import Dict, List, Mapping, Optional

from mis_report.config import NUMERIC_FIELDS, UNKNOWN_KEY


SUMMARY_COLUMNS = ["calls", "fresh_calls", "connected"]


def compute_totals(df: pd.DataFrame) -> Dict[str, int]:
    """
    Sum every counter across all records.

    Returns dict keyed by counter name; all zero for an empty frame.
    """
    return {
        col: int(df[col].sum()) if col in df.columns else 0
        for col in NUMERIC_FIELDS
    }


def _safe_rate(numerator: float, denominator: float, decimals: Optional[int] = 1) -> float:
    """Percentage rounded to `decimals` (unrounded when None); 0 when the denominator is 0."""
    if not denominator:
        return 0.0
    rate = numerator * 100 / denominator
    return rate if decimals is None else round(rate, decimals)


def connection_rate(totals: Mapping[str, int], decimals: Optional[int] = 1) -> float:
    """Connected fresh calls as % of fresh calls."""
    return _safe_rate(totals.get("fresh_calls_connected", 0), totals.get("fresh_calls", 0), decimals)


def mail_conversion_rate(totals: Mapping[str, int], decimals: Optional[int] = 1) -> float:
    """JDs received as % of invite mails sent."""
    return _safe_rate(totals.get("jd_received", 0), totals.get("invite_mails_sent", 0), decimals)


# =============================================================================
# GROUPINGS
# =============================================================================

def group_keys(df: pd.DataFrame, col: str) -> pd.Series:
    """Grouping key per record; blank or missing values map to the Unknown bucket."""
    if col not in df.columns:
        return pd.Series(UNKNOWN_KEY, index=df.index, dtype=object)
    keys = df[col].fillna("").astype(str).str.strip()
    return keys.mask(keys == "", UNKNOWN_KEY)


def _summarize(df: pd.DataFrame, col: str) -> pd.DataFrame:
    """Accumulate calls / fresh calls / connected per key, in first-appearance order."""
    if len(df) == 0:
        return pd.DataFrame(columns=[col] + SUMMARY_COLUMNS)

    work = df.assign(**{col: group_keys(df, col)})
    result = work.groupby(col, sort=False).agg(
        calls=("calls_made", "sum"),
        fresh_calls=("fresh_calls", "sum"),
        connected=("fresh_calls_connected", "sum"),
    ).reset_index()

    return result


def group_by_employee(df: pd.DataFrame) -> pd.DataFrame:
    """Per-employee summary: employee_name, calls, fresh_calls, connected."""
    return _summarize(df, "employee_name")


def group_by_team(df: pd.DataFrame) -> pd.DataFrame:
    """Per-team summary: team, calls, fresh_calls, connected."""
    return _summarize(df, "team")


def group_by_date(df: pd.DataFrame) -> pd.DataFrame:
    """
    Daily buckets for time-series charts.

    Returns DataFrame with:
    - date: ISO day string (YYYY-MM-DD), ascending
    - calls_made
    - fresh_calls
    """
    if len(df) == 0:
        return pd.DataFrame(columns=["date", "calls_made", "fresh_calls"])

    day = df["date"].dt.strftime("%Y-%m-%d")
    result = df.assign(day=day).groupby("day").agg(
        calls_made=("calls_made", "sum"),
        fresh_calls=("fresh_calls", "sum"),
    ).reset_index()

    return result.rename(columns={"day": "date"})


def add_connection_rate(summary: pd.DataFrame) -> pd.DataFrame:
    """Add a per-row connection_rate (%) column to an employee/team summary."""
    summary = summary.copy()
    if len(summary) == 0:
        summary["connection_rate"] = pd.Series(dtype=float)
        return summary

    summary["connection_rate"] = np.where(
        summary["fresh_calls"] > 0,
        (summary["connected"] / summary["fresh_calls"].replace(0, np.nan) * 100).round(1),
        0.0,
    )
    return summary


def top_by_calls(summary: pd.DataFrame, key_col: str, n: int) -> List[str]:
    """Top-n keys by calls, descending; ties keep first-appearance order."""
    if len(summary) == 0:
        return []
    ranked = summary.sort_values("calls", ascending=False, kind="stable")
    return ranked[key_col].head(n).tolist()


def distinct_count(df: pd.DataFrame, col: str) -> int:
    """Number of distinct grouping keys (Unknown counts as one)."""
    if len(df) == 0:
        return 0
    return int(group_keys(df, col).nunique())
