"""
Consistent number and display formatting.
"""
import pandas as pd
from datetime import date
from typing import Union

from mis_report.config import FORMAT_DATE


def fmt_count(value: Union[float, int, None]) -> str:
    """Format count: 1,234"""
    if value is None or pd.isna(value):
        return "—"
    return f"{int(value):,}"


def fmt_percent(value: Union[float, int, None], decimals: int = 1) -> str:
    """Format percentage: 12.3%"""
    if value is None or pd.isna(value):
        return "—"
    return f"{value:,.{decimals}f}%"


def fmt_date(value: Union[date, pd.Timestamp, None]) -> str:
    """Format a day: 31/01/2024"""
    if value is None or pd.isna(value):
        return "—"
    return value.strftime(FORMAT_DATE)


def role_badge(role: str) -> str:
    """Return role label with a colour cue."""
    badges = {
        "superadmin": "🟣 superadmin",
        "admin": "🔵 admin",
    }
    role = role or "user"
    return badges.get(role, f"⚪ {role}")


def format_breakdown_df(df: pd.DataFrame, key_col: str, key_label: str) -> pd.DataFrame:
    """
    Format an employee/team breakdown for display.

    Columns: key, Calls, Fresh, Rate.
    """
    display_df = pd.DataFrame({
        key_label: df[key_col],
        "Calls": df["calls"].apply(fmt_count),
        "Fresh": df["fresh_calls"].apply(fmt_count),
        "Rate": df["connection_rate"].apply(fmt_percent),
    })
    return display_df.reset_index(drop=True)
