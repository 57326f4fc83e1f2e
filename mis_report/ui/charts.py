"""
Standard chart wrappers using Plotly.
"""
import plotly.graph_objects as go
import pandas as pd


# =============================================================================
# CHART THEME
# =============================================================================

CHART_COLORS = {
    "calls": "rgb(59, 130, 246)",
    "fresh": "rgb(34, 197, 94)",
}

TEAM_PALETTE = [
    "rgba(59, 130, 246, 0.8)",
    "rgba(34, 197, 94, 0.8)",
    "rgba(147, 51, 234, 0.8)",
    "rgba(249, 115, 22, 0.8)",
]

CHART_TEMPLATE = "plotly_white"

DEFAULT_LAYOUT = {
    "template": CHART_TEMPLATE,
    "font": {"family": "Arial, sans-serif", "size": 12},
    "margin": {"l": 50, "r": 30, "t": 40, "b": 50},
    "hoverlabel": {"bgcolor": "white"},
}


def apply_layout(fig: go.Figure, **kwargs) -> go.Figure:
    """Apply standard layout to figure."""
    layout = {**DEFAULT_LAYOUT, **kwargs}
    fig.update_layout(**layout)
    return fig


# =============================================================================
# TIME SERIES
# =============================================================================

def daily_calls_chart(daily: pd.DataFrame, title: str = "Daily Calls") -> go.Figure:
    """
    Line chart of total calls and fresh calls per day.

    daily should come from group_by_date (date, calls_made, fresh_calls).
    """
    fig = go.Figure()

    series = [
        ("calls_made", "Total Calls", CHART_COLORS["calls"]),
        ("fresh_calls", "Fresh Calls", CHART_COLORS["fresh"]),
    ]

    for col, name, color in series:
        fig.add_trace(go.Scatter(
            x=daily["date"],
            y=daily[col],
            name=name,
            mode="lines+markers",
            line={"color": color, "shape": "spline"},
        ))

    fig.update_layout(
        title=title,
        xaxis_title="",
        yaxis={"rangemode": "tozero"},
        legend={"orientation": "h", "y": 1.1},
    )

    return apply_layout(fig)


# =============================================================================
# BAR CHARTS
# =============================================================================

def team_calls_chart(team_summary: pd.DataFrame, title: str = "Total Calls by Team") -> go.Figure:
    """Bar chart of calls per team (team summary from group_by_team)."""
    colors = [TEAM_PALETTE[i % len(TEAM_PALETTE)] for i in range(len(team_summary))]

    fig = go.Figure(go.Bar(
        x=team_summary["team"],
        y=team_summary["calls"],
        marker_color=colors,
        name="Total Calls",
    ))

    fig.update_layout(
        title=title,
        showlegend=False,
        yaxis={"rangemode": "tozero"},
    )

    return apply_layout(fig)
