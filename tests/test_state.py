"""
Tests for the application state object.
"""
import pytest
import plotly.graph_objects as go
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from mis_report.data.schema import records_to_frame
from mis_report.reports.composer import compose_report
from mis_report.ui.state import AppState, VIEWS


class TestViewStateMachine:
    """Tests for view switching."""

    def test_starts_on_dashboard(self):
        state = AppState()

        assert state.active_view == "dashboard"

    def test_exactly_one_view_active(self):
        """Each switch replaces the active view."""
        state = AppState()

        state.switch_to("data_entry")
        assert state.active_view == "data_entry"

        state.switch_to("reports")
        assert state.active_view == "reports"

        state.show_dashboard()
        assert state.active_view == "dashboard"

    def test_unknown_view_rejected(self):
        state = AppState()

        with pytest.raises(ValueError):
            state.switch_to("settings")

        assert state.active_view in VIEWS


class TestReportAndCharts:
    """Tests for report retention and chart ownership."""

    def test_last_report_wins(self):
        df = records_to_frame([{"date": "2024-01-01", "employee_name": "A", "team": "T", "calls_made": 1}])
        first = compose_report(df, "2024-01-01", "2024-01-01")
        second = compose_report(df, "2024-02-01", "2024-02-01")
        state = AppState()

        state.set_report(first)
        state.set_report(second)

        assert state.report is second

    def test_view_switch_keeps_report(self):
        df = records_to_frame([{"date": "2024-01-01", "employee_name": "A", "team": "T"}])
        report = compose_report(df, "2024-01-01", "2024-01-01")
        state = AppState()
        state.set_report(report)

        state.show_dashboard()
        state.switch_to("reports")

        assert state.report is report

    def test_replace_chart(self):
        """Replacing a chart drops the previous figure."""
        state = AppState()
        old, new = go.Figure(), go.Figure()

        state.replace_chart("daily", old)
        returned = state.replace_chart("daily", new)

        assert returned is new
        assert state.charts == {"daily": new}
