"""
Session state management for Streamlit app.
"""
import streamlit as st
import plotly.graph_objects as go
from typing import Optional, Dict, Any
from dataclasses import dataclass, field

from mis_report.auth.provider import SessionUser
from mis_report.reports.composer import Report


# =============================================================================
# VIEWS
# =============================================================================

VIEWS = {
    "dashboard": "Dashboard",
    "data_entry": "Data Entry",
    "reports": "Reports",
}

DEFAULT_VIEW = "dashboard"


@dataclass
class AppState:
    """
    Per-session application state passed to the view renderers.

    Exactly one view is active. The last composed report is kept for export
    until the next successful generation replaces it. Chart figures are owned
    here: replacing a chart drops the previous figure.
    """
    active_view: str = DEFAULT_VIEW
    report: Optional[Report] = None
    charts: Dict[str, go.Figure] = field(default_factory=dict)

    def switch_to(self, view: str):
        if view not in VIEWS:
            raise ValueError(f"Unknown view: {view}")
        self.active_view = view

    def show_dashboard(self):
        self.switch_to("dashboard")

    def set_report(self, report: Report):
        self.report = report

    def replace_chart(self, name: str, fig: go.Figure) -> go.Figure:
        self.charts.pop(name, None)
        self.charts[name] = fig
        return fig


# =============================================================================
# STATE KEYS
# =============================================================================

STATE_KEYS = {
    "app_state": "app_state",
    "session_user": "session_user",
    "pending_user_removal": "pending_user_removal",
}

DEFAULTS = {
    "session_user": None,
    "pending_user_removal": None,
}


# =============================================================================
# STATE HELPERS
# =============================================================================

def init_state():
    """Initialize all session state keys with defaults."""
    for key, default in DEFAULTS.items():
        if key not in st.session_state:
            st.session_state[key] = default
    if STATE_KEYS["app_state"] not in st.session_state:
        st.session_state[STATE_KEYS["app_state"]] = AppState()


def get_state(key: str) -> Any:
    """Get state value with default fallback."""
    init_state()
    return st.session_state.get(key, DEFAULTS.get(key))


def set_state(key: str, value: Any):
    """Set state value."""
    st.session_state[key] = value


def get_app_state() -> AppState:
    return get_state(STATE_KEYS["app_state"])


def get_session_user() -> Optional[SessionUser]:
    return get_state("session_user")


def start_session(user: SessionUser):
    """Record a fresh sign-in; any previous app state is discarded."""
    set_state("session_user", user)
    set_state(STATE_KEYS["app_state"], AppState())


def end_session():
    """Sign out: clear the user and the app state."""
    for key, default in DEFAULTS.items():
        st.session_state[key] = default
    st.session_state[STATE_KEYS["app_state"]] = AppState()
