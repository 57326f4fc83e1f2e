"""
MIS Reporting Dashboard

Main entry point for Streamlit app.
"""
import streamlit as st
from pathlib import Path

# Page config must be first Streamlit command
st.set_page_config(
    page_title="MIS Reporting",
    page_icon="📞",
    layout="wide",
    initial_sidebar_state="collapsed",
)

# Add repository root to path
import sys
sys.path.insert(0, str(Path(__file__).parent))

from mis_report.logging_config import configure_logging
from mis_report.data.loader import get_store
from mis_report.ui.state import init_state, get_app_state
from mis_report.ui.session import require_login
from mis_report.ui.layout import render_header
from mis_report.ui.views import render_active_view


def main():
    """Main app entry point."""
    configure_logging()

    # Initialize session state
    init_state()

    decision = require_login()
    app_state = get_app_state()

    render_header(app_state, decision)
    render_active_view(app_state, get_store())


if __name__ == "__main__":
    main()
