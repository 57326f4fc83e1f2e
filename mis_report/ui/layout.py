"""
Layout components: header and view navigation.
"""
import streamlit as st

from mis_report.auth.guard import GuardDecision
from mis_report.ui.formatting import role_badge
from mis_report.ui.session import sign_out
from mis_report.ui.state import AppState, VIEWS, get_session_user


# =============================================================================
# HEADER AND NAVIGATION
# =============================================================================

def render_header(app_state: AppState, decision: GuardDecision):
    """Render app header with navigation buttons, admin link and logout."""
    col1, col2 = st.columns([3, 1])

    with col1:
        st.title("MIS Reporting Dashboard")
        st.caption(f"Employee operations · {VIEWS[app_state.active_view]}")

    with col2:
        user = get_session_user()
        if user is not None:
            st.caption(f"{user.email} · {role_badge(decision.role)}")
        if decision.show_admin:
            st.page_link("pages/1_User_Management.py", label="User Management", icon="🛡️")
        if st.button("Logout", key="logout_btn"):
            sign_out()
            st.rerun()

    render_view_nav(app_state)
    st.markdown("---")


def render_view_nav(app_state: AppState):
    """One button per view; the active view's button is disabled."""
    cols = st.columns(len(VIEWS) + 3)

    for i, (view, label) in enumerate(VIEWS.items()):
        with cols[i]:
            if st.button(label, key=f"nav_{view}", disabled=app_state.active_view == view,
                         use_container_width=True):
                app_state.switch_to(view)
                st.rerun()
