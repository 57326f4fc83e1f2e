"""
User Management: list, add and remove dashboard users.
"""
import logging
import streamlit as st
from pathlib import Path
import sys

st.set_page_config(page_title="User Management", page_icon="🛡️", layout="wide")

sys.path.insert(0, str(Path(__file__).parent.parent))

from mis_report.auth.guard import SessionGuard
from mis_report.auth.users import create_user, list_users, remove_user, role_counts
from mis_report.config import ROLES, config
from mis_report.data.loader import get_store
from mis_report.errors import AuthError, PermissionDeniedError, StoreError, ValidationError
from mis_report.logging_config import configure_logging
from mis_report.ui.formatting import role_badge
from mis_report.ui.session import get_auth_provider, require_login, sign_out
from mis_report.ui.state import get_session_user, get_state, init_state, set_state

logger = logging.getLogger(__name__)


# =============================================================================
# SECTIONS
# =============================================================================

def render_add_user_form(store):
    """Add-user form; the new account is created without touching this session."""
    st.subheader("Add User")

    with st.form("add_user_form", clear_on_submit=False):
        col1, col2, col3 = st.columns([3, 2, 1])
        with col1:
            email = st.text_input("Email")
        with col2:
            password = st.text_input("Password", type="password",
                                     help=f"At least {config.min_password_length} characters")
        with col3:
            role = st.selectbox("Role", options=ROLES)
        submitted = st.form_submit_button("Create User")

    if not submitted:
        return

    admin = get_session_user()
    try:
        with st.spinner("Creating..."):
            create_user(get_auth_provider(), store, email, password, role, created_by=admin.email)
    except ValidationError as exc:
        st.error(str(exc))
        return
    except (AuthError, StoreError) as exc:
        logger.error("Error creating user: %s", exc)
        st.error(f"Failed to create user: {exc}")
        return

    st.success(f"User {email.strip()} created successfully with role {role}.")


def render_user_table(store):
    """Users table with a two-step remove action."""
    header_col, refresh_col = st.columns([5, 1])
    with header_col:
        st.subheader("Users")
    with refresh_col:
        st.button("Refresh", key="refresh_users")

    try:
        users = list_users(store)
    except StoreError as exc:
        logger.error("Error loading users: %s", exc)
        st.error(f"Error loading users: {exc}")
        return

    if len(users) == 0:
        st.info("No users found.")
        return

    counts = role_counts(users)
    st.caption(" | ".join(f"{role}: {count}" for role, count in counts.items()))

    pending = get_state("pending_user_removal")

    for row in users.itertuples(index=False):
        col1, col2, col3 = st.columns([4, 2, 2])
        with col1:
            st.markdown(f"**{row.email}**")
        with col2:
            st.markdown(role_badge(row.role))
        with col3:
            if pending == row.id:
                confirm_col, cancel_col = st.columns(2)
                with confirm_col:
                    if st.button("Confirm", key=f"confirm_{row.id}", type="primary"):
                        set_state("pending_user_removal", None)
                        try:
                            remove_user(store, row.id)
                        except StoreError as exc:
                            logger.error("Error deleting user: %s", exc)
                            st.error(f"Delete failed: {exc}")
                        else:
                            st.rerun()
                with cancel_col:
                    if st.button("Cancel", key=f"cancel_{row.id}"):
                        set_state("pending_user_removal", None)
                        st.rerun()
            elif st.button("🗑 Remove", key=f"remove_{row.id}"):
                set_state("pending_user_removal", row.id)
                st.rerun()


def main():
    configure_logging()
    init_state()

    decision = require_login()

    col1, col2 = st.columns([5, 1])
    with col1:
        st.title("User Management")
    with col2:
        st.page_link("app.py", label="Dashboard", icon="📞")
        if st.button("Logout"):
            sign_out()
            st.rerun()

    try:
        SessionGuard.require_admin(decision)
    except PermissionDeniedError as exc:
        logger.warning("Admin page denied for %s", get_session_user().email)
        st.warning(str(exc))
        st.stop()

    store = get_store()
    render_add_user_form(store)
    st.markdown("---")
    render_user_table(store)


main()
