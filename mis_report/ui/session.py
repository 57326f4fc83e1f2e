"""
Sign-in flow and session-scoped services.
"""
import logging

import streamlit as st

from mis_report.auth.guard import GuardDecision, SessionGuard
from mis_report.auth.provider import FirebaseAuthProvider
from mis_report.config import config
from mis_report.data.loader import get_store
from mis_report.data.store import initialize_firebase
from mis_report.errors import AuthError
from mis_report.ui.state import (
    end_session,
    get_session_user,
    start_session,
)

logger = logging.getLogger(__name__)


@st.cache_resource
def get_auth_provider() -> FirebaseAuthProvider:
    app = initialize_firebase(config.firebase_credentials)
    return FirebaseAuthProvider(config.firebase_api_key, config.auth_timeout_seconds, app=app)


@st.cache_resource
def get_guard() -> SessionGuard:
    return SessionGuard(get_store(), config.users_collection, config.privileged_emails)


def current_decision() -> GuardDecision:
    """Guard decision for this browser session, re-evaluated on every script run."""
    return get_guard().evaluate(get_session_user())


def render_login():
    """Email/password form; on success the session starts and the app reruns."""
    st.title("MIS Reporting")
    st.caption("Sign in to continue")

    with st.form("login_form"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign in")

    if not submitted:
        return

    if not email.strip() or not password:
        st.error("Email and password are required.")
        return

    try:
        user = get_auth_provider().sign_in(email.strip(), password)
    except AuthError as exc:
        st.error(str(exc))
        return

    guard = get_guard()
    guard.provision_privileged_role(user)
    start_session(user)
    logger.info("Signed in: %s", user.email)
    st.rerun()


def require_login() -> GuardDecision:
    """Stop the script with the login form unless a user is signed in."""
    decision = current_decision()
    if decision.redirect_to_login:
        render_login()
        st.stop()
    return decision


def sign_out():
    user = get_session_user()
    end_session()
    if user is not None:
        logger.info("Signed out: %s", user.email)
