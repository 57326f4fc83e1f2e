"""
Firebase Authentication adapter.

Sign-in uses the Identity Toolkit REST endpoint with the project's web API
key; account creation goes through the Admin SDK, which never touches the
signed-in administrator's own session.
"""
import logging
from dataclasses import dataclass
from typing import Optional

import firebase_admin
import requests
from firebase_admin import auth as firebase_auth
from firebase_admin.exceptions import FirebaseError

from mis_report.errors import AuthError, ValidationError

logger = logging.getLogger(__name__)

SIGN_IN_URL = "https://identitytoolkit.googleapis.com/v1/accounts:signInWithPassword"

# Identity Toolkit error codes -> user-facing text
SIGN_IN_MESSAGES = {
    "EMAIL_NOT_FOUND": "Invalid email or password.",
    "INVALID_PASSWORD": "Invalid email or password.",
    "INVALID_LOGIN_CREDENTIALS": "Invalid email or password.",
    "USER_DISABLED": "This account has been disabled.",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "Too many attempts. Please try again later.",
}


@dataclass(frozen=True)
class SessionUser:
    """The signed-in identity held in the browser session."""
    uid: str
    email: str
    id_token: str = ""


class FirebaseAuthProvider:
    """Email/password authentication against Firebase."""

    def __init__(self, api_key: str, timeout: float = 10.0,
                 app: Optional[firebase_admin.App] = None):
        self._api_key = api_key
        self._timeout = timeout
        self._app = app

    def sign_in(self, email: str, password: str) -> SessionUser:
        """
        Exchange email/password for a session.

        Raises:
            AuthError: bad credentials, missing API key, or the service is unreachable.
        """
        if not self._api_key:
            raise AuthError("Sign-in is not configured (FIREBASE_API_KEY is not set).")

        try:
            resp = requests.post(
                SIGN_IN_URL,
                params={"key": self._api_key},
                json={"email": email, "password": password, "returnSecureToken": True},
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            logger.exception("Sign-in request failed")
            raise AuthError("Could not reach the authentication service.") from exc

        try:
            payload = resp.json()
        except ValueError:
            payload = {}

        if resp.status_code != 200:
            code = str(payload.get("error", {}).get("message", "")).split(" ")[0]
            logger.warning("Sign-in rejected for %s: %s", email, code or resp.status_code)
            raise AuthError(SIGN_IN_MESSAGES.get(code, "Sign-in failed."))

        return SessionUser(
            uid=payload["localId"],
            email=payload.get("email", email).lower(),
            id_token=payload.get("idToken", ""),
        )

    def create_account(self, email: str, password: str) -> str:
        """
        Create an auth account without affecting the caller's session.

        Returns the new account's uid.
        """
        try:
            record = firebase_auth.create_user(email=email, password=password, app=self._app)
        except firebase_auth.EmailAlreadyExistsError as exc:
            raise ValidationError("Email already in use.") from exc
        except FirebaseError as exc:
            logger.exception("Account creation failed for %s", email)
            raise AuthError(f"Account creation failed: {exc}") from exc

        logger.info("Created auth account %s for %s", record.uid, email)
        return record.uid
