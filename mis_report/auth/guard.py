"""
Session guard: login redirect and admin-affordance gating.

The guard only decides what the UI shows. Actual write protection for the
`users` and operations collections has to come from Firestore security rules.
"""
import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from mis_report.auth.provider import SessionUser
from mis_report.config import ADMIN_ROLES
from mis_report.data.store import RecordStore
from mis_report.errors import PermissionDeniedError, StoreError

logger = logging.getLogger(__name__)

SUPERADMIN = "superadmin"


@dataclass(frozen=True)
class GuardDecision:
    """Outcome of evaluating the current session."""
    authenticated: bool
    role: Optional[str] = None
    show_admin: bool = False

    @property
    def redirect_to_login(self) -> bool:
        return not self.authenticated


class SessionGuard:
    """Decides login redirect and admin visibility for a session user."""

    def __init__(self, store: RecordStore, users_collection: str,
                 privileged_emails: Iterable[str] = ()):
        self._store = store
        self._users_collection = users_collection
        self._privileged = {email.strip().lower() for email in privileged_emails if email.strip()}

    def is_privileged(self, user: SessionUser) -> bool:
        return user.email.strip().lower() in self._privileged

    def fetch_role(self, user: SessionUser) -> Optional[str]:
        """Stored role for the user, None when no users document exists."""
        doc = self._store.get_by_id(self._users_collection, user.uid)
        if doc is None:
            return None
        return doc.get("role")

    def evaluate(self, user: Optional[SessionUser]) -> GuardDecision:
        """
        Evaluate the session.

        Allow-listed identities are superadmin regardless of the stored role.
        A failed role lookup is logged and leaves the admin UI hidden.
        """
        if user is None:
            return GuardDecision(authenticated=False)

        if self.is_privileged(user):
            logger.debug("Superadmin detected via allow-list: %s", user.email)
            return GuardDecision(authenticated=True, role=SUPERADMIN, show_admin=True)

        try:
            role = self.fetch_role(user)
        except StoreError:
            logger.exception("Role check failed for %s", user.email)
            return GuardDecision(authenticated=True)

        logger.debug("User role for %s: %s", user.email, role)
        return GuardDecision(authenticated=True, role=role, show_admin=role in ADMIN_ROLES)

    def provision_privileged_role(self, user: SessionUser) -> bool:
        """
        Upsert a superadmin users document for an allow-listed identity.

        Run once after sign-in. Returns True when a write was made; failures
        are logged and otherwise ignored.
        """
        if not self.is_privileged(user):
            return False

        try:
            if self.fetch_role(user) == SUPERADMIN:
                return False
            self._store.upsert(
                self._users_collection,
                user.uid,
                {"email": user.email.lower(), "role": SUPERADMIN},
                merge=True,
            )
        except StoreError:
            logger.exception("Superadmin provisioning failed for %s", user.email)
            return False

        logger.info("Provisioned superadmin role for %s", user.email)
        return True

    @staticmethod
    def require_admin(decision: GuardDecision):
        """Raise PermissionDeniedError unless the decision unlocks admin UI."""
        if not decision.show_admin:
            raise PermissionDeniedError("Admin access required.")
