"""
Tests for the session guard.
"""
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from google.auth.exceptions import RefreshError

from mis_report.auth.guard import SessionGuard
from mis_report.auth.provider import SessionUser
from mis_report.data.store import FirestoreRecordStore, InMemoryRecordStore
from mis_report.errors import PermissionDeniedError


OWNER = SessionUser(uid="owner-uid", email="Owner@Example.com")
ADMIN = SessionUser(uid="admin-uid", email="admin@example.com")
MEMBER = SessionUser(uid="member-uid", email="member@example.com")
NEWCOMER = SessionUser(uid="new-uid", email="new@example.com")


class ExpiredCredentialsClient:
    """Firestore client stand-in whose document reads fail on token refresh."""

    def collection(self, name):
        return self

    def document(self, doc_id):
        return self

    def get(self):
        raise RefreshError("token expired")


def _guard(store=None):
    store = store or InMemoryRecordStore(seed={
        "users": [
            {"id": "admin-uid", "email": "admin@example.com", "role": "admin"},
            {"id": "member-uid", "email": "member@example.com", "role": "user"},
        ]
    })
    return SessionGuard(store, "users", privileged_emails=["owner@example.com"]), store


class TestEvaluate:
    """Tests for login redirect and admin visibility."""

    def test_no_user_redirects(self):
        guard, _ = _guard()

        decision = guard.evaluate(None)

        assert decision.redirect_to_login
        assert not decision.show_admin

    def test_privileged_email_is_superadmin(self):
        """Allow-listed emails match case-insensitively and need no stored role."""
        guard, store = _guard()

        decision = guard.evaluate(OWNER)

        assert decision.show_admin
        assert decision.role == "superadmin"
        assert store.get_by_id("users", OWNER.uid) is None

    def test_admin_role_unlocks_admin(self):
        guard, _ = _guard()

        decision = guard.evaluate(ADMIN)

        assert decision.authenticated
        assert decision.show_admin
        assert decision.role == "admin"

    def test_user_role_hides_admin(self):
        guard, _ = _guard()

        decision = guard.evaluate(MEMBER)

        assert decision.authenticated
        assert not decision.show_admin

    def test_missing_users_document(self):
        """No stored role means no admin UI."""
        guard, _ = _guard()

        decision = guard.evaluate(NEWCOMER)

        assert decision.role is None
        assert not decision.show_admin

    def test_role_lookup_failure_hides_admin(self):
        """A failed lookup is swallowed and leaves admin UI hidden."""
        guard, _ = _guard(InMemoryRecordStore(failing_operations={"get_by_id"}))

        decision = guard.evaluate(ADMIN)

        assert decision.authenticated
        assert not decision.show_admin

    def test_credential_failure_hides_admin(self):
        """An expired service credential during the role read is treated as a failed lookup."""
        store = FirestoreRecordStore(client=ExpiredCredentialsClient())
        guard = SessionGuard(store, "users")

        decision = guard.evaluate(MEMBER)

        assert decision.authenticated
        assert not decision.show_admin

    def test_role_removed_between_evaluations(self):
        """Each evaluation reads the stored role again."""
        guard, store = _guard()
        assert guard.evaluate(ADMIN).show_admin

        store.delete_by_id("users", ADMIN.uid)

        assert not guard.evaluate(ADMIN).show_admin


class TestProvisioning:
    """Tests for the explicit superadmin provisioning step."""

    def test_creates_missing_role(self):
        guard, store = _guard()

        assert guard.provision_privileged_role(OWNER) is True
        assert store.get_by_id("users", OWNER.uid)["role"] == "superadmin"
        assert store.get_by_id("users", OWNER.uid)["email"] == "owner@example.com"

    def test_second_run_is_noop(self):
        guard, _ = _guard()

        guard.provision_privileged_role(OWNER)

        assert guard.provision_privileged_role(OWNER) is False

    def test_upgrades_existing_role(self):
        """An existing document keeps its other fields when the role is fixed."""
        store = InMemoryRecordStore(seed={
            "users": [{"id": "owner-uid", "email": "owner@example.com", "role": "user", "created_by": "x"}]
        })
        guard, _ = _guard(store)

        guard.provision_privileged_role(OWNER)

        doc = store.get_by_id("users", OWNER.uid)
        assert doc["role"] == "superadmin"
        assert doc["created_by"] == "x"

    def test_non_privileged_never_written(self):
        guard, store = _guard()

        assert guard.provision_privileged_role(MEMBER) is False
        assert store.get_by_id("users", MEMBER.uid)["role"] == "user"

    def test_write_failure_is_logged_not_raised(self):
        guard, _ = _guard(InMemoryRecordStore(failing_operations={"upsert"}))

        assert guard.provision_privileged_role(OWNER) is False


class TestRequireAdmin:

    def test_raises_for_non_admin(self):
        guard, _ = _guard()

        with pytest.raises(PermissionDeniedError):
            SessionGuard.require_admin(guard.evaluate(MEMBER))

    def test_passes_for_admin(self):
        guard, _ = _guard()

        SessionGuard.require_admin(guard.evaluate(ADMIN))
