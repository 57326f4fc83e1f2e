"""
Tests for the in-memory record store and the operations loaders.
"""
import pytest
import sys
from datetime import date
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from google.auth.exceptions import RefreshError

from mis_report.config import AppConfig
from mis_report.data.loader import build_store, load_dashboard_batch, load_report_batch, save_entry
from mis_report.data.schema import OperationEntry
from mis_report.data.store import FirestoreRecordStore, InMemoryRecordStore
from mis_report.errors import StoreError, ValidationError


COLLECTION = "employee_operations"


def _seed(n):
    return {
        COLLECTION: [
            {"date": f"2024-{1 + i // 28:02d}-{1 + i % 28:02d}T00:00:00.000Z",
             "employee_name": f"E{i}", "team": "North", "calls_made": i}
            for i in range(n)
        ]
    }


class TestInMemoryStore:
    """Tests for the in-memory RecordStore."""

    def test_append_and_list(self):
        """Appended records come back with their id."""
        store = InMemoryRecordStore()

        doc_id = store.append("users", {"email": "a@example.com"})

        assert store.list_all("users") == [{"email": "a@example.com", "id": doc_id}]

    def test_query_ordered_ascending_with_limit(self):
        """Ordering is ascending, so a limit returns the oldest records."""
        store = InMemoryRecordStore(seed=_seed(5))

        records = store.query_ordered(COLLECTION, "date", 3)

        assert [r["employee_name"] for r in records] == ["E0", "E1", "E2"]

    def test_upsert_merge(self):
        """Merge keeps existing keys; replace drops them."""
        store = InMemoryRecordStore(seed={"users": [{"id": "u1", "email": "a@example.com", "role": "user"}]})

        store.upsert("users", "u1", {"role": "admin"})
        assert store.get_by_id("users", "u1") == {"email": "a@example.com", "role": "admin", "id": "u1"}

        store.upsert("users", "u1", {"role": "user"}, merge=False)
        assert store.get_by_id("users", "u1") == {"role": "user", "id": "u1"}

    def test_delete(self):
        store = InMemoryRecordStore(seed={"users": [{"id": "u1", "email": "a@example.com"}]})

        store.delete_by_id("users", "u1")

        assert store.get_by_id("users", "u1") is None

    def test_simulated_failure(self):
        """Failing operations raise StoreError naming the operation."""
        store = InMemoryRecordStore(failing_operations={"append"})

        with pytest.raises(StoreError, match="append"):
            store.append(COLLECTION, {})


class TestLoaders:
    """Tests for dashboard / report batch loading."""

    def test_dashboard_batch_is_bounded(self):
        """Dashboard loads at most the configured limit, oldest first."""
        store = InMemoryRecordStore(seed=_seed(150))

        df = load_dashboard_batch(store, AppConfig(dashboard_batch_limit=100))

        assert len(df) == 100
        assert df["employee_name"].iloc[0] == "E0"
        assert df["employee_name"].iloc[-1] == "E99"

    def test_report_batch_limit(self):
        store = InMemoryRecordStore(seed=_seed(30))

        df = load_report_batch(store, AppConfig(report_batch_limit=1000))

        assert len(df) == 30

    def test_save_entry_writes_document(self):
        """A valid entry is appended to the operations collection."""
        store = InMemoryRecordStore()
        entry = OperationEntry(entry_date=date(2024, 1, 1), employee_name="Asha", team="North",
                               fresh_calls=4, fresh_calls_connected=2)

        doc_id = save_entry(store, entry, AppConfig())

        saved = store.get_by_id(COLLECTION, doc_id)
        assert saved["employee_name"] == "Asha"
        assert saved["fresh_calls_connected"] == 2

    def test_invalid_entry_never_reaches_store(self):
        """Validation runs before the append call."""
        store = InMemoryRecordStore(failing_operations={"append"})
        entry = OperationEntry(entry_date=date(2024, 1, 1), employee_name="Asha", team="North",
                               fresh_calls=1, fresh_calls_connected=2)

        with pytest.raises(ValidationError):
            save_entry(store, entry, AppConfig())


class TestBuildStore:

    def test_memory_backend(self):
        store = build_store(AppConfig(store_backend="memory", app_env="dev"))

        assert isinstance(store, InMemoryRecordStore)

    def test_memory_backend_refused_in_prod(self):
        with pytest.raises(StoreError, match="APP_ENV=prod"):
            build_store(AppConfig(store_backend="memory", app_env="prod"))


class TestFirestoreErrorTranslation:

    def test_credential_failure_becomes_store_error(self):
        """Token refresh failures surface as StoreError naming the operation."""

        class ExpiredCredentialsClient:
            def collection(self, name):
                return self

            def document(self, doc_id):
                return self

            def get(self):
                raise RefreshError("token expired")

        store = FirestoreRecordStore(client=ExpiredCredentialsClient())

        with pytest.raises(StoreError, match="Reading users/u1"):
            store.get_by_id("users", "u1")
