"""
Record store clients.

The hosted document database owns persistence and querying; this module only
adapts it to the handful of calls the dashboard needs. Write protection on the
`users` and operations collections must be enforced by Firestore security
rules: nothing here checks roles before writing.
"""
import copy
import logging
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Protocol

import firebase_admin
from firebase_admin import credentials, firestore
from firebase_admin.exceptions import FirebaseError
from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError

from mis_report.errors import StoreError

logger = logging.getLogger(__name__)


class RecordStore(Protocol):
    """Calls the dashboard makes against the document database."""

    def append(self, collection: str, record: Dict[str, Any]) -> str: ...

    def query_ordered(self, collection: str, order_field: str, limit: int) -> List[Dict[str, Any]]: ...

    def list_all(self, collection: str) -> List[Dict[str, Any]]: ...

    def get_by_id(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]: ...

    def upsert(self, collection: str, doc_id: str, data: Dict[str, Any], merge: bool = True) -> None: ...

    def delete_by_id(self, collection: str, doc_id: str) -> None: ...


@contextmanager
def _store_call(operation: str):
    """Translate backend and credential exceptions into StoreError."""
    try:
        yield
    except (GoogleAPIError, GoogleAuthError, FirebaseError) as exc:
        logger.exception("Store operation failed: %s", operation)
        raise StoreError(operation, str(exc)) from exc


def _with_id(doc_id: str, data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    record = dict(data or {})
    record["id"] = doc_id
    return record


# =============================================================================
# FIRESTORE
# =============================================================================

def initialize_firebase(credentials_path: Optional[Path] = None) -> firebase_admin.App:
    """Return the default Firebase app, initialising it on first use."""
    try:
        return firebase_admin.get_app()
    except ValueError:
        if credentials_path:
            cred = credentials.Certificate(str(credentials_path))
        else:
            cred = credentials.ApplicationDefault()
        logger.info("Initialising Firebase app (credentials: %s)", credentials_path or "application default")
        return firebase_admin.initialize_app(cred)


class FirestoreRecordStore:
    """RecordStore backed by Cloud Firestore via the Firebase Admin SDK."""

    def __init__(self, app: Optional[firebase_admin.App] = None, client: Any = None):
        self._db = client if client is not None else firestore.client(app=app)

    def append(self, collection: str, record: Dict[str, Any]) -> str:
        with _store_call(f"Saving to {collection}"):
            _, ref = self._db.collection(collection).add(record)
        logger.info("Document written to %s with ID %s", collection, ref.id)
        return ref.id

    def query_ordered(self, collection: str, order_field: str, limit: int) -> List[Dict[str, Any]]:
        with _store_call(f"Loading {collection}"):
            query = self._db.collection(collection).order_by(order_field).limit(limit)
            return [_with_id(snap.id, snap.to_dict()) for snap in query.stream()]

    def list_all(self, collection: str) -> List[Dict[str, Any]]:
        with _store_call(f"Loading {collection}"):
            return [_with_id(snap.id, snap.to_dict()) for snap in self._db.collection(collection).stream()]

    def get_by_id(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        with _store_call(f"Reading {collection}/{doc_id}"):
            snap = self._db.collection(collection).document(doc_id).get()
        if not snap.exists:
            return None
        return _with_id(snap.id, snap.to_dict())

    def upsert(self, collection: str, doc_id: str, data: Dict[str, Any], merge: bool = True) -> None:
        with _store_call(f"Writing {collection}/{doc_id}"):
            self._db.collection(collection).document(doc_id).set(data, merge=merge)

    def delete_by_id(self, collection: str, doc_id: str) -> None:
        with _store_call(f"Deleting {collection}/{doc_id}"):
            self._db.collection(collection).document(doc_id).delete()
        logger.info("Deleted %s/%s", collection, doc_id)


# =============================================================================
# IN-MEMORY
# =============================================================================

class InMemoryRecordStore:
    """
    RecordStore kept in process memory.

    Used for local development (`STORE_BACKEND=memory`) and tests. Operations
    listed in `failing_operations` raise StoreError, which lets callers
    exercise their failure paths.
    """

    def __init__(self, seed: Optional[Dict[str, Iterable[Dict[str, Any]]]] = None,
                 failing_operations: Iterable[str] = ()):
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.failing_operations = set(failing_operations)
        for collection, records in (seed or {}).items():
            for record in records:
                record = dict(record)
                doc_id = record.pop("id", None) or uuid.uuid4().hex
                self._docs(collection)[doc_id] = record

    def _docs(self, collection: str) -> Dict[str, Dict[str, Any]]:
        return self._collections.setdefault(collection, {})

    def _check(self, operation: str, collection: str):
        if operation in self.failing_operations:
            raise StoreError(f"{operation} {collection}", "simulated failure")

    def append(self, collection: str, record: Dict[str, Any]) -> str:
        self._check("append", collection)
        doc_id = uuid.uuid4().hex
        self._docs(collection)[doc_id] = copy.deepcopy(record)
        return doc_id

    def query_ordered(self, collection: str, order_field: str, limit: int) -> List[Dict[str, Any]]:
        self._check("query_ordered", collection)
        # Documents without the order field are excluded, as in Firestore
        docs = [
            _with_id(doc_id, copy.deepcopy(data))
            for doc_id, data in self._docs(collection).items()
            if data.get(order_field) is not None
        ]
        docs.sort(key=lambda d: d[order_field])
        return docs[:limit]

    def list_all(self, collection: str) -> List[Dict[str, Any]]:
        self._check("list_all", collection)
        return [_with_id(doc_id, copy.deepcopy(data)) for doc_id, data in self._docs(collection).items()]

    def get_by_id(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        self._check("get_by_id", collection)
        data = self._docs(collection).get(doc_id)
        if data is None:
            return None
        return _with_id(doc_id, copy.deepcopy(data))

    def upsert(self, collection: str, doc_id: str, data: Dict[str, Any], merge: bool = True) -> None:
        self._check("upsert", collection)
        docs = self._docs(collection)
        if merge and doc_id in docs:
            docs[doc_id].update(copy.deepcopy(data))
        else:
            docs[doc_id] = copy.deepcopy(data)

    def delete_by_id(self, collection: str, doc_id: str) -> None:
        self._check("delete_by_id", collection)
        self._docs(collection).pop(doc_id, None)
