"""
User management over the `users` collection.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Protocol

import pandas as pd

from mis_report.config import AppConfig, ROLES, config
from mis_report.data.schema import iso_timestamp
from mis_report.data.store import RecordStore
from mis_report.errors import ValidationError

logger = logging.getLogger(__name__)


class AccountCreator(Protocol):
    def create_account(self, email: str, password: str) -> str: ...


def validate_new_user(email: str, password: str, role: str,
                      app_config: AppConfig = config):
    """Reject incomplete or weak user submissions before any network call."""
    if not email.strip() or not password.strip():
        raise ValidationError("Email and password are required.")
    if len(password.strip()) < app_config.min_password_length:
        raise ValidationError(
            f"Password must be at least {app_config.min_password_length} characters."
        )
    if role not in ROLES:
        raise ValidationError(f"Unknown role: {role}")


def list_users(store: RecordStore, app_config: AppConfig = config) -> pd.DataFrame:
    """Users table: id, email, role (missing roles shown as 'user')."""
    users = store.list_all(app_config.users_collection)
    df = pd.DataFrame.from_records(users).reindex(columns=["id", "email", "role"])
    df["role"] = df["role"].fillna("user")
    return df


def create_user(accounts: AccountCreator, store: RecordStore,
                email: str, password: str, role: str, created_by: str,
                app_config: AppConfig = config) -> str:
    """
    Create an auth account and its users document.

    Returns the new uid.
    """
    email = email.strip()
    password = password.strip()
    validate_new_user(email, password, role, app_config)

    uid = accounts.create_account(email, password)
    doc: Dict[str, Any] = {
        "email": email,
        "role": role,
        "created_at": iso_timestamp(datetime.now(timezone.utc)),
        "created_by": created_by,
    }
    store.upsert(app_config.users_collection, uid, doc, merge=False)
    logger.info("User %s created with role %s by %s", email, role, created_by)
    return uid


def remove_user(store: RecordStore, doc_id: str, app_config: AppConfig = config):
    """Delete a users document. The auth account itself is left in place."""
    store.delete_by_id(app_config.users_collection, doc_id)
    logger.info("Removed users/%s", doc_id)


def role_counts(users: pd.DataFrame) -> Dict[str, int]:
    counts = users["role"].value_counts() if len(users) else pd.Series(dtype=int)
    return {role: int(counts.get(role, 0)) for role in ROLES}
