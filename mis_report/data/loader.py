"""
Data loading utilities for the operations collection.
"""
import logging

import pandas as pd
import streamlit as st

from mis_report.config import AppConfig, config
from mis_report.data.schema import OperationEntry, records_to_frame, validate_entry
from mis_report.data.store import (
    FirestoreRecordStore,
    InMemoryRecordStore,
    RecordStore,
    initialize_firebase,
)
from mis_report.errors import StoreError

logger = logging.getLogger(__name__)


def build_store(app_config: AppConfig = config) -> RecordStore:
    """Construct the configured record store."""
    if app_config.uses_memory_store:
        if app_config.is_prod:
            raise StoreError("Opening store", "the in-memory backend is not allowed when APP_ENV=prod")
        logger.warning("Using in-memory record store; data is lost when the server stops")
        return InMemoryRecordStore()
    return FirestoreRecordStore(initialize_firebase(app_config.firebase_credentials))


@st.cache_resource
def get_store() -> RecordStore:
    """Shared record store for the running Streamlit server."""
    return build_store(config)


def load_dashboard_batch(store: RecordStore, app_config: AppConfig = config) -> pd.DataFrame:
    """
    Load the dashboard batch: ordered by `date` ascending, bounded count.

    Once the collection holds more than `dashboard_batch_limit` records this
    returns the oldest ones, not the most recent. Kept as-is until the
    intended ordering is confirmed.
    """
    records = store.query_ordered(
        app_config.operations_collection, "date", app_config.dashboard_batch_limit
    )
    logger.info("Loaded %d records for dashboard", len(records))
    return records_to_frame(records)


def load_report_batch(store: RecordStore, app_config: AppConfig = config) -> pd.DataFrame:
    """Load the bounded batch a report is filtered from."""
    records = store.query_ordered(
        app_config.operations_collection, "date", app_config.report_batch_limit
    )
    logger.info("Loaded %d records for report", len(records))
    return records_to_frame(records)


def save_entry(store: RecordStore, entry: OperationEntry, app_config: AppConfig = config) -> str:
    """Validate and append a data-entry submission. Returns the new document id."""
    validate_entry(entry)
    return store.append(app_config.operations_collection, entry.to_document())
