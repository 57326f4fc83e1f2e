"""
Operation record schema: normalisation of stored documents and entry validation.
"""
import logging

import pandas as pd
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional

from mis_report.config import NUMERIC_FIELDS, REQUIRED_FIELDS, OPTIONAL_FIELDS
from mis_report.errors import ValidationError

logger = logging.getLogger(__name__)


RECORD_COLUMNS = REQUIRED_FIELDS + list(NUMERIC_FIELDS) + OPTIONAL_FIELDS

TEXT_COLUMNS = ["employee_name", "team"]


def iso_timestamp(value: datetime) -> str:
    """Format a datetime as a UTC ISO-8601 string with millisecond precision: 2024-01-01T09:30:00.000Z"""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def iso_day(value: date) -> str:
    """Midnight UTC timestamp string for a calendar day."""
    return iso_timestamp(datetime(value.year, value.month, value.day, tzinfo=timezone.utc))


def parse_company_names(raw: Any) -> List[str]:
    """
    Normalise company names into a list.

    Accepts a comma-separated string or a list; names are trimmed and blanks dropped.
    """
    if raw is None:
        return []
    if isinstance(raw, str):
        items = raw.split(",")
    elif isinstance(raw, (list, tuple)):
        items = raw
    else:
        return []
    return [str(item).strip() for item in items if item is not None and str(item).strip()]


def _to_timestamp(series: pd.Series) -> pd.Series:
    """Parse stored timestamps to naive UTC datetimes (NaT when unparseable)."""
    parsed = pd.to_datetime(series.astype(object), errors="coerce", utc=True, format="ISO8601")
    return parsed.dt.tz_convert(None)


def ensure_column_types(df: pd.DataFrame) -> pd.DataFrame:
    """Ensure consistent column types."""
    df = df.copy()

    # Counters default to 0 when absent
    for col in NUMERIC_FIELDS:
        if col in df.columns:
            df[col] = pd.to_numeric(df[col], errors="coerce").fillna(0).astype(int)

    for col in TEXT_COLUMNS:
        if col in df.columns:
            df[col] = df[col].fillna("").astype(str).str.strip()

    if "date" in df.columns:
        df["date"] = _to_timestamp(df["date"])

    if "company_names" in df.columns:
        df["company_names"] = df["company_names"].apply(parse_company_names)

    return df


def records_to_frame(records: Iterable[Mapping[str, Any]]) -> pd.DataFrame:
    """
    Build a normalised operations DataFrame from stored documents.

    Missing keys are added, counters are coerced to int with 0 defaults,
    and `date` is parsed to a naive UTC timestamp. Records whose date is
    missing or unparseable are dropped with a warning, so totals and the
    daily series cover the same rows. Extra keys (e.g. `id`) are kept after
    the known columns.
    """
    df = pd.DataFrame.from_records(list(records))
    extras = [col for col in df.columns if col not in RECORD_COLUMNS]
    df = df.reindex(columns=RECORD_COLUMNS + extras)
    df = ensure_column_types(df)

    undated = df["date"].isna()
    if undated.any():
        logger.warning("Dropping %d record(s) with a missing or invalid date", int(undated.sum()))
        df = df[~undated].reset_index(drop=True)

    return df


# =============================================================================
# DATA ENTRY
# =============================================================================

@dataclass
class OperationEntry:
    """One data-entry submission."""
    entry_date: date
    employee_name: str
    team: str
    calls_made: int = 0
    fresh_calls: int = 0
    operational_calls: int = 0
    fresh_calls_connected: int = 0
    invite_mails_sent: int = 0
    jd_received: int = 0
    company_names: List[str] = field(default_factory=list)

    def counters(self) -> Dict[str, int]:
        return {key: int(getattr(self, key) or 0) for key in NUMERIC_FIELDS}

    def to_document(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        """Stored document for this entry, stamped with created/updated times."""
        stamp = iso_timestamp(now or datetime.now(timezone.utc))
        doc = {
            "date": iso_day(self.entry_date),
            "employee_name": self.employee_name.strip(),
            "team": self.team.strip(),
        }
        doc.update(self.counters())
        doc["company_names"] = parse_company_names(self.company_names)
        doc["created_at"] = stamp
        doc["updated_at"] = stamp
        return doc


def validate_entry(entry: OperationEntry) -> OperationEntry:
    """
    Validate a submission before it is stored.

    Raises:
        ValidationError: on blank required fields, negative counters,
            or more connected calls than fresh calls.
    """
    if entry.entry_date is None:
        raise ValidationError("Date is required.")
    if not (entry.employee_name or "").strip():
        raise ValidationError("Employee name is required.")
    if not (entry.team or "").strip():
        raise ValidationError("Team is required.")

    counters = entry.counters()
    negative = [NUMERIC_FIELDS[key] for key, value in counters.items() if value < 0]
    if negative:
        raise ValidationError(f"Counts cannot be negative: {', '.join(negative)}")

    if counters["fresh_calls_connected"] > counters["fresh_calls"]:
        raise ValidationError("Fresh calls connected cannot exceed fresh calls.")

    return entry
