"""
Tests for record normalisation and entry validation.
"""
import pytest
import pandas as pd
import sys
from datetime import date, datetime, timezone
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from mis_report.data.schema import (
    OperationEntry,
    RECORD_COLUMNS,
    parse_company_names,
    records_to_frame,
    validate_entry,
)
from mis_report.errors import ValidationError


class TestRecordsToFrame:
    """Tests for building the operations frame from stored documents."""

    def test_adds_missing_columns(self):
        """Every record column exists even when documents omit it."""
        df = records_to_frame([{"date": "2024-01-01", "employee_name": "A"}])

        assert set(RECORD_COLUMNS) <= set(df.columns)
        assert df["calls_made"].iloc[0] == 0
        assert df["team"].iloc[0] == ""
        assert df["company_names"].iloc[0] == []

    def test_parses_iso_dates(self):
        """Stored ISO timestamps become naive UTC datetimes."""
        df = records_to_frame([
            {"date": "2024-01-05T00:00:00.000Z", "employee_name": "A"},
            {"date": "2024-01-06", "employee_name": "B"},
        ])

        assert df["date"].tolist() == [pd.Timestamp("2024-01-05"), pd.Timestamp("2024-01-06")]

    def test_coerces_counters(self):
        """String and null counters coerce to ints with 0 fallback."""
        df = records_to_frame([
            {"date": "2024-01-01", "employee_name": "A", "calls_made": "12", "fresh_calls": None},
        ])

        assert df["calls_made"].iloc[0] == 12
        assert df["fresh_calls"].iloc[0] == 0

    def test_keeps_document_id(self):
        """Extra keys such as id are kept after the record columns."""
        df = records_to_frame([{"id": "abc", "date": "2024-01-01", "employee_name": "A"}])

        assert list(df.columns[: len(RECORD_COLUMNS)]) == RECORD_COLUMNS
        assert df["id"].iloc[0] == "abc"

    def test_undated_records_dropped(self):
        """Records with a missing or unparseable date are left out."""
        df = records_to_frame([
            {"date": "2024-01-01", "employee_name": "A", "calls_made": 3},
            {"date": "not a date", "employee_name": "B", "calls_made": 5},
            {"employee_name": "C", "calls_made": 7},
        ])

        assert df["employee_name"].tolist() == ["A"]
        assert df.index.tolist() == [0]

    def test_empty_input(self):
        """No documents gives an empty frame with the record columns."""
        df = records_to_frame([])

        assert len(df) == 0
        assert set(RECORD_COLUMNS) <= set(df.columns)


class TestCompanyNames:
    """Tests for company name parsing."""

    def test_comma_separated(self):
        assert parse_company_names(" Acme ,, Globex,  ") == ["Acme", "Globex"]

    def test_list_passthrough(self):
        assert parse_company_names(["Acme", " ", "Initech "]) == ["Acme", "Initech"]

    def test_none(self):
        assert parse_company_names(None) == []


class TestValidateEntry:
    """Tests for data-entry validation."""

    def _entry(self, **overrides):
        values = dict(
            entry_date=date(2024, 3, 5),
            employee_name="Asha",
            team="North",
            calls_made=10,
            fresh_calls=5,
            fresh_calls_connected=2,
        )
        values.update(overrides)
        return OperationEntry(**values)

    def test_valid_entry(self):
        """A complete entry passes unchanged."""
        entry = self._entry()

        assert validate_entry(entry) is entry

    def test_connected_cannot_exceed_fresh(self):
        """More connected than fresh calls is rejected."""
        with pytest.raises(ValidationError, match="cannot exceed"):
            validate_entry(self._entry(fresh_calls=2, fresh_calls_connected=3))

    def test_connected_equal_to_fresh_allowed(self):
        validate_entry(self._entry(fresh_calls=3, fresh_calls_connected=3))

    def test_blank_employee_rejected(self):
        with pytest.raises(ValidationError, match="Employee name"):
            validate_entry(self._entry(employee_name="   "))

    def test_blank_team_rejected(self):
        with pytest.raises(ValidationError, match="Team"):
            validate_entry(self._entry(team=""))

    def test_negative_counter_rejected(self):
        with pytest.raises(ValidationError, match="negative"):
            validate_entry(self._entry(jd_received=-1))

    def test_to_document(self):
        """Stored document uses snake_case keys and UTC ISO stamps."""
        entry = self._entry(company_names=["Acme", " Globex "])
        now = datetime(2024, 3, 5, 9, 30, tzinfo=timezone.utc)

        doc = entry.to_document(now=now)

        assert doc["date"] == "2024-03-05T00:00:00.000Z"
        assert doc["employee_name"] == "Asha"
        assert doc["calls_made"] == 10
        assert doc["operational_calls"] == 0
        assert doc["company_names"] == ["Acme", "Globex"]
        assert doc["created_at"] == "2024-03-05T09:30:00.000Z"
        assert doc["updated_at"] == doc["created_at"]
