"""
Application configuration management.
"""
import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional, Tuple


def _env_list(name: str) -> Tuple[str, ...]:
    raw = os.getenv(name, "")
    return tuple(item.strip().lower() for item in raw.split(",") if item.strip())


def _default_credentials_path() -> Optional[Path]:
    env_path = os.getenv("FIREBASE_CREDENTIALS")
    if env_path:
        return Path(env_path)
    return None


@dataclass
class AppConfig:
    """Application configuration with environment overrides."""

    # Environment
    app_env: str = field(default_factory=lambda: os.getenv("APP_ENV", "dev"))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    # Backend
    store_backend: str = field(default_factory=lambda: os.getenv("STORE_BACKEND", "firestore"))
    firebase_credentials: Optional[Path] = field(default_factory=_default_credentials_path)
    firebase_api_key: str = field(default_factory=lambda: os.getenv("FIREBASE_API_KEY", ""))
    auth_timeout_seconds: float = field(default_factory=lambda: float(os.getenv("AUTH_TIMEOUT_SECONDS", "10")))

    # Collections
    operations_collection: str = field(
        default_factory=lambda: os.getenv("OPERATIONS_COLLECTION", "employee_operations")
    )
    users_collection: str = field(default_factory=lambda: os.getenv("USERS_COLLECTION", "users"))

    # Query bounds
    dashboard_batch_limit: int = field(default_factory=lambda: int(os.getenv("DASHBOARD_BATCH_LIMIT", "100")))
    report_batch_limit: int = field(default_factory=lambda: int(os.getenv("REPORT_BATCH_LIMIT", "1000")))
    report_default_days: int = field(default_factory=lambda: int(os.getenv("REPORT_DEFAULT_DAYS", "7")))

    # Identities treated as superadmin regardless of stored role
    privileged_emails: Tuple[str, ...] = field(default_factory=lambda: _env_list("PRIVILEGED_EMAILS"))

    # Thresholds
    connection_rate_threshold: float = 30.0  # % of fresh calls connected
    mail_conversion_threshold: float = 20.0  # % of invite mails returning a JD
    min_password_length: int = 6
    top_employee_count: int = 3
    top_team_count: int = 2

    @property
    def uses_memory_store(self) -> bool:
        return self.store_backend.lower() == "memory"

    @property
    def is_prod(self) -> bool:
        return self.app_env.lower() == "prod"


# Global config instance
config = AppConfig()


# Numeric counters on an operation record (stored key -> display label)
NUMERIC_FIELDS = {
    "calls_made": "Calls Made",
    "fresh_calls": "Fresh Calls",
    "operational_calls": "Operational Calls",
    "fresh_calls_connected": "Fresh Connected",
    "invite_mails_sent": "Invites Sent",
    "jd_received": "JD Received",
}

# Required keys (hard fail at entry time if blank)
REQUIRED_FIELDS = ["date", "employee_name", "team"]

# Optional keys (defaulted when missing from stored documents)
OPTIONAL_FIELDS = ["company_names", "created_at", "updated_at"]

# Sentinel group key for records without a team or employee
UNKNOWN_KEY = "Unknown"

# Spreadsheet export columns (record key -> column header), in output order
EXPORT_COLUMNS = {
    "date": "Date",
    "employee_name": "Employee",
    "team": "Team",
    "calls_made": "Calls Made",
    "fresh_calls": "Fresh Calls",
    "operational_calls": "Operational Calls",
    "fresh_calls_connected": "Fresh Connected",
    "invite_mails_sent": "Invites Sent",
    "jd_received": "JD Received",
    "company_names": "Companies",
}

# Roles
ROLES = ["user", "admin", "superadmin"]
ADMIN_ROLES = {"admin", "superadmin"}

# Report types offered in the Reports view
REPORT_TYPES = {
    "daily": "Daily Report",
    "weekly": "Weekly Report",
    "monthly": "Monthly Report",
}

# Display date format
FORMAT_DATE = "%d/%m/%Y"
