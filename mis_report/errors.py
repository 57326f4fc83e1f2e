"""
Error taxonomy shared by the store, auth and view layers.
"""


class MISReportError(Exception):
    """Base class for application errors."""
    pass


class AuthError(MISReportError):
    """Raised when sign-in fails or the session is no longer valid."""
    pass


class PermissionDeniedError(MISReportError):
    """Raised when the current user lacks the role for an admin action."""
    pass


class ValidationError(MISReportError):
    """Raised when user input is rejected before any network call."""
    pass


class StoreError(MISReportError):
    """Raised when a record store call fails."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        super().__init__(f"{operation} failed: {message}")
