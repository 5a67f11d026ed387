"""Exceptions raised by the Athena client."""

from typing import Any, Optional


class AthenaClientError(Exception):
    """Base exception for all Athena client errors."""
    pass


class ConfigurationError(AthenaClientError):
    """Raised when the client configuration is invalid or incomplete."""
    pass


class FormattingError(AthenaClientError):
    """Raised when query parameters cannot be bound into the SQL text."""
    pass


class ValidationError(AthenaClientError):
    """Raised when a result cell does not match its declared type."""

    def __init__(self, message: str, value: Any = None):
        super().__init__(message)
        self.value = value


class InvalidNumberError(ValidationError):
    """Raised when a numeric column holds non-numeric text."""

    def __init__(self, value: Any):
        super().__init__(f"The value '{value}' is not a number", value)


class InvalidJsonError(ValidationError):
    """Raised when a JSON column holds malformed JSON."""

    def __init__(self, value: Any, original_error: Optional[Exception] = None):
        super().__init__(f"The value '{value}' is not valid JSON", value)
        self.original_error = original_error


class InvalidDateError(ValidationError):
    """Raised when a date or timestamp column cannot be parsed."""

    def __init__(self, value: Any):
        super().__init__(f"The value '{value}' is not a valid date", value)


class UnsupportedColumnTypeError(AthenaClientError):
    """Raised when Athena reports a column type without a parser."""

    def __init__(self, column_type: str, column_name: Optional[str] = None):
        super().__init__(f"Column type '{column_type}' not supported")
        self.column_type = column_type
        self.column_name = column_name


class QueryNotFoundError(AthenaClientError):
    """Raised when no in-flight query matches a caller-supplied ID."""

    def __init__(self, query_id: Optional[str] = None):
        super().__init__("Query ID not found")
        self.query_id = query_id


class QueryNotStartedError(AthenaClientError):
    """Raised when a query has no Athena execution ID yet."""
    pass


class QueryFailedError(AthenaClientError):
    """Raised when Athena reports the execution as FAILED."""

    def __init__(self, execution_id: Optional[str] = None, reason: Optional[str] = None):
        super().__init__("Query failed")
        self.execution_id = execution_id
        self.reason = reason


class QueryCancelledError(AthenaClientError):
    """Raised when Athena reports the execution as CANCELLED."""

    def __init__(self, execution_id: Optional[str] = None):
        super().__init__("Query cancelled")
        self.execution_id = execution_id


class UnsupportedStatusError(AthenaClientError):
    """Raised when Athena reports a state outside the known set."""

    def __init__(self, status: Any, execution_id: Optional[str] = None):
        super().__init__(f"Query Status '{status}' not supported")
        self.status = status
        self.execution_id = execution_id


class TransportError(AthenaClientError):
    """Raised when a call to AWS fails.

    Wraps botocore errors so callers can catch a single type while the
    original error stays available on ``original_error``.
    """

    def __init__(
        self,
        message: str,
        operation: str,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.operation = operation
        self.original_error = original_error
