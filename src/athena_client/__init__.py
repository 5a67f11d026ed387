"""Client for running queries on AWS Athena and decoding typed results."""

from .client import AthenaClient
from .column import Column, ColumnType, ParserKind
from .config import AthenaClientConfig
from .decoder import ResultPageDecoder
from .exceptions import (
    AthenaClientError,
    ConfigurationError,
    FormattingError,
    ValidationError,
    InvalidNumberError,
    InvalidJsonError,
    InvalidDateError,
    UnsupportedColumnTypeError,
    QueryNotFoundError,
    QueryNotStartedError,
    QueryFailedError,
    QueryCancelledError,
    UnsupportedStatusError,
    TransportError,
)
from .formatting import format_query
from .lifecycle import LifecyclePhase, QueryLifecycle
from .query import Query, QueryStatus
from .queue import QueryQueue
from .transport import AthenaTransport, ResultPage
from .type_checker import TypeChecker, infer_value

__all__ = [
    # Client and configuration
    "AthenaClient",
    "AthenaClientConfig",
    "AthenaTransport",

    # Query state
    "Query",
    "QueryStatus",
    "QueryQueue",
    "QueryLifecycle",
    "LifecyclePhase",

    # Result decoding
    "Column",
    "ColumnType",
    "ParserKind",
    "ResultPage",
    "ResultPageDecoder",
    "TypeChecker",
    "infer_value",
    "format_query",

    # Exceptions
    "AthenaClientError",
    "ConfigurationError",
    "FormattingError",
    "ValidationError",
    "InvalidNumberError",
    "InvalidJsonError",
    "InvalidDateError",
    "UnsupportedColumnTypeError",
    "QueryNotFoundError",
    "QueryNotStartedError",
    "QueryFailedError",
    "QueryCancelledError",
    "UnsupportedStatusError",
    "TransportError",
]
