"""Error taxonomy for the soccer SQL lab.

Every failure raised by the package derives from ``SoccerLabError`` and
carries a standardized ``ErrorType`` so callers (CLI, notebooks) can branch
on the kind of failure without string matching.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorType(str, Enum):
    """Standard error types for consistent handling across frontends."""

    SOURCE_UNAVAILABLE = "source_unavailable"
    RELATION_ALREADY_EXISTS = "relation_already_exists"
    QUERY_SYNTAX_ERROR = "query_syntax_error"
    QUERY_RUNTIME_ERROR = "query_runtime_error"
    SCHEMA_MISMATCH = "schema_mismatch"
    HANDLE_CLOSED = "handle_closed"


class SoccerLabError(Exception):
    """Base class for all package errors."""

    error_type: ErrorType

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class SourceUnavailable(SoccerLabError):
    """An input CSV or tuning cache file is missing or unreadable."""

    error_type = ErrorType.SOURCE_UNAVAILABLE


class StaleTuningCache(SourceUnavailable):
    """A tuning cache exists but was computed from different inputs."""


class RelationAlreadyExists(SoccerLabError):
    """A relation with the same name is already registered in the store."""

    error_type = ErrorType.RELATION_ALREADY_EXISTS


class QuerySyntaxError(SoccerLabError):
    """The SQL engine rejected the statement text."""

    error_type = ErrorType.QUERY_SYNTAX_ERROR


class QueryRuntimeError(SoccerLabError):
    """The statement parsed but failed (unknown table/column, ...)."""

    error_type = ErrorType.QUERY_RUNTIME_ERROR


class SchemaMismatch(SoccerLabError):
    """Expected columns or values are absent; upstream data has drifted."""

    error_type = ErrorType.SCHEMA_MISMATCH


class HandleClosed(SoccerLabError):
    """An operation was attempted on a closed store handle."""

    error_type = ErrorType.HANDLE_CLOSED
