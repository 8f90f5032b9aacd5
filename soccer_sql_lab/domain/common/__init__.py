"""Common domain types shared across services."""

from .errors import (
    ErrorType,
    HandleClosed,
    QueryRuntimeError,
    QuerySyntaxError,
    RelationAlreadyExists,
    SchemaMismatch,
    SoccerLabError,
    SourceUnavailable,
    StaleTuningCache,
)

__all__ = [
    "ErrorType",
    "SoccerLabError",
    "SourceUnavailable",
    "StaleTuningCache",
    "RelationAlreadyExists",
    "QuerySyntaxError",
    "QueryRuntimeError",
    "SchemaMismatch",
    "HandleClosed",
]
