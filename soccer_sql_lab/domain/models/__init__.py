"""Domain models."""

from .schema import RELATION_NAMES, RELATION_SCHEMAS, RelationSchema
from .table import ColumnSpec, QueryResult

__all__ = [
    "ColumnSpec",
    "QueryResult",
    "RelationSchema",
    "RELATION_SCHEMAS",
    "RELATION_NAMES",
]
