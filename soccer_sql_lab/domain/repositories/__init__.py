"""Repository interfaces for data access."""

from .relational_store import RelationalStore

__all__ = ["RelationalStore"]
