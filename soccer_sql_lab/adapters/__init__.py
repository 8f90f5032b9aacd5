"""Infrastructure adapters for repository pattern implementations."""

from .sqlite_store import SQLiteRelationalStore, open_store, supports_full_outer_join

__all__ = ["SQLiteRelationalStore", "open_store", "supports_full_outer_join"]
