"""SQLite implementation of the relational store."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Set, Union

import pandas as pd
from loguru import logger

from soccer_sql_lab.domain.common.errors import (
    HandleClosed,
    QueryRuntimeError,
    QuerySyntaxError,
    RelationAlreadyExists,
    SoccerLabError,
)
from soccer_sql_lab.domain.models.table import QueryResult
from soccer_sql_lab.domain.repositories.relational_store import RelationalStore

# SQLite added FULL OUTER JOIN in 3.39.0
FULL_OUTER_JOIN_MIN_VERSION = (3, 39, 0)

_SYNTAX_MARKERS = ("syntax error", "incomplete input", "unrecognized token")


def supports_full_outer_join() -> bool:
    """Whether the linked SQLite library understands FULL OUTER JOIN."""
    return sqlite3.sqlite_version_info >= FULL_OUTER_JOIN_MIN_VERSION


def _translate_error(error: Exception, sql: str) -> SoccerLabError:
    """Map an engine error onto the package taxonomy, keeping its message."""
    message = str(error)
    details = {"sql": sql, "engine_error": type(error).__name__}
    if isinstance(error, sqlite3.OperationalError) and any(
        marker in message for marker in _SYNTAX_MARKERS
    ):
        return QuerySyntaxError(message, details=details)
    return QueryRuntimeError(message, details=details)


class SQLiteRelationalStore(RelationalStore):
    """
    Relational store backed by a single SQLite file.

    Use ``SQLiteRelationalStore.open(path)`` (or ``open_store``) rather than
    the constructor; both create the file and its parent directory if absent.

    Example:
        >>> with SQLiteRelationalStore.open("data/databases/soccer") as store:
        ...     store.register("teams", teams_df)
        ...     store.execute("SELECT count(*) FROM teams")
    """

    def __init__(self, connection: sqlite3.Connection, path: Union[str, Path]):
        self._connection: Optional[sqlite3.Connection] = connection
        self.path = path

    @classmethod
    def open(cls, path: Union[str, Path]) -> "SQLiteRelationalStore":
        """Open (or create) the database file at ``path``."""
        if str(path) != ":memory:":
            path = Path(path)
            path.parent.mkdir(parents=True, exist_ok=True)
        connection = sqlite3.connect(str(path))
        store = cls(connection, path)
        logger.info(
            f"🗄️  Opened {path} ({len(store.list_relations())} existing relations)"
        )
        return store

    @property
    def closed(self) -> bool:
        return self._connection is None

    def _require_open(self) -> sqlite3.Connection:
        if self._connection is None:
            raise HandleClosed(f"Store handle for {self.path} is closed")
        return self._connection

    @property
    def supports_full_outer_join(self) -> bool:
        return supports_full_outer_join()

    def has_relation(self, name: str) -> bool:
        # SQLite identifiers are case-insensitive
        return name.lower() in {n.lower() for n in self.list_relations()}

    def register(self, name: str, table: pd.DataFrame) -> None:
        connection = self._require_open()
        if self.has_relation(name):
            raise RelationAlreadyExists(
                f"Relation '{name}' already exists in {self.path}",
                details={"relation": name},
            )
        try:
            table.to_sql(name, connection, index=False, if_exists="fail")
        except (sqlite3.Error, pd.errors.DatabaseError, ValueError) as e:
            raise _translate_error(e, f"CREATE TABLE \"{name}\"") from e
        connection.commit()
        logger.info(f"   Registered {name}: {len(table)} rows x {table.shape[1]} cols")

    def list_relations(self) -> Set[str]:
        connection = self._require_open()
        cursor = connection.execute(
            "SELECT name FROM sqlite_master "
            "WHERE type IN ('table', 'view') AND name NOT LIKE 'sqlite_%'"
        )
        return {row[0] for row in cursor.fetchall()}

    def columns(self, name: str) -> List[str]:
        connection = self._require_open()
        if not self.has_relation(name):
            raise QueryRuntimeError(f"no such table: {name}")
        cursor = connection.execute(f'PRAGMA table_info("{name}")')
        return [row[1] for row in cursor.fetchall()]

    def execute(self, sql: str) -> QueryResult:
        connection = self._require_open()
        logger.debug(f"SQL: {' '.join(sql.split())}")
        try:
            cursor = connection.execute(sql)
            records = cursor.fetchall()
        except (sqlite3.Error, sqlite3.Warning) as e:
            raise _translate_error(e, sql) from e

        if connection.in_transaction:
            connection.commit()

        column_names = [d[0] for d in cursor.description or ()]
        return QueryResult.from_records(column_names, records)

    def drop_relation(self, name: str) -> None:
        connection = self._require_open()
        if not self.has_relation(name):
            raise QueryRuntimeError(f"no such table: {name}")
        connection.execute(f'DROP TABLE "{name}"')
        connection.commit()
        logger.info(f"   Dropped {name}")

    def close(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None
            logger.debug(f"Closed {self.path}")


@contextmanager
def open_store(path: Union[str, Path]) -> Iterator[SQLiteRelationalStore]:
    """Open a store for the duration of a ``with`` block."""
    store = SQLiteRelationalStore.open(path)
    try:
        yield store
    finally:
        store.close()
