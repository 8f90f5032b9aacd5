"""Repository interface for relational storage."""

from abc import ABC, abstractmethod
from typing import List, Mapping, Set, TYPE_CHECKING

from loguru import logger

from ..common.errors import QueryRuntimeError
from ..models.table import QueryResult

if TYPE_CHECKING:
    import pandas


class RelationalStore(ABC):
    """
    Abstract relational store.

    Owns a single database handle. The handle is acquired when the store is
    opened and released by ``close()``; the store is a context manager so
    callers get release on every exit path.
    """

    @abstractmethod
    def register(self, name: str, table: "pandas.DataFrame") -> None:
        """
        Write an in-memory table as a named relation.

        Args:
            name: Relation name
            table: Table to write

        Raises:
            RelationAlreadyExists: If ``name`` is already present
        """
        pass

    @abstractmethod
    def list_relations(self) -> Set[str]:
        """Names of all relations currently in the store."""
        pass

    @abstractmethod
    def columns(self, name: str) -> List[str]:
        """Ordered column names of a relation."""
        pass

    @abstractmethod
    def execute(self, sql: str) -> QueryResult:
        """
        Run exactly the given SQL text and materialize the result.

        Raises:
            QuerySyntaxError: If the engine cannot parse the statement
            QueryRuntimeError: If the statement fails while running
        """
        pass

    @abstractmethod
    def drop_relation(self, name: str) -> None:
        """Remove a relation from the store."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the handle. Later operations raise HandleClosed."""
        pass

    @property
    @abstractmethod
    def closed(self) -> bool:
        pass

    @property
    def supports_full_outer_join(self) -> bool:
        """Whether the engine runs FULL OUTER JOIN natively."""
        return False

    def has_relation(self, name: str) -> bool:
        return name in self.list_relations()

    def register_all(
        self, tables: Mapping[str, "pandas.DataFrame"], skip_existing: bool = False
    ) -> List[str]:
        """
        Register several tables in mapping order.

        Args:
            tables: Relation name -> table
            skip_existing: Skip names already present instead of failing

        Returns:
            Names that were actually written
        """
        written = []
        for name, table in tables.items():
            if skip_existing and self.has_relation(name):
                logger.warning(f"   Skipping {name}: relation already exists")
                continue
            self.register(name, table)
            written.append(name)
        return written

    def read_relation(self, name: str) -> "pandas.DataFrame":
        """Collect a whole relation into a DataFrame."""
        if not self.has_relation(name):
            raise QueryRuntimeError(f"no such table: {name}")
        return self.execute(f'SELECT * FROM "{name}"').to_frame()

    def __enter__(self) -> "RelationalStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
