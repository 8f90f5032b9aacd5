"""Uniform tabular value type for query results."""

from typing import Any, Iterable, List, Literal, Sequence, Tuple

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field

ColumnType = Literal["integer", "float", "string", "boolean", "blob", "null"]


class ColumnSpec(BaseModel):
    """A named result column with its declared primitive type."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Column name as reported by the engine")
    dtype: ColumnType = Field(..., description="Primitive type of the values")


def _infer_column_type(values: Iterable[Any]) -> ColumnType:
    """Infer a primitive type from the non-null values of one column."""
    seen = set()
    for value in values:
        if value is None:
            continue
        if isinstance(value, float) and pd.isna(value):
            continue
        if isinstance(value, bool):
            seen.add("boolean")
        elif isinstance(value, int):
            seen.add("integer")
        elif isinstance(value, float):
            seen.add("float")
        elif isinstance(value, (bytes, bytearray, memoryview)):
            seen.add("blob")
        else:
            seen.add("string")

    if not seen:
        return "null"
    if len(seen) == 1:
        return seen.pop()
    if seen <= {"integer", "float"}:
        return "float"
    return "string"


def _dtype_from_pandas(series: pd.Series) -> ColumnType:
    if pd.api.types.is_bool_dtype(series):
        return "boolean"
    if pd.api.types.is_integer_dtype(series):
        return "integer"
    if pd.api.types.is_float_dtype(series):
        return "float" if series.notna().any() else "null"
    return _infer_column_type(series.tolist())


class QueryResult(BaseModel):
    """
    Materialized result of a SQL statement.

    An ordered list of typed columns plus an ordered sequence of rows. Two
    results are equal when their columns and rows are equal, which makes
    repeated read-only queries directly comparable.
    """

    model_config = ConfigDict(frozen=True)

    columns: List[ColumnSpec] = Field(default_factory=list)
    rows: List[Tuple[Any, ...]] = Field(default_factory=list)

    @classmethod
    def from_records(
        cls, column_names: Sequence[str], records: Sequence[Sequence[Any]]
    ) -> "QueryResult":
        """Build a result from DB-API column names and fetched rows."""
        rows = [tuple(record) for record in records]
        columns = [
            ColumnSpec(name=name, dtype=_infer_column_type(row[i] for row in rows))
            for i, name in enumerate(column_names)
        ]
        return cls(columns=columns, rows=rows)

    @classmethod
    def from_frame(cls, df: pd.DataFrame) -> "QueryResult":
        """Build a result from a DataFrame, mapping NaN to None."""
        columns = [
            ColumnSpec(name=str(name), dtype=_dtype_from_pandas(df.iloc[:, i]))
            for i, name in enumerate(df.columns)
        ]
        clean = df.astype(object).where(df.notna(), None)
        rows = [tuple(record) for record in clean.itertuples(index=False, name=None)]
        return cls(columns=columns, rows=rows)

    @property
    def column_names(self) -> List[str]:
        return [column.name for column in self.columns]

    def column(self, name: str) -> List[Any]:
        """Values of the first column called ``name``."""
        try:
            position = self.column_names.index(name)
        except ValueError:
            raise KeyError(f"Unknown column: {name}") from None
        return [row[position] for row in self.rows]

    def head(self, n: int = 6) -> "QueryResult":
        """First ``n`` rows, like R's ``head()`` default."""
        return QueryResult(columns=self.columns, rows=self.rows[:n])

    def to_frame(self) -> pd.DataFrame:
        """Convert to a pandas DataFrame with the same column order."""
        return pd.DataFrame.from_records(
            self.rows, columns=self.column_names, coerce_float=True
        )

    def __len__(self) -> int:
        return len(self.rows)
