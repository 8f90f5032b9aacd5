"""Data loading service for the football-statistics CSVs."""

from pathlib import Path
from typing import Dict, Mapping, Optional, Union

import pandas as pd
from loguru import logger

from soccer_sql_lab.config.settings import DataLoadingConfig
from soccer_sql_lab.domain.common.errors import SourceUnavailable
from soccer_sql_lab.domain.models.schema import RELATION_SCHEMAS


def load_table(path: Union[str, Path]) -> pd.DataFrame:
    """
    Read one delimited file with a header row.

    Column names are preserved and primitive types (integer, float, string)
    are inferred per column. Nothing is filtered or imputed.

    Raises:
        SourceUnavailable: If the file is missing, empty or unreadable
    """
    path = Path(path)
    if not path.is_file():
        raise SourceUnavailable(f"Input file not found: {path}", details={"path": str(path)})
    try:
        return pd.read_csv(path, encoding="utf-8")
    except (
        OSError,
        UnicodeDecodeError,
        pd.errors.EmptyDataError,
        pd.errors.ParserError,
    ) as e:
        raise SourceUnavailable(
            f"Cannot read {path}: {e}", details={"path": str(path)}
        ) from e


def load_tables(paths: Mapping[str, Union[str, Path]]) -> Dict[str, pd.DataFrame]:
    """
    Load each named file into a DataFrame.

    Args:
        paths: Relation name -> file path

    Returns:
        Relation name -> table, in the order of ``paths``
    """
    tables = {}
    for name, path in paths.items():
        tables[name] = load_table(path)
        logger.info(f"   Loaded {name}: {len(tables[name])} rows from {Path(path).name}")
    return tables


class DataLoadingService:
    """Service for loading the seven source relations from disk."""

    def __init__(self, config: Optional[DataLoadingConfig] = None):
        self.config = config or DataLoadingConfig()

    def load(self) -> Dict[str, pd.DataFrame]:
        """Load all configured relations - FAIL FAST on missing files or columns.

        Returns:
            Relation name -> table

        Raises:
            SourceUnavailable: If any file is missing or unreadable
            SchemaMismatch: If validation is on and a required column is absent
        """
        logger.info(f"📦 Loading CSVs from {self.config.data_dir}...")
        tables = load_tables(self.config.paths())

        if self.config.validate_schemas:
            for name, table in tables.items():
                RELATION_SCHEMAS[name].validate_columns(table.columns)

        return tables
