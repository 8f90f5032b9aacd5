"""
Soccer SQL Lab Utilities Module

Common utility functions used across the CLI and notebooks including:
- Logging setup
- Data formatting and display helpers
"""

import sys
from typing import Optional

import pandas as pd
from loguru import logger

from soccer_sql_lab.domain.models.table import QueryResult


def configure_logging(verbose: bool = False) -> None:
    """
    Route loguru output to stderr at INFO, or DEBUG when verbose

    Args:
        verbose: Include SQL text and other debug messages
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "INFO",
        format="<level>{message}</level>",
    )


def create_display_dataframe(
    data, max_rows: Optional[int] = None, round_decimals: int = 4
) -> pd.DataFrame:
    """
    Create a cleaned DataFrame for display

    Args:
        data: QueryResult or DataFrame
        max_rows: Keep only the first rows
        round_decimals: Number of decimal places for rounding

    Returns:
        DataFrame ready for display
    """
    df = data.to_frame() if isinstance(data, QueryResult) else data.copy()
    if max_rows is not None:
        df = df.head(max_rows)

    numeric_columns = df.select_dtypes(include="float").columns
    df[numeric_columns] = df[numeric_columns].round(round_decimals)
    return df


def format_table(data, max_rows: Optional[int] = None) -> str:
    """Plain-text rendering of a result for terminal output."""
    df = create_display_dataframe(data, max_rows=max_rows)
    if df.empty and len(df.columns) == 0:
        return "(no columns)"
    return df.to_string(index=False)
