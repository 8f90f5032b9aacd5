"""
Soccer SQL Lab Utility Functions

This package contains common utility functions for:
- Logging setup
- Data formatting and display helpers
"""

from .helpers import configure_logging, create_display_dataframe, format_table

__all__ = ["configure_logging", "create_display_dataframe", "format_table"]
