"""
Soccer SQL Lab Configuration Module

Provides centralized configuration management for the entire pipeline.
Import the global config instance to access all configuration values.

Usage:
    from soccer_sql_lab.config import config

    # Database location
    db_path = config.database.path

    # KNN grid bounds and selection metric
    low, high = config.knn.neighbors_range
    metric = config.knn.selection_metric
"""

from .settings import (
    KNN_NEIGHBOR_PRESETS,
    DataLoadingConfig,
    DatabaseConfig,
    EvaluationConfig,
    FeatureConfig,
    KNNConfig,
    SoccerLabConfig,
    SplitConfig,
    TuningConfig,
    XGBoostConfig,
    config,
    load_config,
)

__all__ = [
    "SoccerLabConfig",
    "DataLoadingConfig",
    "DatabaseConfig",
    "FeatureConfig",
    "SplitConfig",
    "KNNConfig",
    "XGBoostConfig",
    "TuningConfig",
    "EvaluationConfig",
    "KNN_NEIGHBOR_PRESETS",
    "config",
    "load_config",
]
