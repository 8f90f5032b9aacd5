"""
ML Training module for match outcome classification.

Provides a unified API for building, tuning, finalizing and evaluating the
KNN and XGBoost classifiers on the assembled feature table.
"""

from .evaluator import ModelEvaluator
from .pipelines import (
    CLASSIFIER_MAP,
    MODEL_DISPLAY_NAMES,
    bake_training_data,
    build_pipeline,
    get_param_grid,
    regular_grid,
)
from .trainer import DataSplit, ModelTrainer
from .tuning_cache import (
    SearchResult,
    load_search_result,
    save_search_result,
    search_fingerprint,
    select_best,
)

__all__ = [
    # Core classes
    "ModelTrainer",
    "ModelEvaluator",
    "DataSplit",
    # Pipeline utilities
    "build_pipeline",
    "bake_training_data",
    "get_param_grid",
    "regular_grid",
    "CLASSIFIER_MAP",
    "MODEL_DISPLAY_NAMES",
    # Search results
    "SearchResult",
    "select_best",
    "search_fingerprint",
    "save_search_result",
    "load_search_result",
]
