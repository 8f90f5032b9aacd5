"""
Pipeline construction and hyperparameter grids for outcome classification.

Centralizes classifier definitions, regular tuning grids, and the shared
preprocessing recipe (upsample -> dummy-encode -> normalize) in one place.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd
from imblearn.over_sampling import RandomOverSampler
from imblearn.pipeline import Pipeline
from sklearn.compose import ColumnTransformer, make_column_selector
from sklearn.neighbors import KNeighborsClassifier
from sklearn.pipeline import Pipeline as SkPipeline
from sklearn.preprocessing import OneHotEncoder

from soccer_sql_lab.config.settings import KNNConfig, XGBoostConfig
from soccer_sql_lab.domain.ml import (
    FeatureCountXGBClassifier,
    FeatureSelector,
    SampleStandardScaler,
)


# =============================================================================
# CLASSIFIER DEFINITIONS
# =============================================================================

CLASSIFIER_MAP = {
    "knn": "KNeighborsClassifier",
    "xgboost": "FeatureCountXGBClassifier",
}

MODEL_DISPLAY_NAMES = {
    "knn": "K-Nearest Neighbors",
    "xgboost": "Extreme Gradient Boosting",
}

# Selection metric -> sklearn scorer
SCORERS = {
    "accuracy": "accuracy",
    "roc_auc": "roc_auc_ovr",
}


def get_classifier(
    classifier_name: str,
    random_seed: int = 1208,
    knn_weights: str = "uniform",
    n_jobs: int = 1,
) -> Any:
    """
    Get classifier instance by name.

    Args:
        classifier_name: "knn" or "xgboost"
        random_seed: Random seed for reproducibility
        knn_weights: Neighbor vote weighting for KNN
        n_jobs: Threads for XGBoost

    Returns:
        Unfitted classifier
    """
    if classifier_name == "knn":
        return KNeighborsClassifier(weights=knn_weights)

    elif classifier_name == "xgboost":
        return FeatureCountXGBClassifier(random_state=random_seed, n_jobs=n_jobs)

    else:
        raise ValueError(f"Unknown classifier: {classifier_name}")


# =============================================================================
# TUNING GRIDS
# =============================================================================


def regular_grid(
    low: float, high: float, levels: int, integer: bool = False
) -> List[Union[int, float]]:
    """
    Evenly spaced values from ``low`` to ``high`` inclusive.

    Integer parameters are rounded half-to-even and de-duplicated, so narrow
    ranges may return fewer than ``levels`` values.
    """
    if levels < 1:
        raise ValueError(f"levels must be >= 1, got {levels}")
    values = np.linspace(low, high, levels) if levels > 1 else np.array([low])
    if integer:
        return sorted({int(v) for v in np.round(values)})
    return [float(v) for v in values]


def log10_grid(low_exponent: float, high_exponent: float, levels: int) -> List[float]:
    """Values evenly spaced in log10 between 10**low and 10**high."""
    return [float(10**e) for e in regular_grid(low_exponent, high_exponent, levels)]


def get_param_grid(
    classifier_name: str,
    knn_config: Optional[KNNConfig] = None,
    xgboost_config: Optional[XGBoostConfig] = None,
) -> Dict[str, List[Any]]:
    """
    Get the regular search grid for a classifier.

    All keys are prefixed with 'classifier__' for Pipeline compatibility.
    """
    if classifier_name == "knn":
        cfg = knn_config or KNNConfig()
        low, high = cfg.neighbors_range
        return {"classifier__n_neighbors": regular_grid(low, high, cfg.levels, integer=True)}

    elif classifier_name == "xgboost":
        cfg = xgboost_config or XGBoostConfig()
        return {
            "classifier__mtry": regular_grid(*cfg.mtry_range, cfg.levels, integer=True),
            "classifier__n_estimators": regular_grid(
                *cfg.trees_range, cfg.levels, integer=True
            ),
            "classifier__learning_rate": log10_grid(
                *cfg.learn_rate_log10_range, cfg.levels
            ),
        }

    else:
        raise ValueError(f"Unknown classifier: {classifier_name}")


# =============================================================================
# PREPROCESSING
# =============================================================================


def create_dummy_encoder() -> ColumnTransformer:
    """One-hot encode nominal predictors, dropping the first level."""
    return ColumnTransformer(
        transformers=[
            (
                "nominal",
                OneHotEncoder(drop="first", handle_unknown="ignore", sparse_output=False),
                make_column_selector(dtype_include=["object", "category"]),
            )
        ],
        remainder="passthrough",
        verbose_feature_names_out=False,
    )


def preprocessing_steps() -> List[Tuple[str, Any]]:
    """
    Dummy-encode nominal predictors, then normalize every predictor.

    Both steps learn their statistics in ``fit`` and reuse them in
    ``transform``, so validation and test folds are scaled with the
    training fold's mean and sample standard deviation.
    """
    return [("dummy", create_dummy_encoder()), ("normalize", SampleStandardScaler())]


def create_preprocessor() -> SkPipeline:
    """Standalone preprocessing recipe for already-resampled data."""
    return SkPipeline(preprocessing_steps())


def create_upsampler(random_seed: int = 1208) -> RandomOverSampler:
    """Oversample minority outcome classes up to the majority count."""
    return RandomOverSampler(sampling_strategy="not majority", random_state=random_seed)


def bake_training_data(
    X: pd.DataFrame,
    y: Sequence,
    feature_names: List[str],
    random_seed: int = 1208,
) -> Tuple[pd.DataFrame, np.ndarray, SkPipeline]:
    """
    Prep the recipe on training data and return the baked training matrix.

    Args:
        X: Training features (may include extra columns)
        y: Training outcome
        feature_names: Predictors to keep
        random_seed: Seed for the upsampler

    Returns:
        Tuple of (baked_X, upsampled_y, fitted_transformer). The transformer
        selects, encodes and scales new data without resampling it.
    """
    selector = FeatureSelector(feature_names)
    X_selected = selector.transform(X)
    X_upsampled, y_upsampled = create_upsampler(random_seed).fit_resample(
        X_selected, np.asarray(y)
    )
    preprocessor = create_preprocessor().set_output(transform="pandas")
    X_baked = preprocessor.fit_transform(X_upsampled)

    transformer = SkPipeline(
        [("feature_selector", selector), *preprocessor.steps]
    )
    return X_baked, np.asarray(y_upsampled), transformer


# =============================================================================
# PIPELINE CONSTRUCTION
# =============================================================================


def build_pipeline(
    classifier_name: str,
    feature_names: List[str],
    random_seed: int = 1208,
    params: Optional[Dict[str, Any]] = None,
    knn_weights: str = "uniform",
    n_jobs: int = 1,
) -> Pipeline:
    """
    Build a complete imbalanced-learn Pipeline.

    Pipeline structure:
    1. FeatureSelector - selects and orders the model predictors
    2. RandomOverSampler - balances classes; runs during fit only
    3. ColumnTransformer - dummy-encodes nominal predictors
    4. SampleStandardScaler - normalizes with training mean and sd
    5. Classifier - KNN or gradient-boosted trees

    Args:
        classifier_name: Name of classifier
        feature_names: Predictors to use
        random_seed: Random seed
        params: Optional hyperparameters to set on pipeline
        knn_weights: Neighbor vote weighting for KNN
        n_jobs: Threads for XGBoost

    Returns:
        Configured Pipeline
    """
    classifier = get_classifier(classifier_name, random_seed, knn_weights, n_jobs)

    pipeline = Pipeline(
        [
            ("feature_selector", FeatureSelector(list(feature_names))),
            ("upsample", create_upsampler(random_seed)),
            *preprocessing_steps(),
            ("classifier", classifier),
        ]
    )

    if params:
        pipeline.set_params(**params)

    return pipeline
