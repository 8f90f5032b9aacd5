"""
ModelTrainer - Split, tune and finalize the outcome classifiers.

Provides the training half of the modeling pipeline:
- Stratified train/test split and stratified CV folds
- Regular grid search scored on accuracy and ROC-AUC
- Cached search results keyed by a fingerprint of the search inputs
- Finalization of the best configuration on the full training partition
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import pandas as pd
from imblearn.pipeline import Pipeline
from loguru import logger
from sklearn.model_selection import GridSearchCV, StratifiedKFold, train_test_split

from soccer_sql_lab.config.settings import SoccerLabConfig
from soccer_sql_lab.domain.ml import FeatureSelector

from .pipelines import MODEL_DISPLAY_NAMES, SCORERS, build_pipeline, get_param_grid
from .tuning_cache import (
    SearchResult,
    load_search_result,
    save_search_result,
    search_fingerprint,
)


@dataclass
class DataSplit:
    """Training and test partitions of the feature table."""

    X_train: pd.DataFrame
    X_test: pd.DataFrame
    y_train: np.ndarray
    y_test: np.ndarray


class ModelTrainer:
    """
    Training orchestrator for the KNN and XGBoost outcome classifiers.

    Each stage is a separate method so callers (CLI, notebooks, tests) can
    stop after any of them.
    """

    def __init__(self, config: Optional[SoccerLabConfig] = None):
        """
        Initialize trainer with configuration.

        Args:
            config: Full lab configuration (features, split, grids, tuning)
        """
        self.config = config or SoccerLabConfig()

    @property
    def feature_names(self) -> List[str]:
        return list(self.config.features.model_predictors)

    def split(self, feature_table: pd.DataFrame) -> DataSplit:
        """
        Stratified train/test split on the outcome.

        Args:
            feature_table: Outcome column plus predictors

        Returns:
            DataSplit with integer class indices as targets
        """
        outcome = self.config.features.outcome_column
        X = feature_table.drop(columns=[outcome])
        y = feature_table[outcome].astype(int).to_numpy()

        X_train, X_test, y_train, y_test = train_test_split(
            X,
            y,
            test_size=self.config.split.test_size,
            stratify=y,
            random_state=self.config.split.random_seed,
        )
        logger.info(
            f"✂️  Split: {len(X_train)} training / {len(X_test)} test rows"
        )
        return DataSplit(
            X_train.reset_index(drop=True),
            X_test.reset_index(drop=True),
            y_train,
            y_test,
        )

    def folds(self) -> StratifiedKFold:
        return StratifiedKFold(
            n_splits=self.config.split.cv_folds,
            shuffle=True,
            random_state=self.config.split.random_seed,
        )

    def param_grid(self, classifier_name: str) -> Dict[str, List[Any]]:
        return get_param_grid(classifier_name, self.config.knn, self.config.xgboost)

    def selection_metric(self, classifier_name: str) -> str:
        if classifier_name == "knn":
            return self.config.knn.selection_metric
        if classifier_name == "xgboost":
            return self.config.xgboost.selection_metric
        raise ValueError(f"Unknown classifier: {classifier_name}")

    def build(
        self, classifier_name: str, params: Optional[Dict[str, Any]] = None
    ) -> Pipeline:
        return build_pipeline(
            classifier_name,
            self.feature_names,
            random_seed=self.config.split.random_seed,
            params=params,
            knn_weights=self.config.knn.weights,
            n_jobs=self.config.xgboost.n_jobs,
        )

    def fingerprint(self, classifier_name: str, X: pd.DataFrame, y: np.ndarray) -> str:
        """Cache key over the fitted predictors, outcome, grid, folds and seed."""
        settings = {}
        if classifier_name == "knn":
            settings["knn_weights"] = self.config.knn.weights
        return search_fingerprint(
            classifier_name,
            FeatureSelector(self.feature_names).transform(X),
            y,
            self.param_grid(classifier_name),
            self.config.split.cv_folds,
            self.config.split.random_seed,
            estimator_settings=settings,
        )

    def search(self, classifier_name: str, X: pd.DataFrame, y: np.ndarray) -> SearchResult:
        """
        Run the regular grid search with stratified CV.

        Every candidate is scored on both metrics; nothing is refit here.
        Failed fits (e.g. more neighbors than rows in a fold) score NaN.
        """
        param_grid = self.param_grid(classifier_name)
        n_candidates = int(np.prod([len(v) for v in param_grid.values()]))
        logger.info(
            f"🔍 Tuning {MODEL_DISPLAY_NAMES[classifier_name]}: "
            f"{n_candidates} candidates x {self.config.split.cv_folds} folds"
        )

        search = GridSearchCV(
            self.build(classifier_name),
            param_grid=param_grid,
            scoring=SCORERS,
            refit=False,
            cv=self.folds(),
            n_jobs=self.config.tuning.n_jobs,
            verbose=self.config.tuning.verbose,
            error_score=np.nan,
        )
        search.fit(X, y)

        return SearchResult.from_cv_results(
            classifier_name,
            search.cv_results_,
            param_grid,
            fingerprint=self.fingerprint(classifier_name, X, y),
        )

    def tune(self, classifier_name: str, X: pd.DataFrame, y: np.ndarray) -> SearchResult:
        """
        Search result for a classifier, from the cache when enabled.

        With ``use_cache`` the cache must exist and match the current inputs;
        otherwise the search runs and, with ``write_cache``, is saved.

        Raises:
            SourceUnavailable: If use_cache is set and the cache is missing
            StaleTuningCache: If use_cache is set and the cache is stale
        """
        tuning = self.config.tuning
        cache_path = tuning.cache_path(classifier_name)

        if tuning.use_cache:
            return load_search_result(
                cache_path, self.fingerprint(classifier_name, X, y)
            )

        result = self.search(classifier_name, X, y)
        if tuning.write_cache:
            save_search_result(result, cache_path)
        return result

    def finalize(
        self,
        classifier_name: str,
        params: Dict[str, Any],
        X: pd.DataFrame,
        y: np.ndarray,
    ) -> Pipeline:
        """Rebuild with the chosen parameters and fit on the full training partition."""
        logger.info(f"🎯 Finalizing {MODEL_DISPLAY_NAMES[classifier_name]}: {params}")
        pipeline = self.build(classifier_name, params)
        pipeline.fit(X, y)
        return pipeline

    def train(
        self, classifier_name: str, X: pd.DataFrame, y: np.ndarray
    ) -> Tuple[Pipeline, Dict[str, Any]]:
        """
        Tune, select and finalize one classifier.

        Returns:
            Tuple of (fitted_pipeline, metadata_dict)
        """
        result = self.tune(classifier_name, X, y)
        metric = self.selection_metric(classifier_name)
        best = result.best_candidate(metric)
        best_params = dict(best.params)
        best_score = getattr(best, f"mean_{metric}")
        logger.info(f"   Best CV {metric}: {best_score:.4f} with {best_params}")

        pipeline = self.finalize(classifier_name, best_params, X, y)
        metadata = {
            "classifier": classifier_name,
            "selection_metric": metric,
            "best_params": best_params,
            "best_score": best_score,
            "search": result,
            "n_samples": len(y),
        }
        return pipeline, metadata

