"""
Classifier wrappers used by the tuning pipelines.

XGBoost samples columns by fraction, while the tuning grid is expressed as a
count of predictors per split (``mtry``). ``FeatureCountXGBClassifier``
converts the count once the number of incoming features is known.
"""

from typing import Optional

import numpy as np
import xgboost as xgb
from sklearn.base import BaseEstimator, ClassifierMixin
from sklearn.utils.validation import check_is_fitted


class FeatureCountXGBClassifier(ClassifierMixin, BaseEstimator):
    """
    Gradient-boosted trees with a feature-count column sampler.

    Parameters
    ----------
    mtry : int, optional
        Predictors sampled at each split. Counts above the number of
        features are capped; None uses every feature.
    n_estimators : int
        Number of boosting rounds (trees).
    learning_rate : float
        Shrinkage applied to each tree.
    random_state : int, optional
        Seed passed to XGBoost.
    n_jobs : int
        Threads used by XGBoost.
    """

    def __init__(
        self,
        mtry: Optional[int] = None,
        n_estimators: int = 100,
        learning_rate: float = 0.3,
        random_state: Optional[int] = None,
        n_jobs: int = 1,
    ):
        self.mtry = mtry
        self.n_estimators = n_estimators
        self.learning_rate = learning_rate
        self.random_state = random_state
        self.n_jobs = n_jobs

    def _colsample_bynode(self, n_features: int) -> float:
        if self.mtry is None:
            return 1.0
        if self.mtry < 1:
            raise ValueError(f"mtry must be >= 1, got {self.mtry}")
        return min(self.mtry, n_features) / n_features

    def fit(self, X, y):
        X = np.asarray(X, dtype=float)
        self.classes_, y_encoded = np.unique(np.asarray(y), return_inverse=True)
        self.n_features_in_ = X.shape[1]
        self.colsample_bynode_ = self._colsample_bynode(self.n_features_in_)

        self.booster_ = xgb.XGBClassifier(
            n_estimators=self.n_estimators,
            learning_rate=self.learning_rate,
            colsample_bynode=self.colsample_bynode_,
            random_state=self.random_state,
            n_jobs=self.n_jobs,
            tree_method="hist",
        )
        self.booster_.fit(X, y_encoded)
        return self

    def predict_proba(self, X):
        check_is_fitted(self, "booster_")
        return self.booster_.predict_proba(np.asarray(X, dtype=float))

    def predict(self, X):
        proba = self.predict_proba(X)
        return self.classes_[np.argmax(proba, axis=1)]
