"""Custom sklearn transformers for the outcome-classification pipelines."""

from typing import List

import numpy as np
import pandas as pd
from sklearn.base import BaseEstimator, TransformerMixin
from sklearn.preprocessing import StandardScaler


class FeatureSelector(TransformerMixin, BaseEstimator):
    """
    Keep the model predictors of a feature table, in configured order.

    The assembled table carries every team-game statistic plus the outcome;
    pipelines are handed the whole table and pick their own columns.
    """

    def __init__(self, feature_names: List[str]):
        self.feature_names = feature_names

    def _check(self, X) -> None:
        if not isinstance(X, pd.DataFrame):
            raise TypeError(
                f"FeatureSelector requires DataFrame input, got {type(X).__name__}"
            )
        missing = [name for name in self.feature_names if name not in X.columns]
        if missing:
            raise ValueError(f"Missing required features: {sorted(missing)}")

    def fit(self, X, y=None):
        self._check(X)
        return self

    def transform(self, X):
        self._check(X)
        return X.loc[:, list(self.feature_names)]

    def get_feature_names_out(self, input_features=None):
        return np.array(self.feature_names)


class SampleStandardScaler(StandardScaler):
    """
    StandardScaler dividing by the sample standard deviation (ddof=1).

    Training columns come out with mean 0 and sample sd 1; ``transform``
    reuses the learned mean and sd on new data.
    """

    def fit(self, X, y=None, sample_weight=None):
        super().fit(X, y, sample_weight)
        if self.with_std:
            n = np.asarray(self.n_samples_seen_, dtype=float)
            correction = np.sqrt(np.where(n > 1, n / np.maximum(n - 1, 1), 1.0))
            self.scale_ = self.scale_ * correction
        return self
