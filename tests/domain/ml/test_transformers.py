"""Tests for custom sklearn transformers."""

import numpy as np
import pandas as pd
import pytest
from sklearn.base import clone

from soccer_sql_lab.domain.ml.transformers import FeatureSelector, SampleStandardScaler


@pytest.fixture
def frame():
    return pd.DataFrame(
        {"goals": [1, 2], "shots": [10, 12], "corners": [4, 5], "result": [1, 0]}
    )


class TestFeatureSelector:
    """Tests for FeatureSelector."""

    def test_selects_in_configured_order(self, frame):
        selected = FeatureSelector(["shots", "goals"]).fit(frame).transform(frame)
        assert list(selected.columns) == ["shots", "goals"]

    def test_requires_dataframe(self, frame):
        with pytest.raises(TypeError, match="DataFrame"):
            FeatureSelector(["goals"]).transform(frame.to_numpy())

    def test_missing_feature(self, frame):
        with pytest.raises(ValueError, match="deep"):
            FeatureSelector(["goals", "deep"]).transform(frame)

    def test_feature_names_out(self):
        names = FeatureSelector(["goals", "shots"]).get_feature_names_out()
        np.testing.assert_array_equal(names, ["goals", "shots"])

    def test_clone_keeps_params(self):
        selector = clone(FeatureSelector(["goals"]))
        assert selector.get_params() == {"feature_names": ["goals"]}

    def test_missing_feature_at_fit(self, frame):
        with pytest.raises(ValueError, match="deep"):
            FeatureSelector(["deep"]).fit(frame)


class TestSampleStandardScaler:
    """Tests for normalization with the sample standard deviation."""

    def test_training_columns_have_unit_sample_sd(self, frame):
        X = frame[["goals", "shots"]].assign(goals=[1, 4], shots=[10, 17])
        scaled = SampleStandardScaler().fit_transform(X)

        np.testing.assert_allclose(scaled.mean(axis=0), 0.0, atol=1e-12)
        np.testing.assert_allclose(scaled.std(axis=0, ddof=1), 1.0)

    def test_new_data_uses_learned_statistics(self):
        train = np.array([[1.0], [2.0], [3.0], [6.0]])
        scaler = SampleStandardScaler().fit(train)

        expected = (np.array([[4.0]]) - train.mean()) / train.std(ddof=1)
        np.testing.assert_allclose(scaler.transform(np.array([[4.0]])), expected)

    def test_constant_column_maps_to_zero(self):
        scaled = SampleStandardScaler().fit_transform(np.array([[5.0], [5.0], [5.0]]))
        np.testing.assert_allclose(scaled, 0.0)
