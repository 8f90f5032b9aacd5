"""Tests for the feature-count XGBoost wrapper."""

import numpy as np
import pytest
from sklearn.base import clone
from sklearn.exceptions import NotFittedError

from soccer_sql_lab.domain.ml.classifiers import FeatureCountXGBClassifier


@pytest.fixture
def data():
    rng = np.random.default_rng(0)
    X = rng.normal(size=(90, 5))
    y = np.repeat([0, 1, 2], 30)
    X[:, 0] += y
    return X, y


class TestColumnSampling:
    """Tests for the mtry -> colsample_bynode conversion."""

    @pytest.mark.parametrize(
        "mtry, expected",
        [(None, 1.0), (1, 0.2), (2, 0.4), (5, 1.0), (10, 1.0)],
    )
    def test_fraction(self, data, mtry, expected):
        X, y = data
        model = FeatureCountXGBClassifier(mtry=mtry, n_estimators=5).fit(X, y)
        assert model.colsample_bynode_ == pytest.approx(expected)
        assert model.booster_.get_params()["colsample_bynode"] == pytest.approx(expected)

    def test_invalid_mtry(self, data):
        X, y = data
        with pytest.raises(ValueError, match="mtry"):
            FeatureCountXGBClassifier(mtry=0).fit(X, y)


class TestPrediction:
    """Tests for fitted predictions."""

    def test_probabilities(self, data):
        X, y = data
        model = FeatureCountXGBClassifier(n_estimators=10, random_state=1).fit(X, y)
        proba = model.predict_proba(X)

        assert proba.shape == (90, 3)
        np.testing.assert_allclose(proba.sum(axis=1), 1.0, rtol=1e-5)

    def test_predicts_original_labels(self, data):
        X, y = data
        labels = np.array(["L", "W", "D"])[y]
        model = FeatureCountXGBClassifier(n_estimators=10).fit(X, labels)

        assert set(model.predict(X)) <= {"L", "W", "D"}
        assert list(model.classes_) == ["D", "L", "W"]

    def test_unfitted(self, data):
        X, _ = data
        with pytest.raises(NotFittedError):
            FeatureCountXGBClassifier().predict(X)

    def test_clone(self):
        model = clone(FeatureCountXGBClassifier(mtry=3, n_estimators=50, learning_rate=0.1))
        assert model.get_params()["mtry"] == 3
        assert model.get_params()["learning_rate"] == 0.1
