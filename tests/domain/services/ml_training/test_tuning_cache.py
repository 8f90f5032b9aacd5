"""Tests for search results and the tuning cache."""

import math

import numpy as np
import pandas as pd
import pytest

from soccer_sql_lab.domain.common.errors import SourceUnavailable, StaleTuningCache
from soccer_sql_lab.domain.services.ml_training.tuning_cache import (
    SearchResult,
    load_search_result,
    save_search_result,
    search_fingerprint,
    select_best,
)

GRID = {"classifier__n_neighbors": [3, 5, 7]}


def _cv_results(accuracy, roc_auc):
    return {
        "params": [{"classifier__n_neighbors": np.int64(k)} for k in GRID["classifier__n_neighbors"]],
        "mean_test_accuracy": np.array(accuracy),
        "std_test_accuracy": np.full(len(accuracy), 0.01),
        "mean_test_roc_auc": np.array(roc_auc),
        "std_test_roc_auc": np.full(len(roc_auc), 0.02),
    }


@pytest.fixture
def result():
    return SearchResult.from_cv_results(
        "knn", _cv_results([0.5, 0.6, 0.55], [0.7, 0.65, 0.8]), GRID, fingerprint="abc"
    )


@pytest.fixture
def training_data():
    X = pd.DataFrame({"goals": [0, 1, 2, 3], "shots": [5, 6, 7, 8]})
    y = np.array([0, 1, 2, 1])
    return X, y


class TestSearchResult:
    """Tests for SearchResult."""

    def test_from_cv_results(self, result):
        assert len(result.candidates) == 3
        assert result.candidates[0].params == {"classifier__n_neighbors": 3}
        assert type(result.candidates[0].params["classifier__n_neighbors"]) is int

    def test_to_frame(self, result):
        df = result.to_frame()
        assert list(df.columns) == [
            "classifier__n_neighbors",
            "mean_accuracy",
            "std_accuracy",
            "mean_roc_auc",
            "std_roc_auc",
        ]
        assert len(df) == 3

    def test_select_best_per_metric(self, result):
        assert result.select_best("accuracy") == {"classifier__n_neighbors": 5}
        assert select_best(result, "roc_auc") == {"classifier__n_neighbors": 7}

    def test_ties_keep_grid_order(self):
        tied = SearchResult.from_cv_results("knn", _cv_results([0.6, 0.6, 0.5], [0.7] * 3), GRID)
        assert tied.select_best("accuracy") == {"classifier__n_neighbors": 3}

    def test_failed_candidates_skipped(self):
        partial = SearchResult.from_cv_results(
            "knn", _cv_results([math.nan, 0.4, math.nan], [math.nan, 0.6, math.nan]), GRID
        )
        assert partial.select_best("roc_auc") == {"classifier__n_neighbors": 5}

    def test_all_failed(self):
        failed = SearchResult.from_cv_results("knn", _cv_results([math.nan] * 3, [math.nan] * 3), GRID)
        with pytest.raises(ValueError, match="No candidate"):
            failed.select_best("accuracy")

    def test_unknown_metric(self, result):
        with pytest.raises(ValueError, match="Unknown metric"):
            result.select_best("f1")


class TestFingerprint:
    """Tests for search_fingerprint."""

    def test_deterministic(self, training_data):
        X, y = training_data
        assert search_fingerprint("knn", X, y, GRID, 5, 1208) == search_fingerprint(
            "knn", X.copy(), y.copy(), GRID, 5, 1208
        )

    @pytest.mark.parametrize(
        "change",
        ["classifier", "data", "predictors", "outcome", "grid", "folds", "seed", "settings"],
    )
    def test_sensitive_to_each_input(self, training_data, change):
        X, y = training_data
        base = dict(classifier="knn", X=X, y=y, param_grid=GRID, cv_folds=5, random_seed=1208)
        changed = dict(base)
        if change == "classifier":
            changed["classifier"] = "xgboost"
        elif change == "data":
            changed["X"] = X.assign(goals=X["goals"] + 1)
        elif change == "predictors":
            changed["X"] = X[["goals"]]
        elif change == "outcome":
            changed["y"] = y[::-1]
        elif change == "grid":
            changed["param_grid"] = {"classifier__n_neighbors": [3, 5]}
        elif change == "folds":
            changed["cv_folds"] = 3
        elif change == "settings":
            changed["estimator_settings"] = {"knn_weights": "distance"}
        else:
            changed["random_seed"] = 1

        assert search_fingerprint(**base) != search_fingerprint(**changed)


class TestCacheFiles:
    """Tests for saving and loading cached searches."""

    def test_round_trip(self, tmp_path, result):
        path = tmp_path / "tuning" / "knn_tune.joblib"
        save_search_result(result, path)

        assert load_search_result(path, "abc") == result

    def test_missing_cache(self, tmp_path):
        with pytest.raises(SourceUnavailable, match="not found"):
            load_search_result(tmp_path / "missing.joblib", "abc")

    def test_stale_cache(self, tmp_path, result):
        path = tmp_path / "knn_tune.joblib"
        save_search_result(result, path)

        with pytest.raises(StaleTuningCache) as exc_info:
            load_search_result(path, "def")
        assert isinstance(exc_info.value, SourceUnavailable)
        assert exc_info.value.details["cached"] == "abc"

    def test_corrupt_cache(self, tmp_path):
        path = tmp_path / "knn_tune.joblib"
        path.write_bytes(b"not a joblib file")
        with pytest.raises(SourceUnavailable, match="Cannot read"):
            load_search_result(path, "abc")
