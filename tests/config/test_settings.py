"""Tests for configuration loading and validation."""

import json

import pytest
from pydantic import ValidationError

from soccer_sql_lab.config.settings import (
    KNN_NEIGHBOR_PRESETS,
    KNNConfig,
    SoccerLabConfig,
    TuningConfig,
    XGBoostConfig,
    load_config,
)
from soccer_sql_lab.config.utils import (
    create_config_template,
    export_config_to_json,
    format_config_summary,
)
from soccer_sql_lab.domain.common.errors import SourceUnavailable


class TestDefaults:
    """Tests for documented defaults."""

    def test_defaults(self):
        config = SoccerLabConfig()

        assert config.split.random_seed == 1208
        assert config.split.test_size == 0.2
        assert config.split.cv_folds == 5
        assert config.knn.neighbors_range == KNN_NEIGHBOR_PRESETS["narrow"]
        assert config.knn.selection_metric == "accuracy"
        assert config.xgboost.selection_metric == "roc_auc"
        assert config.features.join_strategy == "emulated"
        assert config.features.outcome_labels == ["L", "W", "D"]

    def test_default_paths(self):
        paths = SoccerLabConfig().data.paths()
        assert paths["teamstats"].as_posix() == "data/preprocessed/teamstats.csv"
        assert len(paths) == 7

    def test_cache_paths(self):
        tuning = TuningConfig()
        assert tuning.cache_path("knn").name == "knn_tune.joblib"
        assert tuning.cache_path("xgboost").name == "xg_tune.joblib"
        with pytest.raises(ValueError, match="Unknown classifier"):
            tuning.cache_path("svm")


class TestValidation:
    """Tests for invalid configuration."""

    def test_model_predictors_must_be_projected(self):
        with pytest.raises(ValidationError, match="model_predictors"):
            SoccerLabConfig(features={"model_predictors": ["goals", "possession"]})

    def test_knn_range_order(self):
        with pytest.raises(ValidationError):
            KNNConfig(neighbors_range=(500, 10))

    def test_learn_rate_range(self):
        with pytest.raises(ValidationError):
            XGBoostConfig(learn_rate_log10_range=(-1.0, 2.0))

    def test_outcome_labels_distinct(self):
        with pytest.raises(ValidationError, match="distinct"):
            SoccerLabConfig(features={"outcome_labels": ["W", "W", "L"]})

    def test_unknown_metric(self):
        with pytest.raises(ValidationError):
            KNNConfig(selection_metric="f1")


class TestLoadConfig:
    """Tests for file, dict and environment sources."""

    def test_config_file(self, tmp_path):
        path = tmp_path / "lab.json"
        path.write_text(json.dumps({"split": {"random_seed": 42}}))

        assert load_config(path).split.random_seed == 42

    def test_config_data_merges_with_file(self, tmp_path):
        path = tmp_path / "lab.json"
        path.write_text(json.dumps({"split": {"random_seed": 42}}))

        config = load_config(path, config_data={"split": {"cv_folds": 3}})
        assert config.split.random_seed == 42
        assert config.split.cv_folds == 3

    def test_missing_file(self, tmp_path):
        with pytest.raises(SourceUnavailable, match="config"):
            load_config(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "lab.json"
        path.write_text("{not json")
        with pytest.raises(SourceUnavailable):
            load_config(path)

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("SOCCER_SPLIT_RANDOM_SEED", "7")
        monkeypatch.setenv("SOCCER_TUNING_USE_CACHE", "true")

        config = load_config()
        assert config.split.random_seed == 7
        assert config.tuning.use_cache is True

    def test_env_list_override(self, monkeypatch):
        monkeypatch.setenv("SOCCER_KNN_NEIGHBORS_RANGE", "1,15000")
        assert load_config().knn.neighbors_range == (1, 15000)

    def test_env_unknown_section_ignored(self, monkeypatch):
        monkeypatch.setenv("SOCCER_LAB_HOME", "/tmp")
        assert load_config() == SoccerLabConfig()

    def test_env_invalid_value(self, monkeypatch):
        monkeypatch.setenv("SOCCER_SPLIT_TEST_SIZE", "1.5")
        with pytest.raises(ValidationError):
            load_config()


class TestUtils:
    """Tests for export and summary helpers."""

    def test_export_round_trip(self, tmp_path):
        config = SoccerLabConfig(split={"random_seed": 99})
        path = tmp_path / "out" / "lab.json"
        export_config_to_json(config, path)

        assert load_config(path) == config

    def test_template_is_defaults(self):
        assert json.loads(create_config_template()) == SoccerLabConfig().model_dump(mode="json")

    def test_summary(self):
        summary = format_config_summary(SoccerLabConfig())
        assert "10-500" in summary
        assert "1208" in summary
