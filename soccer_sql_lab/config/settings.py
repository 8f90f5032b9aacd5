"""
Global Configuration System for the Soccer SQL Lab

Centralized configuration for every path, seed, grid bound and metric choice
used by the pipeline. Provides type-safe configuration with validation and
environment variable support.
"""

import json
import os
from pathlib import Path
from typing import Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator

from soccer_sql_lab.domain.common.errors import SourceUnavailable
from soccer_sql_lab.domain.models.schema import RELATION_NAMES

SelectionMetric = Literal["accuracy", "roc_auc"]

# Neighbor-count bounds used by the two walkthrough drafts
KNN_NEIGHBOR_PRESETS: Dict[str, Tuple[int, int]] = {
    "narrow": (10, 500),
    "wide": (1, 15000),
}


class DataLoadingConfig(BaseModel):
    """Input CSV locations"""

    data_dir: Path = Field(
        default=Path("data/preprocessed"), description="Directory holding the CSVs"
    )
    file_names: Dict[str, str] = Field(
        default_factory=lambda: {name: f"{name}.csv" for name in RELATION_NAMES},
        description="Relation name -> file name inside data_dir",
    )
    validate_schemas: bool = Field(
        default=True, description="Check required columns after loading"
    )

    @field_validator("file_names")
    @classmethod
    def validate_relations(cls, v: Dict[str, str]) -> Dict[str, str]:
        missing = [name for name in RELATION_NAMES if name not in v]
        if missing:
            raise ValueError(f"file_names is missing relations: {missing}")
        return v

    def paths(self) -> Dict[str, Path]:
        """Full path per relation, in canonical relation order."""
        return {name: self.data_dir / self.file_names[name] for name in RELATION_NAMES}


class DatabaseConfig(BaseModel):
    """Relational store configuration"""

    path: Path = Field(
        default=Path("data/databases/soccer"), description="SQLite database file"
    )
    skip_existing: bool = Field(
        default=False,
        description="Skip relations already in the database instead of failing",
    )


class FeatureConfig(BaseModel):
    """Feature table assembly configuration"""

    outcome_column: str = Field(default="result", description="Outcome column")
    outcome_labels: List[str] = Field(
        default=["L", "W", "D"],
        description="Outcome labels in class-index order (L=0, W=1, D=2)",
    )
    predictor_columns: List[str] = Field(
        default=[
            "goals",
            "xGoals",
            "shots",
            "shotsOnTarget",
            "deep",
            "ppda",
            "fouls",
            "corners",
            "yellowCards",
            "redCards",
        ],
        description="Team-game statistics kept in the feature table",
    )
    model_predictors: List[str] = Field(
        default=["goals", "shots", "shotsOnTarget", "deep", "corners"],
        description="Predictors fed to the classifiers",
    )
    join_strategy: Literal["emulated", "native", "auto"] = Field(
        default="emulated",
        description="Full outer join: LEFT JOIN + anti-join union, SQLite native, or pick by version",
    )
    drop_unmatched_games: bool = Field(
        default=True,
        description="Drop outer-join padding rows that have no team-game outcome",
    )

    @field_validator("outcome_labels")
    @classmethod
    def validate_labels(cls, v: List[str]) -> List[str]:
        if len(v) != 3 or len(set(v)) != 3:
            raise ValueError(f"outcome_labels must be 3 distinct labels, got {v}")
        return v


class SplitConfig(BaseModel):
    """Train/test split and cross-validation configuration"""

    test_size: float = Field(
        default=0.2, gt=0.0, lt=1.0, description="Held-out test fraction"
    )
    cv_folds: int = Field(default=5, ge=2, le=20, description="Stratified CV folds")
    random_seed: int = Field(default=1208, description="Seed for split, folds and models")


class KNNConfig(BaseModel):
    """K-nearest neighbors tuning configuration"""

    neighbors_range: Tuple[int, int] = Field(
        default=KNN_NEIGHBOR_PRESETS["narrow"],
        description="Inclusive neighbor-count bounds for the regular grid",
    )
    levels: int = Field(default=5, ge=1, le=50, description="Grid levels")
    selection_metric: SelectionMetric = Field(
        default="accuracy", description="Metric used to pick the best neighbor count"
    )
    weights: Literal["uniform", "distance"] = Field(
        default="uniform", description="Neighbor vote weighting"
    )

    @field_validator("neighbors_range")
    @classmethod
    def validate_range(cls, v: Tuple[int, int]) -> Tuple[int, int]:
        low, high = v
        if low < 1 or high < low:
            raise ValueError(f"neighbors_range must satisfy 1 <= low <= high, got {v}")
        return v


class XGBoostConfig(BaseModel):
    """Gradient-boosted trees tuning configuration"""

    mtry_range: Tuple[int, int] = Field(
        default=(1, 6), description="Predictors sampled per split (count)"
    )
    trees_range: Tuple[int, int] = Field(
        default=(200, 600), description="Ensemble size bounds"
    )
    learn_rate_log10_range: Tuple[float, float] = Field(
        default=(-10.0, -1.0), description="log10 learning-rate bounds"
    )
    levels: int = Field(default=5, ge=1, le=20, description="Grid levels per parameter")
    selection_metric: SelectionMetric = Field(
        default="roc_auc", description="Metric used to pick the best configuration"
    )
    n_jobs: int = Field(default=1, description="Threads per booster")

    @field_validator("mtry_range", "trees_range")
    @classmethod
    def validate_count_range(cls, v: Tuple[int, int]) -> Tuple[int, int]:
        low, high = v
        if low < 1 or high < low:
            raise ValueError(f"range must satisfy 1 <= low <= high, got {v}")
        return v

    @field_validator("learn_rate_log10_range")
    @classmethod
    def validate_learn_rate(cls, v: Tuple[float, float]) -> Tuple[float, float]:
        low, high = v
        if high < low or high > 0:
            raise ValueError(f"learn_rate_log10_range must satisfy low <= high <= 0, got {v}")
        return v


class TuningConfig(BaseModel):
    """Grid search execution and cache configuration"""

    knn_cache_path: Path = Field(
        default=Path("data/tuning/knn_tune.joblib"), description="KNN search cache"
    )
    xgboost_cache_path: Path = Field(
        default=Path("data/tuning/xg_tune.joblib"), description="XGBoost search cache"
    )
    use_cache: bool = Field(
        default=False, description="Read search results from the cache files"
    )
    write_cache: bool = Field(
        default=True, description="Write fresh search results to the cache files"
    )
    n_jobs: int = Field(default=-1, description="Parallel search jobs (-1 = all CPUs)")
    verbose: int = Field(default=0, ge=0, le=3, description="GridSearchCV verbosity")

    def cache_path(self, classifier_name: str) -> Path:
        if classifier_name == "knn":
            return self.knn_cache_path
        if classifier_name == "xgboost":
            return self.xgboost_cache_path
        raise ValueError(f"Unknown classifier: {classifier_name}")


class EvaluationConfig(BaseModel):
    """Model comparison configuration"""

    comparison_metric: SelectionMetric = Field(
        default="roc_auc",
        description="Training metric used to choose the model scored on test data",
    )


class SoccerLabConfig(BaseModel):
    """Master Configuration Container"""

    data: DataLoadingConfig = Field(
        default_factory=DataLoadingConfig, description="Input file configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    features: FeatureConfig = Field(
        default_factory=FeatureConfig, description="Feature table configuration"
    )
    split: SplitConfig = Field(
        default_factory=SplitConfig, description="Split and CV configuration"
    )
    knn: KNNConfig = Field(default_factory=KNNConfig, description="KNN configuration")
    xgboost: XGBoostConfig = Field(
        default_factory=XGBoostConfig, description="XGBoost configuration"
    )
    tuning: TuningConfig = Field(
        default_factory=TuningConfig, description="Search and cache configuration"
    )
    evaluation: EvaluationConfig = Field(
        default_factory=EvaluationConfig, description="Evaluation configuration"
    )

    @model_validator(mode="after")
    def validate_config_consistency(self):
        """Validate cross-field consistency"""
        unknown = [
            p
            for p in self.features.model_predictors
            if p not in self.features.predictor_columns
        ]
        if unknown:
            raise ValueError(
                f"features.model_predictors not in predictor_columns: {unknown}"
            )
        return self


def _parse_env_value(value: str):
    """Convert an environment string to bool/int/float/list where it looks like one."""
    if "," in value:
        return [_parse_env_value(part.strip()) for part in value.split(",")]
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    if value.isdigit() or (value.startswith("-") and value[1:].isdigit()):
        return int(value)
    try:
        return float(value)
    except ValueError:
        return value


def load_config(
    config_path: Optional[Path] = None, config_data: Optional[Dict] = None
) -> SoccerLabConfig:
    """
    Load configuration with environment variable overrides and optional config file

    Args:
        config_path: Optional path to a JSON configuration file
        config_data: Optional dictionary of configuration data

    Environment variables can override any config value using the pattern:
    SOCCER_{SECTION}_{FIELD} = value

    Example: SOCCER_SPLIT_RANDOM_SEED=7, SOCCER_KNN_NEIGHBORS_RANGE=1,15000

    Raises:
        SourceUnavailable: If config_path is given but cannot be read
        pydantic.ValidationError: If the merged configuration is invalid
    """
    config_dict: Dict = {}

    if config_path is not None:
        config_path = Path(config_path)
        try:
            with open(config_path, "r") as f:
                config_dict = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise SourceUnavailable(
                f"Cannot read config file {config_path}: {e}"
            ) from e

    if config_data:
        for section, fields in config_data.items():
            if isinstance(fields, dict):
                config_dict.setdefault(section, {}).update(fields)
            else:
                config_dict[section] = fields

    sections = set(SoccerLabConfig.model_fields)
    for env_var, value in os.environ.items():
        if not env_var.startswith("SOCCER_"):
            continue
        parts = env_var.split("_")[1:]
        if len(parts) < 2:
            continue
        section = parts[0].lower()
        if section not in sections:
            continue
        field = "_".join(parts[1:]).lower()
        config_dict.setdefault(section, {})[field] = _parse_env_value(value)

    return SoccerLabConfig(**config_dict)


# Global configuration instance
config = load_config()
