"""
Grid search results and their on-disk cache.

A search result is a deterministic function of the training data, the grid,
the folds, the seed and the classifier. The fingerprint hashes exactly those
inputs so a cached result is only reused for the search that produced it.
"""

import hashlib
import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import joblib
import numpy as np
import pandas as pd
from loguru import logger
from pydantic import BaseModel, Field

from soccer_sql_lab.domain.common.errors import SourceUnavailable, StaleTuningCache

METRICS = ("accuracy", "roc_auc")


class CandidateScore(BaseModel):
    """Cross-validated scores for one grid point."""

    params: Dict[str, Any]
    mean_accuracy: float
    std_accuracy: float
    mean_roc_auc: float
    std_roc_auc: float


class SearchResult(BaseModel):
    """Outcome of a grid search over one classifier."""

    classifier: str
    candidates: List[CandidateScore] = Field(default_factory=list)
    param_grid: Dict[str, List[Any]] = Field(default_factory=dict)
    fingerprint: str = ""

    @classmethod
    def from_cv_results(
        cls,
        classifier: str,
        cv_results: Dict[str, Any],
        param_grid: Dict[str, List[Any]],
        fingerprint: str = "",
    ) -> "SearchResult":
        """Build from ``GridSearchCV.cv_results_`` scored on both metrics."""
        candidates = [
            CandidateScore(
                params={k: _to_builtin(v) for k, v in params.items()},
                mean_accuracy=float(cv_results["mean_test_accuracy"][i]),
                std_accuracy=float(cv_results["std_test_accuracy"][i]),
                mean_roc_auc=float(cv_results["mean_test_roc_auc"][i]),
                std_roc_auc=float(cv_results["std_test_roc_auc"][i]),
            )
            for i, params in enumerate(cv_results["params"])
        ]
        return cls(
            classifier=classifier,
            candidates=candidates,
            param_grid=param_grid,
            fingerprint=fingerprint,
        )

    def to_frame(self) -> pd.DataFrame:
        """One row per candidate: parameters followed by mean/std per metric."""
        rows = [
            {**c.params, **c.model_dump(exclude={"params"})} for c in self.candidates
        ]
        return pd.DataFrame(rows)

    def best_candidate(self, metric: str) -> CandidateScore:
        """
        Candidate with the highest mean ``metric``.

        Candidates whose fits failed (NaN score) are skipped; ties keep the
        first candidate in grid order.

        Raises:
            ValueError: Unknown metric, or every candidate failed
        """
        if metric not in METRICS:
            raise ValueError(f"Unknown metric: {metric}. Choose from {list(METRICS)}")
        scores = np.array([getattr(c, f"mean_{metric}") for c in self.candidates])
        if len(scores) == 0 or np.all(np.isnan(scores)):
            raise ValueError(f"No candidate of {self.classifier} has a {metric} score")
        return self.candidates[int(np.nanargmax(scores))]

    def select_best(self, metric: str) -> Dict[str, Any]:
        """Parameters of the best candidate on ``metric``."""
        return dict(self.best_candidate(metric).params)


def select_best(result: SearchResult, metric: str) -> Dict[str, Any]:
    return result.select_best(metric)


def _to_builtin(value: Any) -> Any:
    if isinstance(value, np.generic):
        return value.item()
    return value


def search_fingerprint(
    classifier: str,
    X: pd.DataFrame,
    y: Sequence,
    param_grid: Dict[str, List[Any]],
    cv_folds: int,
    random_seed: int,
    estimator_settings: Optional[Dict[str, Any]] = None,
) -> str:
    """
    SHA-256 over every input that determines a search result.

    ``X`` should hold only the predictors the pipeline fits; fixed estimator
    settings outside the grid (e.g. KNN vote weighting) go in
    ``estimator_settings``.
    """
    digest = hashlib.sha256()
    digest.update(classifier.encode())
    digest.update(json.dumps(list(map(str, X.columns))).encode())
    digest.update(pd.util.hash_pandas_object(X, index=False).to_numpy().tobytes())
    digest.update(
        pd.util.hash_pandas_object(pd.Series(np.asarray(y)), index=False)
        .to_numpy()
        .tobytes()
    )
    digest.update(json.dumps(param_grid, sort_keys=True, default=str).encode())
    digest.update(f"{cv_folds}:{random_seed}".encode())
    digest.update(
        json.dumps(estimator_settings or {}, sort_keys=True, default=str).encode()
    )
    return digest.hexdigest()


def save_search_result(result: SearchResult, path: Path) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    joblib.dump(result.model_dump(), path)
    logger.info(f"💾 Cached {result.classifier} search: {path}")


def load_search_result(path: Path, expected_fingerprint: str) -> SearchResult:
    """
    Read a cached search result.

    Raises:
        SourceUnavailable: If the cache file is missing or unreadable
        StaleTuningCache: If the cache was computed from different inputs
    """
    path = Path(path)
    if not path.exists():
        raise SourceUnavailable(
            f"Tuning cache not found: {path}", details={"path": str(path)}
        )
    try:
        result = SearchResult(**joblib.load(path))
    except Exception as e:
        raise SourceUnavailable(
            f"Cannot read tuning cache {path}: {e}", details={"path": str(path)}
        ) from e

    if result.fingerprint != expected_fingerprint:
        raise StaleTuningCache(
            f"Tuning cache {path} was computed from different inputs",
            details={
                "path": str(path),
                "cached": result.fingerprint,
                "expected": expected_fingerprint,
            },
        )
    logger.info(f"📂 Loaded cached {result.classifier} search: {path}")
    return result
