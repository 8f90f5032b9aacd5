"""
ModelEvaluator - Evaluation and comparison of the outcome classifiers.

Provides:
- ROC-AUC (one-vs-rest, macro) and accuracy for a fitted pipeline
- Training-set comparison table across classifiers
- Selection of the model that is scored on the test partition
- Test-set confusion matrix
"""

from typing import Any, Dict, Optional, Sequence

import numpy as np
import pandas as pd
from loguru import logger
from sklearn.metrics import accuracy_score, confusion_matrix, roc_auc_score

from soccer_sql_lab.config.settings import EvaluationConfig

from .pipelines import MODEL_DISPLAY_NAMES


class ModelEvaluator:
    """
    Evaluate and compare fitted outcome classifiers.

    Models are compared on the training partition; only the chosen one
    ever sees the test partition.
    """

    def __init__(self, config: Optional[EvaluationConfig] = None):
        """
        Initialize evaluator.

        Args:
            config: Evaluation configuration
        """
        self.config = config or EvaluationConfig()

    def evaluate_model(self, model: Any, X: pd.DataFrame, y: np.ndarray) -> Dict[str, float]:
        """
        Score a fitted pipeline.

        Args:
            model: Fitted pipeline exposing predict_proba and classes_
            X: Features
            y: Outcome class indices

        Returns:
            Dictionary with 'roc_auc' and 'accuracy'
        """
        proba = model.predict_proba(X)
        y_pred = model.predict(X)
        return {
            "roc_auc": float(
                roc_auc_score(
                    y, proba, multi_class="ovr", average="macro", labels=model.classes_
                )
            ),
            "accuracy": float(accuracy_score(y, y_pred)),
        }

    @staticmethod
    def metrics_table(metrics: Dict[str, float]) -> pd.DataFrame:
        """``{metric, estimate}`` rows."""
        return pd.DataFrame(
            {"metric": list(metrics), "estimate": list(metrics.values())}
        )

    def compare(
        self, models: Dict[str, Any], X: pd.DataFrame, y: np.ndarray
    ) -> Dict[str, Dict[str, float]]:
        """Training metrics for every fitted model, keyed by classifier name."""
        results = {}
        for name, model in models.items():
            results[name] = self.evaluate_model(model, X, y)
            logger.info(
                f"📊 {MODEL_DISPLAY_NAMES.get(name, name)} (train): "
                f"roc_auc={results[name]['roc_auc']:.4f}, "
                f"accuracy={results[name]['accuracy']:.4f}"
            )
        return results

    @staticmethod
    def comparison_table(results: Dict[str, Dict[str, float]]) -> pd.DataFrame:
        """``{model, metric, estimate}`` rows with display names."""
        rows = [
            {"model": MODEL_DISPLAY_NAMES.get(name, name), "metric": metric, "estimate": value}
            for name, metrics in results.items()
            for metric, value in metrics.items()
        ]
        return pd.DataFrame(rows, columns=["model", "metric", "estimate"])

    def choose_best(self, results: Dict[str, Dict[str, float]]) -> str:
        """
        Classifier with the best training score on the comparison metric.

        Ties fall back to the other metric, then to input order.
        """
        if not results:
            raise ValueError("No models to choose from")
        primary = self.config.comparison_metric
        secondary = "accuracy" if primary == "roc_auc" else "roc_auc"
        best = max(
            results,
            key=lambda name: (results[name][primary], results[name][secondary]),
        )
        logger.info(
            f"🏆 Selected {MODEL_DISPLAY_NAMES.get(best, best)} on training {primary}"
        )
        return best

    @staticmethod
    def confusion(
        model: Any,
        X: pd.DataFrame,
        y: np.ndarray,
        labels: Optional[Sequence[str]] = None,
    ) -> pd.DataFrame:
        """
        Confusion matrix with truth rows and prediction columns.

        Args:
            labels: Optional display labels in class-index order
        """
        y_pred = model.predict(X)
        matrix = confusion_matrix(y, y_pred, labels=model.classes_)
        names = list(labels) if labels is not None else list(model.classes_)
        return pd.DataFrame(
            matrix,
            index=pd.Index(names, name="truth"),
            columns=pd.Index(names, name="prediction"),
        )

    def format_results(self, metrics: Dict[str, float]) -> str:
        """
        Format evaluation results for display.

        Args:
            metrics: Evaluation metrics dict

        Returns:
            Formatted string
        """
        lines = ["📊 Evaluation Results:"]
        lines.append(f"   ROC-AUC:  {metrics.get('roc_auc', 0):.3f}")
        lines.append(f"   Accuracy: {metrics.get('accuracy', 0):.3f}")
        return "\n".join(lines)
