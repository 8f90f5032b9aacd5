"""End-to-end orchestration: CSVs -> database -> feature table -> models -> report."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import pandas as pd
from loguru import logger

from soccer_sql_lab.adapters.sqlite_store import SQLiteRelationalStore, open_store
from soccer_sql_lab.config.settings import SoccerLabConfig
from soccer_sql_lab.domain.models.schema import RELATION_NAMES
from soccer_sql_lab.domain.models.table import QueryResult
from soccer_sql_lab.domain.repositories.relational_store import RelationalStore
from soccer_sql_lab.domain.services.data_loading_service import DataLoadingService
from soccer_sql_lab.domain.services.feature_assembly_service import (
    FeatureAssemblyService,
    class_balance,
)
from soccer_sql_lab.domain.services.ml_training import (
    MODEL_DISPLAY_NAMES,
    ModelEvaluator,
    ModelTrainer,
)
from soccer_sql_lab.domain.services.query_library import run_catalog

CLASSIFIERS = ("knn", "xgboost")


@dataclass
class PipelineReport:
    """Everything the modeling run produces."""

    n_rows: int
    class_balance: pd.Series
    train_comparison: pd.DataFrame
    selected_model: str
    test_metrics: pd.DataFrame
    confusion: pd.DataFrame
    metadata: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    models: Dict[str, Any] = field(default_factory=dict)

    @property
    def selected_display_name(self) -> str:
        return MODEL_DISPLAY_NAMES.get(self.selected_model, self.selected_model)


class ModelingPipelineService:
    """Service for running the database and modeling stages in order."""

    def __init__(self, config: Optional[SoccerLabConfig] = None):
        self.config = config or SoccerLabConfig()
        self.loader = DataLoadingService(self.config.data)
        self.assembler = FeatureAssemblyService(self.config.features)
        self.trainer = ModelTrainer(self.config)
        self.evaluator = ModelEvaluator(self.config.evaluation)

    def open_store(self) -> SQLiteRelationalStore:
        return SQLiteRelationalStore.open(self.config.database.path)

    def build_database(
        self, store: RelationalStore, skip_existing: Optional[bool] = None
    ) -> List[str]:
        """Load the CSVs and register all seven relations.

        Returns:
            Names of the relations that were written

        Raises:
            SourceUnavailable: If a CSV is missing or unreadable
            RelationAlreadyExists: If a relation exists and skip_existing is off
        """
        if skip_existing is None:
            skip_existing = self.config.database.skip_existing
        tables = self.loader.load()
        logger.info(f"🗄️  Registering {len(tables)} relations...")
        return store.register_all(tables, skip_existing=skip_existing)

    def ensure_database(self, store: RelationalStore) -> List[str]:
        """Register only the relations the store does not have yet."""
        missing = [name for name in RELATION_NAMES if name not in store.list_relations()]
        if not missing:
            return []
        logger.info(f"🗄️  Database is missing {missing}; loading CSVs")
        return self.build_database(store, skip_existing=True)

    def run_queries(
        self, store: RelationalStore, concept: Optional[str] = None
    ) -> Dict[str, QueryResult]:
        results = run_catalog(store, concept)
        logger.info(f"🔎 Ran {len(results)} catalog queries")
        return results

    def build_feature_table(self, store: RelationalStore) -> pd.DataFrame:
        return self.assembler.assemble(store)

    def model(self, feature_table: pd.DataFrame) -> PipelineReport:
        """Split, tune both classifiers, compare on training, score the winner on test."""
        data = self.trainer.split(feature_table)

        models: Dict[str, Any] = {}
        metadata: Dict[str, Dict[str, Any]] = {}
        for name in CLASSIFIERS:
            models[name], metadata[name] = self.trainer.train(
                name, data.X_train, data.y_train
            )

        train_results = self.evaluator.compare(models, data.X_train, data.y_train)
        selected = self.evaluator.choose_best(train_results)
        chosen = models[selected]

        test_metrics = self.evaluator.evaluate_model(chosen, data.X_test, data.y_test)
        logger.info(self.evaluator.format_results(test_metrics))

        return PipelineReport(
            n_rows=len(feature_table),
            class_balance=class_balance(
                feature_table, self.config.features.outcome_column
            ),
            train_comparison=self.evaluator.comparison_table(train_results),
            selected_model=selected,
            test_metrics=self.evaluator.metrics_table(test_metrics),
            confusion=self.evaluator.confusion(
                chosen, data.X_test, data.y_test, self.config.features.outcome_labels
            ),
            metadata=metadata,
            models=models,
        )

    def run(self) -> PipelineReport:
        """Full run against the configured database file.

        The store is closed on every path, including errors.
        """
        logger.info("=" * 70)
        logger.info("⚽ Soccer SQL Lab - modeling run")
        logger.info("=" * 70)

        with open_store(self.config.database.path) as store:
            self.ensure_database(store)
            feature_table = self.build_feature_table(store)

        report = self.model(feature_table)
        logger.info(f"✅ Done: {report.selected_display_name} scored on test data")
        return report
