"""Feature table assembly from the games and teamstats relations."""

from typing import List, Optional, Sequence

import pandas as pd
from loguru import logger

from soccer_sql_lab.config.settings import FeatureConfig
from soccer_sql_lab.domain.common.errors import SchemaMismatch
from soccer_sql_lab.domain.repositories.relational_store import RelationalStore

JOIN_KEY = "gameID"
COLLISION_SUFFIX = "_teamstats"


def _quote(identifier: str) -> str:
    return '"' + identifier.replace('"', '""') + '"'


def build_join_select(games_columns: Sequence[str], teamstats_columns: Sequence[str]) -> str:
    """
    Projection list for games ⋈ teamstats.

    The key is coalesced so it is never null on either side's padding rows;
    teamstats columns that collide with a games column get a suffix.
    """
    for relation, columns in (("games", games_columns), ("teamstats", teamstats_columns)):
        if JOIN_KEY not in columns:
            raise SchemaMismatch(
                f"Relation '{relation}' has no {JOIN_KEY} column",
                details={"relation": relation, "missing": [JOIN_KEY]},
            )

    key = _quote(JOIN_KEY)
    parts = [f"COALESCE(g.{key}, t.{key}) AS {key}"]
    parts += [f"g.{_quote(c)} AS {_quote(c)}" for c in games_columns if c != JOIN_KEY]
    games_set = set(games_columns)
    for c in teamstats_columns:
        if c == JOIN_KEY:
            continue
        alias = c + COLLISION_SUFFIX if c in games_set else c
        parts.append(f"t.{_quote(c)} AS {_quote(alias)}")
    return ",\n       ".join(parts)


def full_outer_join_sql(
    games_columns: Sequence[str],
    teamstats_columns: Sequence[str],
    native: bool = False,
) -> str:
    """
    SQL for games FULL OUTER JOIN teamstats on gameID.

    The emulated form is the left join plus the rows of the right join that
    found no game (the anti-join), so matched pairs appear exactly once.
    """
    select = build_join_select(games_columns, teamstats_columns)
    on = f"g.{_quote(JOIN_KEY)} = t.{_quote(JOIN_KEY)}"
    if native:
        return (
            f"SELECT {select}\n"
            f"FROM games AS g\nFULL OUTER JOIN teamstats AS t\nON {on}"
        )
    return (
        f"SELECT {select}\n"
        f"FROM games AS g\nLEFT JOIN teamstats AS t\nON {on}\n"
        "UNION ALL\n"
        f"SELECT {select}\n"
        f"FROM teamstats AS t\nLEFT JOIN games AS g\nON {on}\n"
        f"WHERE g.{_quote(JOIN_KEY)} IS NULL"
    )


def recode_result(result: pd.Series, labels: Sequence[str] = ("L", "W", "D")) -> pd.Series:
    """
    Recode outcome labels to class indices in ``labels`` order.

    With the default order L->0, W->1, D->2. The returned series is a
    categorical with categories [0, 1, 2] so the class index is fixed even
    when a class is absent.

    Raises:
        SchemaMismatch: If any value (including null) is not in ``labels``
    """
    mapping = {label: index for index, label in enumerate(labels)}
    unexpected = sorted({str(v) for v in result[~result.isin(list(mapping))]})
    if unexpected:
        raise SchemaMismatch(
            f"Unexpected {result.name or 'outcome'} values: {unexpected}",
            details={"unexpected": unexpected, "allowed": list(labels)},
        )
    codes = result.map(mapping).astype(int)
    return pd.Series(
        pd.Categorical(codes, categories=list(range(len(labels)))),
        index=result.index,
        name=result.name,
    )


def class_balance(feature_table: pd.DataFrame, outcome_column: str = "result") -> pd.Series:
    """Row count per outcome class, in class-index order."""
    return feature_table[outcome_column].value_counts(sort=False)


def predictor_correlations(feature_table: pd.DataFrame) -> pd.DataFrame:
    """Pairwise correlation of the numeric predictors."""
    return feature_table.select_dtypes(include="number").corr()


class FeatureAssemblyService:
    """Builds the modeling feature table from the relational store."""

    def __init__(self, config: Optional[FeatureConfig] = None):
        self.config = config or FeatureConfig()

    def _use_native_join(self, store: RelationalStore) -> bool:
        strategy = self.config.join_strategy
        if strategy == "auto":
            return store.supports_full_outer_join
        return strategy == "native"

    def full_outer_join(self, store: RelationalStore) -> pd.DataFrame:
        """Every game and every team-game row, matched on gameID where possible."""
        native = self._use_native_join(store)
        sql = full_outer_join_sql(
            store.columns("games"), store.columns("teamstats"), native=native
        )
        joined = store.execute(sql).to_frame()
        logger.info(
            f"🔗 games ⟗ teamstats ({'native' if native else 'emulated'}): {len(joined)} rows"
        )
        return joined

    @property
    def feature_columns(self) -> List[str]:
        return [self.config.outcome_column] + list(self.config.predictor_columns)

    def assemble(self, store: RelationalStore) -> pd.DataFrame:
        """Join, project and recode - FAIL FAST on schema drift.

        Returns:
            Feature table: outcome column (categorical 0/1/2) + predictors

        Raises:
            SchemaMismatch: If a projected column is missing or an outcome
                label is outside the configured labels
        """
        joined = self.full_outer_join(store)

        missing = [c for c in self.feature_columns if c not in joined.columns]
        if missing:
            raise SchemaMismatch(
                f"Joined table is missing columns: {missing}",
                details={"missing": missing},
            )

        features = joined[self.feature_columns].copy()
        outcome = self.config.outcome_column

        if self.config.drop_unmatched_games:
            unmatched = features[outcome].isna()
            if unmatched.any():
                logger.warning(
                    f"   Dropping {int(unmatched.sum())} games with no team-game stats"
                )
                features = features.loc[~unmatched]

        features[outcome] = recode_result(features[outcome], self.config.outcome_labels)
        features = features.reset_index(drop=True)

        logger.info(
            f"🧮 Feature table: {len(features)} rows, {len(self.config.predictor_columns)} predictors"
        )
        return features
