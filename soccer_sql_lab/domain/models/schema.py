"""Relation schemas for the football-statistics dataset."""

from typing import Dict, Iterable, List, Tuple

from pydantic import BaseModel, ConfigDict, Field

from ..common.errors import SchemaMismatch


class RelationSchema(BaseModel):
    """Required columns of one relation. Extra columns are allowed."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Relation name")
    required_columns: Tuple[str, ...] = Field(
        ..., min_length=1, description="Columns every source file must provide"
    )
    nullable_columns: Tuple[str, ...] = Field(
        default=(), description="Required columns that may legitimately be null"
    )

    def missing_columns(self, columns: Iterable[str]) -> List[str]:
        present = set(columns)
        return [c for c in self.required_columns if c not in present]

    def validate_columns(self, columns: Iterable[str]) -> None:
        """Raise SchemaMismatch if any required column is absent."""
        missing = self.missing_columns(columns)
        if missing:
            raise SchemaMismatch(
                f"Relation '{self.name}' is missing columns: {missing}",
                details={"relation": self.name, "missing": missing},
            )


RELATION_SCHEMAS: Dict[str, RelationSchema] = {
    schema.name: schema
    for schema in (
        RelationSchema(
            name="appearances",
            required_columns=("playerID", "gameID", "yellowCard", "redCard"),
        ),
        RelationSchema(
            name="games",
            required_columns=("gameID", "season", "homeGoals", "awayGoals"),
        ),
        RelationSchema(name="leagues", required_columns=("leagueID", "name")),
        RelationSchema(name="players", required_columns=("playerID", "name")),
        RelationSchema(
            name="shots",
            required_columns=(
                "gameID",
                "shooterID",
                "assisterID",
                "shotType",
                "shotResult",
                "xGoal",
            ),
            # No assisting player is a real outcome, not missing data
            nullable_columns=("assisterID",),
        ),
        RelationSchema(name="teams", required_columns=("teamID", "name")),
        RelationSchema(
            name="teamstats",
            required_columns=(
                "gameID",
                "teamID",
                "location",
                "result",
                "goals",
                "shots",
                "shotsOnTarget",
                "fouls",
                "corners",
                "deep",
            ),
        ),
    )
}

RELATION_NAMES: Tuple[str, ...] = tuple(RELATION_SCHEMAS)
