"""
Canned SQL queries over the football-statistics database.

Each entry demonstrates one SQL concept: projection, filtering, ordering,
grouped filtering, joins, derived columns, aggregation and subqueries.
Results are plain ``QueryResult`` values; correctness is whatever standard
SQL semantics give under the engine behind the store.
"""

from typing import Dict, List, Literal, Optional

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from soccer_sql_lab.domain.models.table import QueryResult
from soccer_sql_lab.domain.repositories.relational_store import RelationalStore

Concept = Literal[
    "selection",
    "filtering",
    "ordering",
    "grouping",
    "joins",
    "derived_columns",
    "aggregation",
    "subqueries",
]


class CannedQuery(BaseModel):
    """A named, parameterless, read-only SQL statement."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    concept: Concept
    description: str = Field(..., min_length=1)
    sql: str = Field(..., min_length=1)


QUERY_CATALOG: List[CannedQuery] = [
    # Selection
    CannedQuery(
        name="shooter_ids",
        concept="selection",
        description="SELECT a single column from a table",
        sql="SELECT shooterID FROM shots",
    ),
    CannedQuery(
        name="all_shots",
        concept="selection",
        description="SELECT * returns every column",
        sql="SELECT * FROM shots",
    ),
    CannedQuery(
        name="shot_count",
        concept="selection",
        description="Scalar function applied in the projection",
        sql="SELECT count(gameID) FROM shots",
    ),
    # Filtering and ordering
    CannedQuery(
        name="own_goal_count",
        concept="filtering",
        description="WHERE keeps rows matching a condition",
        sql="SELECT count(gameID) FROM shots WHERE shotResult = 'OwnGoal'",
    ),
    CannedQuery(
        name="own_goals_by_shooter",
        concept="ordering",
        description="ORDER BY ... desc sorts the filtered rows",
        sql="""
            SELECT gameID, shotType
            FROM shots
            WHERE shotResult = 'OwnGoal'
            ORDER BY shooterID desc
        """,
    ),
    CannedQuery(
        name="left_foot_own_goal_games",
        concept="grouping",
        description="HAVING filters groups produced by GROUP BY",
        sql="""
            SELECT gameID
            FROM shots
            WHERE shotResult = 'OwnGoal'
            GROUP BY gameID
            HAVING shotType = 'LeftFoot'
        """,
    ),
    # Joins
    CannedQuery(
        name="own_goal_games_left_join",
        concept="joins",
        description="LEFT JOIN games to shots on gameID",
        sql="""
            SELECT count(homeGoals)
            FROM games
            LEFT JOIN shots
            ON games.gameID = shots.gameID
            WHERE shotResult = 'OwnGoal'
        """,
    ),
    CannedQuery(
        name="own_goal_games_inner_join",
        concept="joins",
        description="INNER JOIN games to shots on gameID",
        sql="""
            SELECT count(homeGoals)
            FROM games
            INNER JOIN shots
            ON games.gameID = shots.gameID
            WHERE shotResult = 'OwnGoal'
        """,
    ),
    CannedQuery(
        name="shooters_in_2015",
        concept="joins",
        description="Three-way join: players who took shots in 2015",
        sql="""
            SELECT DISTINCT name
            FROM players
            JOIN shots
            ON players.playerID = shots.shooterID
            JOIN games
            ON shots.gameID = games.gameID
            WHERE season = '2015'
        """,
    ),
    # Concept 1: derived columns
    CannedQuery(
        name="total_cards",
        concept="derived_columns",
        description="1.1 yellowCard + redCard per player-game",
        sql="""
            SELECT playerID, gameID, (yellowCard + redCard) AS totalCards
            FROM appearances
            LIMIT 50
        """,
    ),
    CannedQuery(
        name="total_goals",
        concept="derived_columns",
        description="1.2 homeGoals + awayGoals per game",
        sql="""
            SELECT gameID, homeGoals, awayGoals, homeGoals + awayGoals AS totalGoals
            FROM games
        """,
    ),
    CannedQuery(
        name="appearance_unique_id",
        concept="derived_columns",
        description="1.3 playerID and gameID concatenated with a hyphen",
        sql="""
            SELECT playerID, gameID, playerID || '-' || gameID AS uniqueID
            FROM appearances
        """,
    ),
    # Concept 2: aggregation
    CannedQuery(
        name="average_goals_by_team_season",
        concept="aggregation",
        description="2.1 AVG goals per team and season",
        sql="""
            SELECT teamID, season, AVG(goals) AS average_goals
            FROM teamstats
            GROUP BY teamID, season
            LIMIT 50
        """,
    ),
    CannedQuery(
        name="foul_extremes",
        concept="aggregation",
        description="2.2 MAX and MIN fouls in a single team-game",
        sql="SELECT MAX(fouls) AS max_fouls, MIN(fouls) AS min_fouls FROM teamstats",
    ),
    CannedQuery(
        name="results_by_team",
        concept="aggregation",
        description="2.3 COUNT of W/L/D per team",
        sql="""
            SELECT teamID, result, COUNT(*) AS game_count
            FROM teamstats
            GROUP BY teamID, result
            LIMIT 50
        """,
    ),
    CannedQuery(
        name="shots_by_location",
        concept="aggregation",
        description="2.4 SUM of shots and shots on target, home vs away",
        sql="""
            SELECT location, SUM(shots) AS total_shots, SUM(shotsOnTarget) AS shots_on_target
            FROM teamstats
            GROUP BY location
        """,
    ),
    # Concept 3: subqueries
    CannedQuery(
        name="shot_result_percentage",
        concept="subqueries",
        description="3.1 Share of each shotResult via a scalar subquery total",
        sql="""
            SELECT shotResult,
                   COUNT(*) * 100.0 / (SELECT COUNT(*) FROM shots) AS percentage
            FROM shots
            GROUP BY shotResult
        """,
    ),
    CannedQuery(
        name="above_average_shooters",
        concept="subqueries",
        description="3.2 Shooters whose mean xGoal beats the overall mean",
        sql="""
            SELECT shooterID AS bestShooters
            FROM (
                  SELECT shooterID, AVG(xGoal) AS avgShooterXGoal
                  FROM shots
                  GROUP BY shooterID) AS shooterAverages
            WHERE avgShooterXGoal > (
                  SELECT AVG(xGoal) FROM shots)
            LIMIT 50
        """,
    ),
]

QUERIES_BY_NAME: Dict[str, CannedQuery] = {q.name: q for q in QUERY_CATALOG}


def get_query(name: str) -> CannedQuery:
    try:
        return QUERIES_BY_NAME[name]
    except KeyError:
        raise KeyError(
            f"Unknown query: {name}. Available: {', '.join(QUERIES_BY_NAME)}"
        ) from None


def run_query(store: RelationalStore, name: str) -> QueryResult:
    """Execute one catalog query by name."""
    query = get_query(name)
    logger.debug(f"Running {query.name}: {query.description}")
    return store.execute(query.sql)


def run_catalog(
    store: RelationalStore, concept: Optional[str] = None
) -> Dict[str, QueryResult]:
    """
    Execute every catalog query, optionally restricted to one concept.

    Engine errors propagate unchanged; nothing is skipped silently.
    """
    selected = [q for q in QUERY_CATALOG if concept is None or q.concept == concept]
    if concept is not None and not selected:
        raise ValueError(f"Unknown concept: {concept}")
    return {q.name: store.execute(q.sql) for q in selected}
