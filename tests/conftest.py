"""Shared fixtures: a small synthetic football dataset on disk and in SQLite."""

from pathlib import Path
from typing import Dict

import numpy as np
import pandas as pd
import pytest

from soccer_sql_lab.adapters.sqlite_store import SQLiteRelationalStore
from soccer_sql_lab.config.settings import SoccerLabConfig
from soccer_sql_lab.domain.services.feature_assembly_service import FeatureAssemblyService

N_MATCHED_GAMES = 40
UNMATCHED_GAME_IDS = (41, 42)


def _games_and_teamstats() -> Dict[str, pd.DataFrame]:
    rng = np.random.default_rng(1208)
    games, teamstats = [], []
    for game_id in range(1, N_MATCHED_GAMES + 1):
        season = 2014 + game_id % 3
        home, away = 1 + game_id % 4, 5 + game_id % 4
        if game_id % 3 == 0:
            home_goals = away_goals = int(rng.integers(0, 3))
        else:
            home_goals = int(rng.integers(1, 5))
            away_goals = int(rng.integers(0, home_goals))
            if game_id % 2 == 0:
                home_goals, away_goals = away_goals, home_goals
        games.append(
            {
                "gameID": game_id,
                "leagueID": 1,
                "season": season,
                "date": f"{season}-09-{1 + game_id % 28:02d}",
                "homeTeamID": home,
                "awayTeamID": away,
                "homeGoals": home_goals,
                "awayGoals": away_goals,
            }
        )
        for team_id, location, goals, against in (
            (home, "h", home_goals, away_goals),
            (away, "a", away_goals, home_goals),
        ):
            result = "W" if goals > against else "L" if goals < against else "D"
            shots = int(goals * 3 + rng.integers(2, 8))
            teamstats.append(
                {
                    "gameID": game_id,
                    "teamID": team_id,
                    "season": season,
                    "date": f"{season}-09-{1 + game_id % 28:02d}",
                    "location": location,
                    "goals": goals,
                    "xGoals": round(goals * 0.8 + float(rng.random()), 3),
                    "shots": shots,
                    "shotsOnTarget": int(goals + rng.integers(0, 4)),
                    "deep": int(rng.integers(2, 12)),
                    "ppda": round(float(rng.uniform(5, 15)), 3),
                    "fouls": int(rng.integers(5, 20)),
                    "corners": int(rng.integers(0, 10)),
                    "yellowCards": int(rng.integers(0, 4)),
                    "redCards": int(rng.integers(0, 2)),
                    "result": result,
                }
            )

    for game_id in UNMATCHED_GAME_IDS:
        games.append(
            {
                "gameID": game_id,
                "leagueID": 1,
                "season": 2016,
                "date": "2016-10-01",
                "homeTeamID": 1,
                "awayTeamID": 5,
                "homeGoals": 1,
                "awayGoals": 1,
            }
        )

    return {"games": pd.DataFrame(games), "teamstats": pd.DataFrame(teamstats)}


def _shots() -> pd.DataFrame:
    # 40 goals, 10 own goals, 50 saved shots
    results = ["Goal"] * 40 + ["OwnGoal"] * 10 + ["SavedShot"] * 50
    shot_types = ["LeftFoot", "RightFoot", "Head"]
    rows = []
    for i, shot_result in enumerate(results):
        rows.append(
            {
                "gameID": 1 + i % N_MATCHED_GAMES,
                "shooterID": 1 + i % 20,
                "assisterID": None if i % 4 == 0 else 1 + (i + 7) % 20,
                "minute": i % 90,
                "situation": "OpenPlay",
                "lastAction": "Pass",
                "shotType": shot_types[i % 3],
                "shotResult": shot_result,
                "xGoal": round(0.05 + (i % 20) / 40, 3),
                "positionX": 0.85,
                "positionY": 0.5,
            }
        )
    return pd.DataFrame(rows)


def _appearances() -> pd.DataFrame:
    rows = [{"playerID": 7, "gameID": 500, "yellowCard": 1, "redCard": 0}]
    rows += [
        {"playerID": p, "gameID": 1 + p % N_MATCHED_GAMES, "yellowCard": p % 2, "redCard": 0}
        for p in range(1, 21)
    ]
    return pd.DataFrame(rows)


def make_tables() -> Dict[str, pd.DataFrame]:
    """All seven relations, small enough to fit models in a few seconds."""
    tables = _games_and_teamstats()
    tables["appearances"] = _appearances()
    tables["leagues"] = pd.DataFrame(
        {"leagueID": [1, 2], "name": ["Premier League", "Serie A"], "understatNotation": ["EPL", "Serie_A"]}
    )
    tables["players"] = pd.DataFrame(
        {"playerID": list(range(1, 21)), "name": [f"Player {i}" for i in range(1, 21)]}
    )
    tables["shots"] = _shots()
    tables["teams"] = pd.DataFrame(
        {"teamID": list(range(1, 9)), "name": [f"Team {i}" for i in range(1, 9)]}
    )
    return {
        name: tables[name]
        for name in ("appearances", "games", "leagues", "players", "shots", "teams", "teamstats")
    }


@pytest.fixture
def tables() -> Dict[str, pd.DataFrame]:
    return make_tables()


@pytest.fixture
def csv_dir(tmp_path, tables) -> Path:
    """Directory of UTF-8 CSVs named after their relations."""
    directory = tmp_path / "preprocessed"
    directory.mkdir()
    for name, table in tables.items():
        table.to_csv(directory / f"{name}.csv", index=False)
    return directory


@pytest.fixture
def lab_config(tmp_path, csv_dir) -> SoccerLabConfig:
    """Configuration pointing at tmp_path with grids small enough for tests."""
    return SoccerLabConfig(
        data={"data_dir": csv_dir},
        database={"path": tmp_path / "databases" / "soccer"},
        knn={"neighbors_range": (3, 9), "levels": 3},
        xgboost={
            "mtry_range": (1, 3),
            "trees_range": (10, 20),
            "learn_rate_log10_range": (-2.0, -1.0),
            "levels": 2,
        },
        tuning={
            "knn_cache_path": tmp_path / "tuning" / "knn_tune.joblib",
            "xgboost_cache_path": tmp_path / "tuning" / "xg_tune.joblib",
            "n_jobs": 1,
        },
    )


@pytest.fixture
def store(tmp_path):
    """Empty SQLite store, closed after the test."""
    with SQLiteRelationalStore.open(tmp_path / "store.sqlite") as opened:
        yield opened


@pytest.fixture
def loaded_store(store, tables):
    """Store with all seven relations registered."""
    store.register_all(tables)
    return store


@pytest.fixture
def feature_table(loaded_store) -> pd.DataFrame:
    """Assembled outcome + predictor table (80 team-game rows)."""
    return FeatureAssemblyService().assemble(loaded_store)
