"""Pytest configuration and fixtures for the club season statistics tests."""

import itertools
import os
from datetime import date

import pytest

from club_stats_mcp.data_loader import get_sample_data, load_sample_data
from club_stats_mcp.models import MATCH, TRAINING, PerformanceRecord, Player
from club_stats_mcp.repository import PlayerRepository
from club_stats_mcp.seasons import season_from_date

# Set up test environment
os.environ.setdefault("NEO4J_URI", "bolt://localhost:7687")
os.environ.setdefault("NEO4J_USER", "neo4j")
os.environ.setdefault("NEO4J_PASSWORD", "password")


class MockNeo4jDatabase:
    """In-memory stand-in for Neo4j that understands the repository's queries."""

    def __init__(self):
        self.players = {}
        self.performances = {}
        self.unavailabilities = {}
        self.writes = []
        self._connected = False

    def connect(self):
        self._connected = True

    def close(self):
        self._connected = False

    def _row(self, player_id: str) -> dict:
        return {
            "player": dict(self.players[player_id]),
            "performances": [
                dict(props) for owner, props in self.performances.values()
                if owner == player_id
            ],
            "unavailabilities": [
                dict(props) for owner, props in self.unavailabilities.values()
                if owner == player_id
            ],
        }

    def _delete_player(self, player_id: str) -> None:
        self.players.pop(player_id, None)
        for store in (self.performances, self.unavailabilities):
            for key in [k for k, (owner, _) in store.items() if owner == player_id]:
                del store[key]

    def execute_query(self, query: str, parameters: dict = None) -> list:
        """Execute a mock query against in-memory data."""
        params = parameters or {}

        # Existence check before a write
        if "RETURN p.player_id as player_id" in query:
            player_id = params.get("player_id")
            return [{"player_id": player_id}] if player_id in self.players else []

        # Single player with history
        if "RETURN p {.*} as player" in query and "{player_id: $player_id}" in query:
            player_id = params.get("player_id")
            return [self._row(player_id)] if player_id in self.players else []

        # Whole roster
        if "RETURN p {.*} as player" in query:
            ordered = sorted(
                self.players.values(),
                key=lambda p: (p.get("last_name") or "", p.get("first_name") or ""),
            )
            return [self._row(p["player_id"]) for p in ordered]

        # Default empty result
        return []

    def execute_write(self, query: str, parameters: dict = None) -> None:
        """Apply a write to the in-memory graph."""
        params = parameters or {}
        self.writes.append((query, params))

        if "MATCH (n) DETACH DELETE n" in query:
            self.players.clear()
            self.performances.clear()
            self.unavailabilities.clear()
        elif "MERGE (p:Player" in query:
            node = self.players.setdefault(params["player_id"], {"player_id": params["player_id"]})
            node.update(params["properties"])
        elif "UNWIND $player_ids" in query:
            for player_id in params["player_ids"]:
                self._delete_player(player_id)
        elif "DETACH DELETE x, p" in query:
            self._delete_player(params["player_id"])
        elif "MERGE (r:Performance" in query:
            if params["player_id"] in self.players:
                self.performances[params["performance_id"]] = (
                    params["player_id"], dict(params["properties"])
                )
        elif "SET r += $properties" in query:
            stored = self.performances.get(params["performance_id"])
            if stored:
                stored[1].update(params["properties"])
        elif "UNWIND $performance_ids" in query:
            for performance_id in params["performance_ids"]:
                self.performances.pop(performance_id, None)
        elif "MERGE (u:Unavailability" in query:
            if params["player_id"] in self.players:
                self.unavailabilities[params["unavailability_id"]] = (
                    params["player_id"], dict(params["properties"])
                )
        elif "MATCH (u:Unavailability" in query:
            self.unavailabilities.pop(params["unavailability_id"], None)

    def clear_database(self) -> None:
        self.execute_write("MATCH (n) DETACH DELETE n")

    def ensure_schema(self) -> None:
        pass


_ids = itertools.count(1)


def _player(
    player_id: str,
    position: str = "Milieu",
    teams=("Seniors 1",),
    performances=(),
    **kwargs,
) -> Player:
    return Player(
        player_id=player_id,
        first_name=kwargs.pop("first_name", "Test"),
        last_name=kwargs.pop("last_name", player_id),
        date_of_birth=kwargs.pop("date_of_birth", date(2000, 1, 1)),
        position=position,
        teams=list(teams),
        performances=list(performances),
        **kwargs,
    )


def _match(
    day: date,
    opponent="FC Test",
    present: bool = True,
    location="home",
    score=(2, 1),
    match_type="D2",
    **fields,
) -> PerformanceRecord:
    return PerformanceRecord(
        performance_id=fields.pop("performance_id", f"M{next(_ids)}"),
        date=day,
        kind=MATCH,
        present=present,
        season=fields.pop("season", season_from_date(day)),
        opponent=opponent,
        location=location,
        score_home=score[0] if score else None,
        score_away=score[1] if score else None,
        match_type=match_type,
        **fields,
    )


def _training(day: date, present: bool = True, **fields) -> PerformanceRecord:
    return PerformanceRecord(
        performance_id=fields.pop("performance_id", f"T{next(_ids)}"),
        date=day,
        kind=TRAINING,
        present=present,
        season=fields.pop("season", season_from_date(day)),
        **fields,
    )


@pytest.fixture
def make_player():
    """Build a Player with test defaults."""
    return _player


@pytest.fixture
def make_match():
    """Build a match record; the season follows the date."""
    return _match


@pytest.fixture
def make_training():
    """Build a training record; the season follows the date."""
    return _training


@pytest.fixture
def sample_players():
    """The demo roster as plain dataclasses."""
    return get_sample_data()["players"]


@pytest.fixture
def mock_db():
    """Provide an empty mock database for testing."""
    db = MockNeo4jDatabase()
    db.connect()
    return db


@pytest.fixture
def db_with_sample_data(mock_db):
    """Provide a mock database populated through the repository."""
    load_sample_data(mock_db)
    return mock_db


@pytest.fixture
def repository(db_with_sample_data):
    return PlayerRepository(db_with_sample_data)
