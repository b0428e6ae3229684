"""Player roster persistence on Neo4j.

Players are ``(:Player)`` nodes. Each logged performance is a
``(:Performance)`` node attached with ``RECORDED`` and each unavailability a
``(:Unavailability)`` node attached with ``UNAVAILABLE``. Dates are stored as
ISO strings and itemized match details as JSON strings.
"""

import json
import uuid
from dataclasses import asdict, replace
from datetime import date
from typing import Any, Optional

from .database import Neo4jDatabase
from .dates import parse_date
from .events import event_key
from .logging import get_logger
from .models import (
    Assister,
    CardDetail,
    EventKey,
    GoalConceded,
    PerformanceRecord,
    Player,
    Scorer,
    Unavailability,
)
from .seasons import season_from_date

logger = get_logger(__name__)

DETAIL_FIELDS = {
    "scorers": Scorer,
    "assisters": Assister,
    "yellow_card_details": CardDetail,
    "red_card_details": CardDetail,
    "goals_conceded_details": GoalConceded,
}

# Fields shared by every player's record of the same match
MATCH_FIELDS = (
    "date",
    "opponent",
    "score_home",
    "score_away",
    "location",
    "match_type",
    *DETAIL_FIELDS,
)


class PlayerNotFoundError(LookupError):
    """Raised when writing to a player that does not exist."""

    def __init__(self, player_id: str):
        super().__init__(f"Player with ID '{player_id}' not found")
        self.player_id = player_id


def _new_id() -> str:
    return uuid.uuid4().hex


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


def player_properties(player: Player) -> dict[str, Any]:
    return {
        "player_id": player.player_id,
        "first_name": player.first_name,
        "last_name": player.last_name,
        "date_of_birth": _iso(player.date_of_birth),
        "position": player.position,
        "teams": list(player.teams or []),
        "license_number": player.license_number,
        "license_valid": player.license_valid,
        "payment_valid": player.payment_valid,
        "match_attendance_rate": player.match_attendance_rate,
        "training_attendance_rate": player.training_attendance_rate,
    }


def record_properties(record: PerformanceRecord) -> dict[str, Any]:
    props = asdict(record)
    props["date"] = _iso(record.date)
    for name in DETAIL_FIELDS:
        items = getattr(record, name)
        props[name] = None if items is None else json.dumps([asdict(i) for i in items])
    return props


def unavailability_properties(unavailability: Unavailability) -> dict[str, Any]:
    props = asdict(unavailability)
    props["start_date"] = _iso(unavailability.start_date)
    props["end_date"] = _iso(unavailability.end_date)
    return props


def record_from_properties(props: dict[str, Any]) -> PerformanceRecord:
    values = dict(props)
    values["date"] = parse_date(values.get("date"))
    for name, detail_type in DETAIL_FIELDS.items():
        raw = values.get(name)
        if raw is None:
            values[name] = None
            continue
        items = json.loads(raw) if isinstance(raw, str) else raw
        values[name] = [detail_type(**item) for item in items]
    known = PerformanceRecord.__dataclass_fields__
    return PerformanceRecord(**{k: v for k, v in values.items() if k in known})


def unavailability_from_properties(props: dict[str, Any]) -> Unavailability:
    values = dict(props)
    values["start_date"] = parse_date(values.get("start_date"))
    values["end_date"] = parse_date(values.get("end_date"))
    known = Unavailability.__dataclass_fields__
    return Unavailability(**{k: v for k, v in values.items() if k in known})


def player_from_row(row: dict[str, Any]) -> Player:
    props = dict(row["player"])
    props["date_of_birth"] = parse_date(props.get("date_of_birth"))
    props["teams"] = list(props.get("teams") or [])
    known = Player.__dataclass_fields__
    player = Player(**{k: v for k, v in props.items() if k in known})
    player.performances = sorted(
        (record_from_properties(r) for r in row.get("performances") or []),
        key=lambda r: (r.date or date.min, r.performance_id),
    )
    player.unavailabilities = [
        unavailability_from_properties(u) for u in row.get("unavailabilities") or []
    ]
    return player


class PlayerRepository:
    """Read and write the club roster."""

    def __init__(self, db: Neo4jDatabase):
        self.db = db

    def list_players(self) -> list[Player]:
        """Load a snapshot of every player with their full history."""
        query = """
        MATCH (p:Player)
        OPTIONAL MATCH (p)-[:RECORDED]->(r:Performance)
        WITH p, collect(r {.*}) as performances
        OPTIONAL MATCH (p)-[:UNAVAILABLE]->(u:Unavailability)
        RETURN p {.*} as player, performances, collect(u {.*}) as unavailabilities
        ORDER BY p.last_name, p.first_name
        """
        rows = self.db.execute_query(query)
        players = [player_from_row(row) for row in rows]
        logger.debug("Loaded {} players", len(players))
        return players

    def get_player(self, player_id: str) -> Optional[Player]:
        """Load one player with their history, or None."""
        query = """
        MATCH (p:Player {player_id: $player_id})
        OPTIONAL MATCH (p)-[:RECORDED]->(r:Performance)
        WITH p, collect(r {.*}) as performances
        OPTIONAL MATCH (p)-[:UNAVAILABLE]->(u:Unavailability)
        RETURN p {.*} as player, performances, collect(u {.*}) as unavailabilities
        """
        rows = self.db.execute_query(query, {"player_id": player_id})
        if not rows:
            return None
        return player_from_row(rows[0])

    def _require_player(self, player_id: str) -> None:
        query = "MATCH (p:Player {player_id: $player_id}) RETURN p.player_id as player_id"
        if not self.db.execute_query(query, {"player_id": player_id}):
            raise PlayerNotFoundError(player_id)

    def save_player(self, player: Player) -> Player:
        """Create or update a player's profile.

        Performances and unavailabilities are written through their own
        methods. A player without an id gets a generated one.
        """
        if not player.player_id:
            player = replace(player, player_id=_new_id())

        query = """
        MERGE (p:Player {player_id: $player_id})
        SET p += $properties
        """
        self.db.execute_write(
            query,
            {"player_id": player.player_id, "properties": player_properties(player)},
        )
        logger.info("Saved player {} ({})", player.player_id, player.full_name)
        return player

    def delete_player(self, player_id: str) -> None:
        """Delete a player together with their records."""
        query = """
        MATCH (p:Player {player_id: $player_id})
        OPTIONAL MATCH (p)-[:RECORDED|UNAVAILABLE]->(x)
        DETACH DELETE x, p
        """
        self.db.execute_write(query, {"player_id": player_id})
        logger.info("Deleted player {}", player_id)

    def delete_players(self, player_ids: list[str]) -> None:
        """Delete several players in one write."""
        query = """
        UNWIND $player_ids as player_id
        MATCH (p:Player {player_id: player_id})
        OPTIONAL MATCH (p)-[:RECORDED|UNAVAILABLE]->(x)
        DETACH DELETE x, p
        """
        self.db.execute_write(query, {"player_ids": list(player_ids)})
        logger.info("Deleted {} players", len(player_ids))

    def add_performance_record(
        self, player_id: str, record: PerformanceRecord
    ) -> PerformanceRecord:
        """Write a performance into a player's history.

        Records are keyed by id, so writing the same record again replaces it.
        The season label is derived from the record date when missing.

        Raises:
            PlayerNotFoundError: if the player does not exist.
        """
        self._require_player(player_id)

        if not record.performance_id:
            record = replace(record, performance_id=_new_id())
        if not record.season:
            record = replace(record, season=season_from_date(record.date))

        query = """
        MATCH (p:Player {player_id: $player_id})
        MERGE (r:Performance {performance_id: $performance_id})
        SET r = $properties
        MERGE (p)-[:RECORDED]->(r)
        """
        self.db.execute_write(
            query,
            {
                "player_id": player_id,
                "performance_id": record.performance_id,
                "properties": record_properties(record),
            },
        )
        logger.debug(
            "Recorded {} on {} for player {}", record.kind, record.date, player_id
        )
        return record

    def _records_for_event(self, key: EventKey) -> list[PerformanceRecord]:
        return [
            record
            for player in self.list_players()
            for record in player.performances
            if event_key(record) == key
        ]

    def update_match(self, key: EventKey, **changes: Any) -> int:
        """Edit the shared fields of a match on every player's record.

        Only fields common to all records of a match (date, opponent, score,
        location, competition and itemized details) may change. The season
        follows the date. Returns the number of records rewritten.

        Raises:
            ValueError: if a change targets a per-player field.
        """
        unknown = set(changes) - set(MATCH_FIELDS)
        if unknown:
            raise ValueError(f"Not a shared match field: {', '.join(sorted(unknown))}")
        if "date" in changes:
            changes["season"] = season_from_date(changes["date"])

        query = """
        MATCH (r:Performance {performance_id: $performance_id})
        SET r += $properties
        """
        records = self._records_for_event(key)
        for record in records:
            updated = record_properties(replace(record, **changes))
            properties = {name: updated[name] for name in changes}
            self.db.execute_write(
                query,
                {"performance_id": record.performance_id, "properties": properties},
            )

        logger.info("Updated {} record(s) of match {}", len(records), key)
        return len(records)

    def delete_event(self, key: EventKey) -> int:
        """Delete every player's record of one match or training."""
        records = self._records_for_event(key)
        if records:
            self.db.execute_write(
                """
                UNWIND $performance_ids as performance_id
                MATCH (r:Performance {performance_id: performance_id})
                DETACH DELETE r
                """,
                {"performance_ids": [r.performance_id for r in records]},
            )
        logger.info("Deleted {} record(s) of event {}", len(records), key)
        return len(records)

    def add_unavailability(
        self, player_id: str, unavailability: Unavailability
    ) -> Unavailability:
        """Attach an unavailability period to a player.

        Raises:
            PlayerNotFoundError: if the player does not exist.
        """
        self._require_player(player_id)

        if not unavailability.unavailability_id:
            unavailability = replace(unavailability, unavailability_id=_new_id())

        query = """
        MATCH (p:Player {player_id: $player_id})
        MERGE (u:Unavailability {unavailability_id: $unavailability_id})
        SET u = $properties
        MERGE (p)-[:UNAVAILABLE]->(u)
        """
        self.db.execute_write(
            query,
            {
                "player_id": player_id,
                "unavailability_id": unavailability.unavailability_id,
                "properties": unavailability_properties(unavailability),
            },
        )
        logger.info("Added unavailability for player {}", player_id)
        return unavailability

    def delete_unavailability(self, unavailability_id: str) -> None:
        query = """
        MATCH (u:Unavailability {unavailability_id: $unavailability_id})
        DETACH DELETE u
        """
        self.db.execute_write(query, {"unavailability_id": unavailability_id})
