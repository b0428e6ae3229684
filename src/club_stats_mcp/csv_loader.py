"""Import a club roster and its performance log from CSV exports."""

import re
from pathlib import Path
from typing import Any, Optional

import pandas as pd

from .dates import parse_date
from .logging import get_logger
from .models import MATCH, TRAINING, PerformanceRecord, Player
from .repository import PlayerRepository
from .seasons import season_from_date

logger = get_logger(__name__)


PLAYERS_FILE = "players.csv"
PERFORMANCES_FILE = "performances.csv"

TRUE_VALUES = {"1", "true", "yes", "oui", "x", "ok", "valide"}

KIND_ALIASES = {
    "match": MATCH,
    "matchs": MATCH,
    "training": TRAINING,
    "entrainement": TRAINING,
    "entraînement": TRAINING,
}

_TEAM_SEPARATOR = re.compile(r"\s*[+,;]\s*")


def _value(row: pd.Series, column: str) -> Any:
    value = row.get(column)
    if value is None or (not isinstance(value, (list, tuple)) and pd.isna(value)):
        return None
    return value


def _as_bool(value: Any, default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUE_VALUES


def _as_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return None


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def split_teams(value: Any) -> list[str]:
    """Split a team cell such as "Seniors 1 + Seniors 2"."""
    text = _as_text(value)
    if not text:
        return []
    return [t for t in _TEAM_SEPARATOR.split(text) if t]


class CsvRosterLoader:
    """Read ``players.csv`` and ``performances.csv`` from a directory."""

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)
        self.skipped = 0

    def _read(self, name: str) -> pd.DataFrame:
        csv_path = self.data_dir / name
        if not csv_path.exists():
            logger.warning("{} not found in {}", name, self.data_dir)
            return pd.DataFrame()
        return pd.read_csv(csv_path, dtype=str, keep_default_na=True)

    def _player_from_row(self, row: pd.Series) -> Optional[Player]:
        player_id = _as_text(_value(row, "player_id"))
        if not player_id:
            return None

        return Player(
            player_id=player_id,
            first_name=_as_text(_value(row, "first_name")) or "",
            last_name=_as_text(_value(row, "last_name")) or "",
            date_of_birth=parse_date(_value(row, "date_of_birth")),
            position=_as_text(_value(row, "position")) or "",
            teams=split_teams(_value(row, "teams")),
            license_number=_as_text(_value(row, "license_number")) or "",
            # Absent admin columns leave the player in good standing
            license_valid=_as_bool(_value(row, "license_valid"), default=True),
            payment_valid=_as_bool(_value(row, "payment_valid"), default=True),
        )

    def _record_from_row(self, row: pd.Series) -> Optional[PerformanceRecord]:
        day = parse_date(_value(row, "date"))
        kind_cell = _value(row, "type") or _value(row, "kind")
        kind = KIND_ALIASES.get((_as_text(kind_cell) or "").lower())
        if day is None or kind is None:
            return None

        return PerformanceRecord(
            performance_id=_as_text(_value(row, "performance_id")) or "",
            date=day,
            kind=kind,
            present=_as_bool(_value(row, "present")),
            season=_as_text(_value(row, "season")) or season_from_date(day),
            opponent=_as_text(_value(row, "opponent")),
            score_home=_as_int(_value(row, "score_home")),
            score_away=_as_int(_value(row, "score_away")),
            location=_as_text(_value(row, "location")),
            match_type=_as_text(_value(row, "match_type")),
            minutes_played=_as_int(_value(row, "minutes_played")),
            goals=_as_int(_value(row, "goals")),
            assists=_as_int(_value(row, "assists")),
            yellow_cards=_as_int(_value(row, "yellow_cards")),
            red_cards=_as_int(_value(row, "red_cards")),
            clean_sheet=_as_bool(_value(row, "clean_sheet")),
            excused=_as_bool(_value(row, "excused")),
        )

    def load_players(self) -> list[Player]:
        """Build player snapshots with their performances attached.

        Rows without an id, with an unreadable date or an unknown event type
        are skipped and counted in ``skipped``.
        """
        self.skipped = 0
        players: dict[str, Player] = {}

        for _, row in self._read(PLAYERS_FILE).iterrows():
            player = self._player_from_row(row)
            if player is None:
                self.skipped += 1
                continue
            players[player.player_id] = player

        for index, row in self._read(PERFORMANCES_FILE).iterrows():
            player = players.get(_as_text(_value(row, "player_id")) or "")
            record = self._record_from_row(row)
            if player is None or record is None:
                logger.warning("Skipping performance row {}", index)
                self.skipped += 1
                continue
            if not record.performance_id:
                record.performance_id = f"{player.player_id}-{index}"
            player.performances.append(record)

        logger.info(
            "Read {} players from {} ({} rows skipped)",
            len(players), self.data_dir, self.skipped,
        )
        return list(players.values())

    def load_into(self, repository: PlayerRepository) -> dict[str, int]:
        """Write the imported roster through the repository."""
        stats = {"players": 0, "performances": 0, "skipped": 0}

        for player in self.load_players():
            repository.save_player(player)
            stats["players"] += 1
            for record in player.performances:
                repository.add_performance_record(player.player_id, record)
                stats["performances"] += 1

        stats["skipped"] = self.skipped
        return stats


def load_csv_roster(repository: PlayerRepository, data_dir: Path) -> dict[str, int]:
    """Import ``data_dir`` into the roster store."""
    return CsvRosterLoader(data_dir).load_into(repository)
