"""Demo roster for populating Neo4j and for tests."""

from datetime import date
from typing import Any

from .database import Neo4jDatabase
from .logging import get_logger
from .models import (
    MATCH,
    TRAINING,
    Assister,
    CardDetail,
    PerformanceRecord,
    Player,
    Scorer,
    Unavailability,
)
from .repository import PlayerRepository
from .seasons import season_from_date

logger = get_logger(__name__)


def _match(
    performance_id: str,
    day: date,
    opponent: str,
    location: str,
    score: tuple[int, int],
    match_type: str,
    present: bool = True,
    minutes: int = 90,
    goals: int = 0,
    assists: int = 0,
    yellow: int = 0,
    red: int = 0,
    clean_sheet: bool = False,
    scorers: tuple[str, ...] = (),
    assisters: tuple[str, ...] = (),
    booked: tuple[str, ...] = (),
) -> PerformanceRecord:
    return PerformanceRecord(
        performance_id=performance_id,
        date=day,
        kind=MATCH,
        present=present,
        season=season_from_date(day),
        opponent=opponent,
        score_home=score[0],
        score_away=score[1],
        location=location,
        match_type=match_type,
        minutes_played=minutes if present else 0,
        goals=goals,
        assists=assists,
        yellow_cards=yellow,
        red_cards=red,
        clean_sheet=clean_sheet,
        scorers=[Scorer(pid, 0) for pid in scorers],
        assisters=[Assister(pid) for pid in assisters],
        yellow_card_details=[CardDetail(pid, 0) for pid in booked],
        red_card_details=[],
        goals_conceded_details=[],
    )


def _training(performance_id: str, day: date, present: bool = True) -> PerformanceRecord:
    return PerformanceRecord(
        performance_id=performance_id,
        date=day,
        kind=TRAINING,
        present=present,
        season=season_from_date(day),
    )


# Shared match facts for the 2024-2025 demo season
MATCH_1 = (date(2024, 9, 1), "FC Test", "home", (2, 1), "D2")
MATCH_2 = (date(2024, 9, 15), "AS Plaisance", "away", (0, 0), "D2")
MATCH_3 = (date(2024, 10, 6), "Vic-Fezensac", "home", (3, 0), "CdF")
RESERVE_MATCH = (date(2024, 9, 8), "Riscle", "away", (1, 2), "R2")

TRAININGS = [date(2024, 8, 28), date(2024, 9, 4), date(2024, 9, 11), date(2024, 10, 2)]


def get_sample_data() -> dict[str, Any]:
    """Get a demo roster covering one season of two senior squads."""
    scorers_1 = ("P001", "P003")
    scorers_3 = ("P003", "P003", "P004")

    players = [
        Player(
            "P001", "Lucas", "Bernard", date(1998, 3, 12), "Attaquant",
            ["Seniors 1"], "LIC-001",
            match_attendance_rate=80.0, training_attendance_rate=70.0,
            performances=[
                _match("R001", *MATCH_1, goals=1, scorers=scorers_1, assisters=("P002",)),
                _match("R002", *MATCH_2),
                _match("R003", *MATCH_3, present=False),
                _training("R004", TRAININGS[0]),
                _training("R005", TRAININGS[1]),
                _training("R006", TRAININGS[2], present=False),
                _training("R007", TRAININGS[3]),
            ],
            unavailabilities=[
                Unavailability("U002", date(2024, 10, 1), "Vacances", "personal",
                               date(2024, 10, 10)),
            ],
        ),
        Player(
            "P002", "Hugo", "Dupuy", date(2001, 11, 2), "Milieu",
            ["Seniors 1", "Seniors 2"], "LIC-002",
            payment_valid=False,
            performances=[
                _match("R010", *MATCH_1, assists=1, yellow=1, scorers=scorers_1,
                       assisters=("P002",), booked=("P002",)),
                _match("R011", *RESERVE_MATCH, minutes=60),
                _match("R012", *MATCH_3, assists=2, scorers=scorers_3),
                _training("R013", TRAININGS[0]),
                _training("R014", TRAININGS[2]),
            ],
        ),
        Player(
            "P003", "Théo", "Castex", date(1995, 6, 30), "Attaquant",
            ["Seniors 1"], "LIC-003",
            performances=[
                _match("R020", *MATCH_1, goals=1, scorers=scorers_1),
                _match("R021", *MATCH_2, minutes=75),
                _match("R022", *MATCH_3, goals=2, scorers=scorers_3),
                _training("R023", TRAININGS[1]),
                _training("R024", TRAININGS[3]),
            ],
        ),
        Player(
            "P004", "Antoine", "Lafitte", date(1992, 1, 20), "Défenseur",
            ["Seniors 2"], "LIC-004",
            license_valid=False,
            performances=[
                _match("R030", *RESERVE_MATCH),
                _match("R031", *MATCH_3, goals=1, clean_sheet=True, scorers=scorers_3),
                _training("R032", TRAININGS[0]),
            ],
        ),
        Player(
            "P005", "Julien", "Abadie", date(1990, 4, 5), "Gardien",
            ["Seniors 1"], "LIC-005",
            performances=[
                _match("R040", *MATCH_1),
                _match("R041", *MATCH_2, clean_sheet=True),
                _match("R042", *MATCH_3, clean_sheet=True),
                _training("R043", TRAININGS[0]),
                _training("R044", TRAININGS[1]),
                _training("R045", TRAININGS[2]),
                _training("R046", TRAININGS[3]),
            ],
            unavailabilities=[
                Unavailability("U001", date(2024, 11, 1), "Entorse", "injury",
                               date(2024, 11, 20), "Cheville droite"),
            ],
        ),
        Player(
            "P006", "Marie", "Soulé", date(1975, 8, 17), "Milieu",
            ["Dirigeant / Dirigeante"], "LIC-006",
        ),
        Player(
            "P007", "Paul", "Noguès", date(1968, 2, 9), "Défenseur",
            ["Dirigeant"], "LIC-007",
            payment_valid=False,
        ),
    ]

    return {"players": players}


def load_sample_data(db: Neo4jDatabase) -> None:
    """Load the demo roster into the database."""
    repository = PlayerRepository(db)
    data = get_sample_data()

    db.ensure_schema()

    for player in data["players"]:
        repository.save_player(player)
        for record in player.performances:
            repository.add_performance_record(player.player_id, record)
        for unavailability in player.unavailabilities:
            repository.add_unavailability(player.player_id, unavailability)

    logger.info("Loaded {} sample players", len(data["players"]))
