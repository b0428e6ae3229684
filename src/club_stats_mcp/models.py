"""Data models for the club roster and season statistics."""

from dataclasses import dataclass, field
from datetime import date
from typing import NamedTuple, Optional


TRAINING = "training"
MATCH = "match"

GOALKEEPER = "Gardien"
POSITIONS = ("Gardien", "Défenseur", "Milieu", "Attaquant")

# Competition codes used on match records
MATCH_TYPES = ("D2", "R2", "CdF", "CO", "CG", "ChD", "CR", "CS")
ALL_MATCH_TYPES = "all"

UNKNOWN_OPPONENT = "UnknownOpponent"
UNKNOWN_LOCATION = "unknownLocation"
UNKNOWN_SCORE = "N/A"


@dataclass
class Scorer:
    player_id: str
    minute: int = 0


@dataclass
class Assister:
    player_id: str


@dataclass
class CardDetail:
    player_id: str
    minute: int = 0


@dataclass
class GoalConceded:
    minute: int
    player_id: Optional[str] = None


@dataclass
class PerformanceRecord:
    performance_id: str
    date: date
    kind: str  # 'training' or 'match'
    present: bool = False
    season: str = ""
    opponent: Optional[str] = None
    score_home: Optional[int] = None
    score_away: Optional[int] = None
    location: Optional[str] = None  # 'home' or 'away'
    match_type: Optional[str] = None
    minutes_played: Optional[int] = None
    goals: Optional[int] = None
    assists: Optional[int] = None
    yellow_cards: Optional[int] = None
    red_cards: Optional[int] = None
    clean_sheet: Optional[bool] = None
    scorers: Optional[list[Scorer]] = None
    assisters: Optional[list[Assister]] = None
    yellow_card_details: Optional[list[CardDetail]] = None
    red_card_details: Optional[list[CardDetail]] = None
    goals_conceded_details: Optional[list[GoalConceded]] = None
    excused: bool = False


@dataclass
class Unavailability:
    unavailability_id: str
    start_date: date
    reason: str
    type: str = "other"  # 'injury', 'personal' or 'other'
    end_date: Optional[date] = None
    description: str = ""


@dataclass
class Player:
    player_id: str
    first_name: str
    last_name: str
    date_of_birth: Optional[date]
    position: str
    teams: list[str] = field(default_factory=list)
    license_number: str = ""
    license_valid: bool = True
    payment_valid: bool = True
    # All-time rates stored with the player, used when a season has no events
    match_attendance_rate: float = 0.0
    training_attendance_rate: float = 0.0
    performances: list[PerformanceRecord] = field(default_factory=list)
    unavailabilities: list[Unavailability] = field(default_factory=list)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class EventKey(NamedTuple):
    """Identity of one real-world event, rebuilt from per-player records."""

    season: str
    date: date
    opponent: Optional[str] = None
    location: Optional[str] = None
    score_home: object = None
    score_away: object = None


@dataclass(frozen=True)
class TeamEvent:
    key: EventKey
    kind: str
    date: date
    season: str
    opponent: Optional[str] = None
    match_type: Optional[str] = None


@dataclass
class PlayerSeasonStats:
    total_matches: int = 0
    present_matches: int = 0
    total_minutes: int = 0
    goals: int = 0
    assists: int = 0
    yellow_cards: int = 0
    red_cards: int = 0
    clean_sheets: int = 0
    present_trainings: int = 0
    match_attendance_rate_season: float = 0.0
    training_attendance_rate_season: float = 0.0


@dataclass(frozen=True)
class AttendanceRates:
    match_attendance_rate_season: float
    training_attendance_rate_season: float


@dataclass
class PlayerSeasonSummary:
    player: Player
    stats: PlayerSeasonStats


@dataclass
class TeamSummary:
    total_players: int = 0
    average_age: float = 0.0
    total_goals: int = 0
    total_matches: int = 0
    total_trainings: int = 0
    average_match_attendance: float = 0.0
    average_training_attendance: float = 0.0
