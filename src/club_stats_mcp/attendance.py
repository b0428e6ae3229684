"""Season attendance rates."""

from dataclasses import replace
from datetime import date
from typing import Iterable, Optional

from .aggregation import aggregate_player_season
from .events import match_event_keys, reconcile_events
from .logging import get_logger
from .models import (
    TRAINING,
    AttendanceRates,
    PerformanceRecord,
    Player,
    PlayerSeasonStats,
    Unavailability,
)
from .seasons import records_for_season

logger = get_logger(__name__)


def _rate(present: int, total: int, fallback: float) -> float:
    if total > 0:
        return present / total * 100
    return fallback


def compute_attendance_rates(
    player: Player,
    stats: PlayerSeasonStats,
    all_players: Iterable[Player],
    season: str,
    fallback_match_rate: Optional[float] = None,
    fallback_training_rate: Optional[float] = None,
) -> AttendanceRates:
    """Compute a player's match and training attendance for a season.

    The training denominator is every training of the season, across the
    whole club. The match denominator is the union of the matches of each
    team the player belongs to, so a match shared by two of the player's
    teams counts once.

    When a denominator is zero the rate falls back to the given value, or to
    the all-time rate stored on the player. Rates are not clamped to 100.
    """
    all_players = list(all_players)

    total_trainings = len(reconcile_events(all_players, TRAINING, season=season))

    match_keys: set[tuple] = set()
    for team in player.teams or []:
        match_keys |= match_event_keys(all_players, team, season)
    total_matches = len(match_keys)

    if fallback_match_rate is None:
        fallback_match_rate = player.match_attendance_rate or 0.0
    if fallback_training_rate is None:
        fallback_training_rate = player.training_attendance_rate or 0.0

    if total_matches == 0 or total_trainings == 0:
        logger.debug(
            "No season events for {} in {} (matches={}, trainings={}), using stored rates",
            player.player_id, season, total_matches, total_trainings,
        )

    return AttendanceRates(
        match_attendance_rate_season=_rate(
            stats.present_matches, total_matches, fallback_match_rate
        ),
        training_attendance_rate_season=_rate(
            stats.present_trainings, total_trainings, fallback_training_rate
        ),
    )


def season_stats_for_player(
    player: Player, all_players: Iterable[Player], season: str
) -> PlayerSeasonStats:
    """Aggregate a player's season and fill in the attendance rates."""
    stats = aggregate_player_season(player, season)
    rates = compute_attendance_rates(player, stats, all_players, season)
    return replace(
        stats,
        match_attendance_rate_season=rates.match_attendance_rate_season,
        training_attendance_rate_season=rates.training_attendance_rate_season,
    )


def unavailability_on(
    day: date, unavailabilities: Iterable[Unavailability]
) -> Optional[Unavailability]:
    """Return the unavailability covering ``day``; an open end is still running."""
    for unavailability in unavailabilities:
        if unavailability.start_date is None or day < unavailability.start_date:
            continue
        if unavailability.end_date is None or day <= unavailability.end_date:
            return unavailability
    return None


def is_excused(record: PerformanceRecord, unavailabilities: Iterable[Unavailability]) -> bool:
    """An absence is excused when flagged so or covered by an unavailability."""
    if record.present:
        return False
    return bool(record.excused) or unavailability_on(record.date, unavailabilities) is not None


def excused_absences(player: Player, season: str) -> list[PerformanceRecord]:
    """List the player's excused absences of the season.

    Excused absences are reported only; they stay in the attendance
    denominators.
    """
    unavailabilities = player.unavailabilities or []
    return [
        record
        for record in records_for_season(player.performances or [], season)
        if is_excused(record, unavailabilities)
    ]
