"""Team-wide rollups of the players' season statistics."""

from collections import Counter
from datetime import date
from typing import Callable, Iterable, Optional

from .attendance import season_stats_for_player
from .events import players_in_team, reconcile_events
from .models import (
    GOALKEEPER,
    MATCH,
    POSITIONS,
    TRAINING,
    Player,
    PlayerSeasonStats,
    PlayerSeasonSummary,
    TeamSummary,
)
from .seasons import records_for_season


DIRIGEANT_TAG = "Dirigeant/Dirigeante"
DIRIGEANT_ALIASES = {"Dirigeant", "Dirigeant/Dirigeante", "Dirigeant / Dirigeante"}

RANKING_METRICS: dict[str, Callable[[PlayerSeasonStats], float]] = {
    "goals": lambda s: s.goals,
    "assists": lambda s: s.assists,
    "matches": lambda s: s.total_matches,
    "minutes": lambda s: s.total_minutes,
    "trainings": lambda s: s.present_trainings,
    "yellow_cards": lambda s: s.yellow_cards,
    "red_cards": lambda s: s.red_cards,
    "cards": lambda s: s.yellow_cards + s.red_cards * 2,
    "clean_sheets": lambda s: s.clean_sheets,
    "match_attendance": lambda s: s.match_attendance_rate_season,
    "training_attendance": lambda s: s.training_attendance_rate_season,
}


def players_with_season_stats(
    players: Iterable[Player],
    all_players: Iterable[Player],
    season: str,
    team: Optional[str] = None,
) -> list[PlayerSeasonSummary]:
    """Compute season statistics for every player active in ``season``.

    Players are kept when they belong to ``team`` (if given) and have at
    least one record in the season. Attendance denominators are always
    computed against ``all_players``.
    """
    all_players = list(all_players)
    summaries = []
    for player in players_in_team(players, team):
        if not records_for_season(player.performances or [], season):
            continue
        stats = season_stats_for_player(player, all_players, season)
        summaries.append(PlayerSeasonSummary(player=player, stats=stats))
    return summaries


def _mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def rollup_team(
    summaries: Iterable[PlayerSeasonSummary],
    all_players: Iterable[Player],
    season: str,
    team: Optional[str] = None,
    today: Optional[date] = None,
) -> TeamSummary:
    """Summarise a team's season.

    Match and training totals are distinct team events, not sums of the
    players' counts. Age is the calendar-year difference with the birth
    year; players without a birth date are left out of the average.
    """
    all_players = list(all_players)
    current_year = (today or date.today()).year

    selected = [
        s for s in summaries
        if not team or team == "all" or team in (s.player.teams or [])
    ]

    ages = [
        current_year - s.player.date_of_birth.year
        for s in selected
        if s.player.date_of_birth is not None
    ]

    return TeamSummary(
        total_players=len(selected),
        average_age=_mean(ages),
        total_goals=sum(s.stats.goals for s in selected),
        total_matches=len(reconcile_events(all_players, MATCH, team=team, season=season)),
        total_trainings=len(reconcile_events(all_players, TRAINING, team=team, season=season)),
        average_match_attendance=_mean(
            [s.stats.match_attendance_rate_season for s in selected]
        ),
        average_training_attendance=_mean(
            [s.stats.training_attendance_rate_season for s in selected]
        ),
    )


def _name_key(player: Player) -> tuple[str, str]:
    return (player.last_name or "", player.first_name or "")


def admin_issues(players: Iterable[Player], team: Optional[str] = None) -> list[Player]:
    """Players with an invalid license or a late payment, sorted by name."""
    return sorted(
        (
            p for p in players_in_team(players, team)
            if not p.license_valid or not p.payment_valid
        ),
        key=_name_key,
    )


def normalize_team_tag(tag: str) -> str:
    """Fold the spellings of the staff tag into one."""
    if tag in DIRIGEANT_ALIASES:
        return DIRIGEANT_TAG
    return tag


def team_distribution(players: Iterable[Player]) -> dict[str, int]:
    """Count players per team tag; a player on two teams counts in both."""
    counts: Counter = Counter()
    for player in players:
        for tag in {normalize_team_tag(t) for t in player.teams or []}:
            counts[tag] += 1
    return dict(counts)


def position_distribution(players: Iterable[Player]) -> dict[str, int]:
    counts = {position: 0 for position in POSITIONS}
    for player in players:
        if player.position in counts:
            counts[player.position] += 1
    return counts


def rank_players(
    summaries: Iterable[PlayerSeasonSummary], metric: str, limit: Optional[int] = 3
) -> list[PlayerSeasonSummary]:
    """Order players by a season metric, best first.

    Ties are broken by last name then first name. Clean sheet rankings only
    list goalkeepers.

    Raises:
        KeyError: if ``metric`` is not one of RANKING_METRICS.
    """
    value = RANKING_METRICS[metric]
    candidates = list(summaries)
    if metric == "clean_sheets":
        candidates = [s for s in candidates if s.player.position == GOALKEEPER]

    ranked = sorted(candidates, key=lambda s: (-value(s.stats), *_name_key(s.player)))
    if limit is None:
        return ranked
    return ranked[:limit]


def match_type_breakdown(player: Player, season: Optional[str] = None) -> dict[str, int]:
    """Count the matches a player attended per competition code."""
    records = player.performances or []
    if season:
        records = records_for_season(records, season)

    counts: Counter = Counter(
        r.match_type for r in records
        if r.kind == MATCH and r.present and r.match_type
    )
    return dict(counts)
