"""Reconcile per-player performance records into team events.

A match or training session is stored once per player who was rostered for
it, with no shared event id. Records describing the same real event are
recognised by value equality of an ``EventKey`` and collapse to a single
``TeamEvent``.
"""

from typing import Iterable, Optional

from .logging import get_logger
from .models import (
    ALL_MATCH_TYPES,
    MATCH,
    UNKNOWN_LOCATION,
    UNKNOWN_OPPONENT,
    UNKNOWN_SCORE,
    EventKey,
    PerformanceRecord,
    Player,
    TeamEvent,
)

logger = get_logger(__name__)


def event_key(record: PerformanceRecord) -> EventKey:
    """Build the identity key of the event a record refers to."""
    if record.kind != MATCH:
        return EventKey(record.season, record.date)

    return EventKey(
        season=record.season,
        date=record.date,
        opponent=record.opponent or UNKNOWN_OPPONENT,
        location=record.location or UNKNOWN_LOCATION,
        score_home=UNKNOWN_SCORE if record.score_home is None else record.score_home,
        score_away=UNKNOWN_SCORE if record.score_away is None else record.score_away,
    )


def players_in_team(players: Iterable[Player], team: Optional[str]) -> list[Player]:
    """Restrict a roster to the players listing ``team`` (None keeps all)."""
    if not team or team == "all":
        return list(players)
    return [p for p in players if team in (p.teams or [])]


def reconcile_events(
    players: Iterable[Player],
    kind: str,
    team: Optional[str] = None,
    season: Optional[str] = None,
    match_type: Optional[str] = None,
) -> list[TeamEvent]:
    """Collapse the roster's performance records into distinct team events.

    Args:
        players: Roster snapshot whose records form the pool.
        kind: "match" or "training".
        team: Only consider records of players listing this team.
        season: Only consider records labelled with this season.
        match_type: For matches, only this competition code ("all" keeps all).

    Returns:
        One TeamEvent per distinct key, in the order first seen. The first
        record seen for a key provides the displayed attributes.
    """
    filter_match_type = (
        kind == MATCH and match_type is not None and match_type != ALL_MATCH_TYPES
    )

    events: dict[EventKey, TeamEvent] = {}
    for player in players_in_team(players, team):
        for record in player.performances or []:
            if record.kind != kind:
                continue
            if season and record.season != season:
                continue
            if filter_match_type and record.match_type != match_type:
                continue

            key = event_key(record)
            if key in events:
                continue
            events[key] = TeamEvent(
                key=key,
                kind=record.kind,
                date=record.date,
                season=record.season,
                opponent=record.opponent,
                match_type=record.match_type,
            )

    logger.debug(
        "Reconciled {} {} event(s) (team={}, season={}, match_type={})",
        len(events), kind, team, season, match_type,
    )
    return list(events.values())


def match_event_keys(
    players: Iterable[Player], team: Optional[str], season: Optional[str]
) -> set[tuple]:
    """Return the (date, opponent) keys of a team's matches for a season.

    These coarser keys let matches seen from two teams' rosters be counted
    once when a player belongs to both teams.
    """
    return {
        (event.date, event.opponent or UNKNOWN_OPPONENT)
        for event in reconcile_events(players, MATCH, team=team, season=season)
    }
