"""Fold a player's performance records into season statistics."""

from dataclasses import replace

from .models import (
    GOALKEEPER,
    MATCH,
    TRAINING,
    PerformanceRecord,
    Player,
    PlayerSeasonStats,
)
from .seasons import records_for_season


def sanitize_record(record: PerformanceRecord) -> PerformanceRecord:
    """Return a copy of ``record`` with every missing value defaulted.

    Numeric counters become 0, flags become False and itemized lists become
    empty, so downstream folds never have to guard against None.
    """
    return replace(
        record,
        present=bool(record.present),
        minutes_played=record.minutes_played or 0,
        goals=record.goals or 0,
        assists=record.assists or 0,
        yellow_cards=record.yellow_cards or 0,
        red_cards=record.red_cards or 0,
        clean_sheet=bool(record.clean_sheet),
        scorers=list(record.scorers or []),
        assisters=list(record.assisters or []),
        yellow_card_details=list(record.yellow_card_details or []),
        red_card_details=list(record.red_card_details or []),
        goals_conceded_details=list(record.goals_conceded_details or []),
    )


def aggregate_player_season(player: Player, season: str) -> PlayerSeasonStats:
    """Accumulate one player's counters for ``season``.

    Only records marked present count. Clean sheets accrue to goalkeepers
    only, whatever the flag on the record says. Attendance rates are left at
    zero; see ``attendance.compute_attendance_rates``.
    """
    stats = PlayerSeasonStats()
    is_goalkeeper = player.position == GOALKEEPER

    for raw in records_for_season(player.performances or [], season):
        record = sanitize_record(raw)
        if not record.present:
            continue

        if record.kind == MATCH:
            stats.total_matches += 1
            stats.present_matches += 1
            stats.total_minutes += record.minutes_played
            stats.goals += record.goals
            stats.assists += record.assists
            stats.yellow_cards += record.yellow_cards
            stats.red_cards += record.red_cards
            if record.clean_sheet and is_goalkeeper:
                stats.clean_sheets += 1
        elif record.kind == TRAINING:
            stats.present_trainings += 1

    return stats
