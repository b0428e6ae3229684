"""Tests for the per-player season fold."""

from datetime import date

from club_stats_mcp.aggregation import aggregate_player_season, sanitize_record
from club_stats_mcp.models import PlayerSeasonStats


SEASON = "2024-2025"


def test_sanitize_fills_missing_values(make_match):
    record = sanitize_record(make_match(date(2024, 9, 1)))
    assert record.minutes_played == 0
    assert record.goals == 0
    assert record.clean_sheet is False
    assert record.scorers == []
    assert record.goals_conceded_details == []


def test_forward_season(sample_players):
    castex = next(p for p in sample_players if p.last_name == "Castex")
    stats = aggregate_player_season(castex, SEASON)
    assert stats.total_matches == 3
    assert stats.present_matches == 3
    assert stats.total_minutes == 255
    assert stats.goals == 3
    assert stats.present_trainings == 2
    assert stats.match_attendance_rate_season == 0.0


def test_cards_and_assists(sample_players):
    dupuy = next(p for p in sample_players if p.last_name == "Dupuy")
    stats = aggregate_player_season(dupuy, SEASON)
    assert stats.assists == 3
    assert stats.yellow_cards == 1
    assert stats.total_minutes == 240


def test_clean_sheet_flag_ignored_for_outfield_player(sample_players):
    lafitte = next(p for p in sample_players if p.last_name == "Lafitte")
    abadie = next(p for p in sample_players if p.last_name == "Abadie")
    assert aggregate_player_season(lafitte, SEASON).clean_sheets == 0
    assert aggregate_player_season(abadie, SEASON).clean_sheets == 2


def test_other_season_is_empty(sample_players):
    assert aggregate_player_season(sample_players[0], "2023-2024") == PlayerSeasonStats()


def test_matches_without_minutes_still_count(make_player, make_match):
    player = make_player("P001", performances=[make_match(date(2024, 9, 1))])
    stats = aggregate_player_season(player, SEASON)
    assert stats.total_matches == 1
    assert stats.total_minutes == 0
