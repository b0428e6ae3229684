"""Tests for team rollups, rankings and distributions."""

from datetime import date

import pytest

from club_stats_mcp.rollup import (
    DIRIGEANT_TAG,
    match_type_breakdown,
    normalize_team_tag,
    players_with_season_stats,
    position_distribution,
    rank_players,
    rollup_team,
    team_distribution,
)


SEASON = "2024-2025"


@pytest.fixture
def summaries(sample_players):
    return players_with_season_stats(sample_players, sample_players, SEASON)


def test_only_players_active_in_the_season(summaries):
    assert [s.player.player_id for s in summaries] == ["P001", "P002", "P003", "P004", "P005"]


def test_whole_club_rollup(summaries, sample_players):
    summary = rollup_team(summaries, sample_players, SEASON, today=date(2025, 1, 1))
    assert summary.total_players == 5
    assert summary.total_goals == 5
    assert summary.total_matches == 4
    assert summary.total_trainings == 4
    assert summary.average_age == pytest.approx(29.8)
    assert summary.average_match_attendance == pytest.approx(68.333, rel=1e-3)
    assert summary.average_training_attendance == pytest.approx(60.0)


def test_all_team_means_no_filter(summaries, sample_players):
    everyone = rollup_team(summaries, sample_players, SEASON, today=date(2025, 1, 1))
    with_all = rollup_team(summaries, sample_players, SEASON, team="all", today=date(2025, 1, 1))
    assert everyone == with_all


def test_average_age_skips_missing_birth_dates(make_player, make_training):
    players = [
        make_player("A", date_of_birth=date(2000, 5, 1), performances=[make_training(date(2024, 9, 3))]),
        make_player("B", date_of_birth=None, performances=[make_training(date(2024, 9, 3))]),
    ]
    summaries = players_with_season_stats(players, players, SEASON)
    summary = rollup_team(summaries, players, SEASON, today=date(2025, 3, 1))
    assert summary.total_players == 2
    assert summary.average_age == 25


def test_empty_rollup(sample_players):
    summary = rollup_team([], sample_players, "2019-2020")
    assert summary.total_players == 0
    assert summary.average_age == 0.0
    assert summary.total_matches == 0


def test_top_scorers(summaries):
    ranked = rank_players(summaries, "goals")
    assert [s.player.last_name for s in ranked] == ["Castex", "Bernard", "Lafitte"]


def test_ties_are_broken_by_name(summaries):
    ranked = rank_players(summaries, "red_cards", limit=None)
    assert [s.player.last_name for s in ranked] == ["Abadie", "Bernard", "Castex", "Dupuy", "Lafitte"]


def test_clean_sheet_ranking_lists_goalkeepers(summaries):
    ranked = rank_players(summaries, "clean_sheets")
    assert [s.player.last_name for s in ranked] == ["Abadie"]


def test_cards_weigh_reds_double(make_player, make_match):
    booked = make_player("A", performances=[make_match(date(2024, 9, 1), yellow_cards=1)])
    sent_off = make_player("B", performances=[make_match(date(2024, 9, 1), red_cards=1)])
    players = [booked, sent_off]
    ranked = rank_players(players_with_season_stats(players, players, SEASON), "cards")
    assert [s.player.player_id for s in ranked] == ["B", "A"]


def test_unknown_metric(summaries):
    with pytest.raises(KeyError):
        rank_players(summaries, "tackles")


def test_normalize_team_tag():
    assert normalize_team_tag("Dirigeant") == DIRIGEANT_TAG
    assert normalize_team_tag("Dirigeant / Dirigeante") == DIRIGEANT_TAG
    assert normalize_team_tag("Seniors 1") == "Seniors 1"


def test_team_distribution(sample_players):
    assert team_distribution(sample_players) == {
        "Seniors 1": 4,
        "Seniors 2": 2,
        DIRIGEANT_TAG: 2,
    }


def test_player_with_two_staff_spellings_counts_once(make_player):
    staff = make_player("A", teams=["Dirigeant", "Dirigeant/Dirigeante"])
    assert team_distribution([staff]) == {DIRIGEANT_TAG: 1}


def test_position_distribution(sample_players):
    assert position_distribution(sample_players) == {
        "Gardien": 1,
        "Défenseur": 2,
        "Milieu": 2,
        "Attaquant": 2,
    }


def test_match_type_breakdown(sample_players):
    dupuy = next(p for p in sample_players if p.last_name == "Dupuy")
    assert match_type_breakdown(dupuy, SEASON) == {"D2": 1, "R2": 1, "CdF": 1}

    bernard = next(p for p in sample_players if p.last_name == "Bernard")
    assert match_type_breakdown(bernard) == {"D2": 2}
