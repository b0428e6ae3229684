"""Tests for presence lists and the attendance sheet."""

from datetime import date

import pytest

from club_stats_mcp.models import MATCH, TRAINING
from club_stats_mcp.presence import event_presence, presence_matrix


SEASON = "2024-2025"


def test_training_presence(sample_players):
    rows = event_presence(sample_players, TRAINING, SEASON)
    assert [row.date for row in rows] == [
        date(2024, 8, 28), date(2024, 9, 4), date(2024, 9, 11), date(2024, 10, 2),
    ]
    assert rows[0].present_players == [
        "Julien Abadie", "Lucas Bernard", "Hugo Dupuy", "Antoine Lafitte",
    ]
    assert rows[0].teams == ["Seniors 1", "Seniors 2"]
    assert [row.present_count for row in rows] == [4, 3, 2, 3]


def test_match_presence(sample_players):
    rows = event_presence(sample_players, MATCH, SEASON)
    assert [row.event.opponent for row in rows] == [
        "FC Test", "Riscle", "AS Plaisance", "Vic-Fezensac",
    ]
    assert rows[0].present_count == 4
    assert rows[-1].present_players == [
        "Julien Abadie", "Théo Castex", "Hugo Dupuy", "Antoine Lafitte",
    ]


def test_presence_matrix(sample_players):
    frame = presence_matrix(sample_players, TRAINING, SEASON)
    assert list(frame.index) == [
        "Julien Abadie", "Lucas Bernard", "Théo Castex", "Hugo Dupuy", "Antoine Lafitte",
    ]
    assert list(frame.columns) == [
        "teams", "2024-08-28", "2024-09-04", "2024-09-11", "2024-10-02", "total", "percentage",
    ]
    assert bool(frame.loc["Lucas Bernard", "2024-09-11"]) is False
    assert frame.loc["Lucas Bernard", "total"] == 3
    assert frame.loc["Lucas Bernard", "percentage"] == pytest.approx(75.0)
    assert frame.loc["Julien Abadie", "percentage"] == pytest.approx(100.0)
    assert frame.loc["Hugo Dupuy", "teams"] == "Seniors 1, Seniors 2"


def test_match_labels_stay_unique(make_player, make_match):
    players = [
        make_player("A", performances=[make_match(date(2024, 9, 1), opponent="Auch", score=(1, 0))]),
        make_player("B", performances=[make_match(date(2024, 9, 1), opponent="Auch", score=(0, 2))]),
    ]
    frame = presence_matrix(players, MATCH, SEASON)
    assert "2024-09-01 Auch" in frame.columns
    assert "2024-09-01 Auch*" in frame.columns
    assert list(frame["total"]) == [1, 1]


def test_empty_sheet():
    frame = presence_matrix([], TRAINING, SEASON)
    assert frame.empty
    assert "total" in frame.columns
