"""Presence sheets: who attended which training or match."""

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional

import pandas as pd

from .events import event_key, reconcile_events
from .models import MATCH, Player, TeamEvent


@dataclass
class EventPresence:
    event: TeamEvent
    present_players: list[str] = field(default_factory=list)
    teams: list[str] = field(default_factory=list)

    @property
    def date(self) -> date:
        return self.event.date

    @property
    def present_count(self) -> int:
        return len(self.present_players)


def _sorted_events(players: list[Player], kind: str, season: Optional[str]) -> list[TeamEvent]:
    return sorted(
        reconcile_events(players, kind, season=season),
        key=lambda e: (e.date, e.opponent or ""),
    )


def _attended(player: Player, event: TeamEvent) -> bool:
    return any(
        r.present and r.kind == event.kind and event_key(r) == event.key
        for r in player.performances or []
    )


def event_label(event: TeamEvent) -> str:
    if event.kind == MATCH and event.opponent:
        return f"{event.date.isoformat()} {event.opponent}"
    return event.date.isoformat()


def event_presence(
    players: Iterable[Player], kind: str, season: Optional[str] = None
) -> list[EventPresence]:
    """List each event of the season with the players marked present."""
    players = list(players)
    rows = []
    for event in _sorted_events(players, kind, season):
        attendees = sorted(
            (p for p in players if _attended(p, event)),
            key=lambda p: (p.last_name, p.first_name),
        )
        teams = sorted({t for p in attendees for t in p.teams or []})
        rows.append(
            EventPresence(
                event=event,
                present_players=[p.full_name for p in attendees],
                teams=teams,
            )
        )
    return rows


def presence_matrix(
    players: Iterable[Player], kind: str, season: Optional[str] = None
) -> pd.DataFrame:
    """Build a player × event attendance sheet.

    Rows are the players with at least one record of ``kind`` in the season.
    Each event column holds a boolean; ``total`` and ``percentage`` close
    each row.
    """
    players = list(players)
    events = _sorted_events(players, kind, season)
    labels = []
    for event in events:
        label = event_label(event)
        while label in labels:
            label += "*"
        labels.append(label)

    roster = [
        p for p in players
        if any(r.kind == kind and (not season or r.season == season) for r in p.performances or [])
    ]
    roster.sort(key=lambda p: (p.last_name, p.first_name))

    records = []
    for player in roster:
        row = {"player": player.full_name, "teams": ", ".join(player.teams or [])}
        for label, event in zip(labels, events):
            row[label] = _attended(player, event)
        records.append(row)

    frame = pd.DataFrame.from_records(records, columns=["player", "teams", *labels])
    frame = frame.set_index("player")

    if labels:
        frame["total"] = frame[labels].sum(axis=1).astype(int)
        frame["percentage"] = frame["total"] / len(labels) * 100
    else:
        frame["total"] = 0
        frame["percentage"] = 0.0
    return frame
