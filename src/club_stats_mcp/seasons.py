"""Season labels and season filtering.

A season runs from July to June and is labelled "<startYear>-<startYear+1>".
Labels are used as equality keys everywhere, so they must be derived only
through ``season_from_date``.
"""

from datetime import date
from typing import Iterable, Optional

from .models import PerformanceRecord, Player


SEASON_START_MONTH = 7


def season_from_date(d: date) -> str:
    """Return the season label containing ``d``."""
    if d.month >= SEASON_START_MONTH:
        start = d.year
    else:
        start = d.year - 1
    return f"{start}-{start + 1}"


def records_for_season(
    records: Iterable[PerformanceRecord], season: str
) -> list[PerformanceRecord]:
    """Keep only the records labelled with ``season``."""
    return [r for r in records if r.season == season]


def available_seasons(
    players: Iterable[Player], today: Optional[date] = None
) -> list[str]:
    """List every season present in the roster, most recent first.

    An empty roster yields the current season so callers always have a
    selectable value.
    """
    seasons = {
        perf.season
        for player in players
        for perf in (player.performances or [])
        if perf.season
    }
    if not seasons:
        return [season_from_date(today or date.today())]
    return sorted(seasons, reverse=True)
