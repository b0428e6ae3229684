"""MCP Server exposing the club's season statistics."""

from typing import Optional

from mcp.server.fastmcp import FastMCP
from mcp.types import TextContent

from .attendance import excused_absences, season_stats_for_player
from .database import Neo4jDatabase
from .events import reconcile_events
from .logging import get_logger, setup_logging
from .models import GOALKEEPER, MATCH, TRAINING, Player
from .presence import event_presence
from .repository import PlayerRepository
from .rollup import (
    RANKING_METRICS,
    admin_issues,
    match_type_breakdown,
    players_with_season_stats,
    position_distribution,
    rank_players,
    rollup_team,
    team_distribution,
)
from .seasons import available_seasons

logger = get_logger(__name__)

# Initialize the server
server = FastMCP("club-season-stats")

# Roster store (lazy initialization)
_repository: Optional[PlayerRepository] = None


def get_repository() -> PlayerRepository:
    """Get or create the roster repository."""
    global _repository
    if _repository is None:
        db = Neo4jDatabase()
        db.connect()
        _repository = PlayerRepository(db)
    return _repository


def _text(output: str) -> list[TextContent]:
    return [TextContent(type="text", text=output)]


def _snapshot(season: Optional[str]) -> tuple[list[Player], str]:
    """Load the roster once and resolve the season (latest by default)."""
    players = get_repository().list_players()
    return players, season or available_seasons(players)[0]


def _title(base: str, season: str, team: Optional[str]) -> str:
    title = f"**{base}** (Season {season}"
    if team:
        title += f", {team}"
    return title + ")\n\n"


# ============================================================================
# Season Tools
# ============================================================================


@server.tool()
async def list_seasons() -> list[TextContent]:
    """List the seasons that have recorded trainings or matches, latest first."""
    players = get_repository().list_players()
    seasons = available_seasons(players)

    output = "**Seasons**\n\n"
    for season in seasons:
        output += f"- {season}\n"
    return _text(output)


@server.tool()
async def get_dashboard(
    season: Optional[str] = None, team: Optional[str] = None
) -> list[TextContent]:
    """Get the team dashboard for a season.

    Args:
        season: Season label (e.g., "2024-2025"), latest season by default
        team: Optional team to restrict to (e.g., "Seniors 1")
    """
    players, season = _snapshot(season)
    summaries = players_with_season_stats(players, players, season, team)
    summary = rollup_team(summaries, players, season, team)

    output = _title("Dashboard", season, team)
    output += f"- Players: {summary.total_players}\n"
    output += f"- Average Age: {summary.average_age:.1f}\n"
    output += f"- Goals: {summary.total_goals}\n"
    output += f"- Matches: {summary.total_matches}\n"
    output += f"- Trainings: {summary.total_trainings}\n"
    output += f"- Match Attendance: {summary.average_match_attendance:.1f}%\n"
    output += f"- Training Attendance: {summary.average_training_attendance:.1f}%\n"

    for metric, label in (
        ("goals", "Top Scorers"),
        ("assists", "Top Assisters"),
        ("clean_sheets", "Clean Sheets"),
    ):
        ranked = rank_players(summaries, metric)
        if not ranked:
            continue
        value = RANKING_METRICS[metric]
        output += f"\n**{label}:**\n"
        for i, entry in enumerate(ranked, 1):
            output += f"{i}. {entry.player.full_name} - {value(entry.stats):g}\n"

    issues = admin_issues(players, team)
    if issues:
        output += f"\n{len(issues)} player(s) with license or payment issues\n"

    return _text(output)


# ============================================================================
# Player Tools
# ============================================================================


@server.tool()
async def get_player_season_stats(
    player_id: str, season: Optional[str] = None
) -> list[TextContent]:
    """Get a player's statistics and attendance for a season.

    Args:
        player_id: The unique player identifier
        season: Season label, latest season by default
    """
    players, season = _snapshot(season)
    player = next((p for p in players if p.player_id == player_id), None)

    if player is None:
        return _text(f"Player with ID '{player_id}' not found")

    stats = season_stats_for_player(player, players, season)

    output = f"**{player.full_name}** Statistics (Season {season})\n\n"
    output += f"- Position: {player.position}\n"
    output += f"- Teams: {', '.join(player.teams)}\n"
    output += f"- Matches: {stats.total_matches}\n"
    output += f"- Minutes: {stats.total_minutes}\n"
    output += f"- Goals: {stats.goals}\n"
    output += f"- Assists: {stats.assists}\n"
    output += f"- Yellow Cards: {stats.yellow_cards}\n"
    output += f"- Red Cards: {stats.red_cards}\n"
    if player.position == GOALKEEPER:
        output += f"- Clean Sheets: {stats.clean_sheets}\n"
    output += f"- Trainings: {stats.present_trainings}\n"
    output += f"- Match Attendance: {stats.match_attendance_rate_season:.1f}%\n"
    output += f"- Training Attendance: {stats.training_attendance_rate_season:.1f}%\n"
    output += f"- Excused Absences: {len(excused_absences(player, season))}\n"

    breakdown = match_type_breakdown(player, season)
    if breakdown:
        output += "\n**Matches by competition:**\n"
        for code, count in sorted(breakdown.items()):
            output += f"- {code}: {count}\n"

    if player.unavailabilities:
        output += "\n**Unavailabilities:**\n"
        for u in player.unavailabilities:
            end = u.end_date.isoformat() if u.end_date else "?"
            output += f"- {u.start_date} to {end}: {u.reason} ({u.type})\n"

    return _text(output)


@server.tool()
async def get_rankings(
    metric: str = "goals",
    season: Optional[str] = None,
    team: Optional[str] = None,
    limit: int = 10,
) -> list[TextContent]:
    """Rank players on a season metric.

    Args:
        metric: One of goals, assists, matches, minutes, trainings, yellow_cards,
            red_cards, cards, clean_sheets, match_attendance, training_attendance
        season: Season label, latest season by default
        team: Optional team to restrict to
        limit: Maximum number of players to return (default 10)
    """
    if metric not in RANKING_METRICS:
        return _text(
            f"Unknown metric '{metric}'. Choose from: {', '.join(RANKING_METRICS)}"
        )

    players, season = _snapshot(season)
    summaries = players_with_season_stats(players, players, season, team)
    ranked = rank_players(summaries, metric, limit)
    value = RANKING_METRICS[metric]

    output = _title(f"Ranking by {metric}", season, team)
    if not ranked:
        output += "No players with records this season."
    for i, entry in enumerate(ranked, 1):
        output += f"{i}. {entry.player.full_name} ({', '.join(entry.player.teams)}) - {value(entry.stats):g}\n"

    return _text(output)


@server.tool()
async def get_admin_issues(team: Optional[str] = None) -> list[TextContent]:
    """List players whose license or payment is not in order.

    Args:
        team: Optional team to restrict to
    """
    players = get_repository().list_players()
    issues = admin_issues(players, team)

    if not issues:
        return _text("No license or payment issues")

    output = f"**License and payment issues** ({len(issues)})\n\n"
    for player in issues:
        license_status = "valid" if player.license_valid else "invalid"
        payment_status = "ok" if player.payment_valid else "late"
        output += f"- {player.last_name} {player.first_name}: license {license_status}, payment {payment_status}\n"

    return _text(output)


# ============================================================================
# Team Tools
# ============================================================================


@server.tool()
async def get_team_distribution() -> list[TextContent]:
    """Count players per team and per position."""
    players = get_repository().list_players()

    output = "**Players per team**\n\n"
    for team, count in sorted(team_distribution(players).items()):
        output += f"- {team}: {count}\n"

    output += "\n**Players per position**\n\n"
    for position, count in position_distribution(players).items():
        output += f"- {position}: {count}\n"

    return _text(output)


@server.tool()
async def get_team_events(
    kind: str = MATCH,
    season: Optional[str] = None,
    team: Optional[str] = None,
    match_type: Optional[str] = None,
) -> list[TextContent]:
    """List the distinct matches or trainings of a season.

    Args:
        kind: "match" or "training"
        season: Season label, latest season by default
        team: Optional team to restrict to
        match_type: Optional competition code (D2, R2, CdF, ...) for matches
    """
    if kind not in (MATCH, TRAINING):
        return _text(f"Unknown event kind '{kind}'. Use 'match' or 'training'")

    players, season = _snapshot(season)
    events = sorted(
        reconcile_events(players, kind, team=team, season=season, match_type=match_type),
        key=lambda e: e.date,
    )

    label = "Matches" if kind == MATCH else "Trainings"
    output = _title(label, season, team)
    output += f"Found {len(events)} event(s):\n\n"
    for event in events:
        if kind == MATCH:
            key = event.key
            output += (
                f"- **{event.date}**: vs {key.opponent} ({key.location}) "
                f"{key.score_home}-{key.score_away}"
            )
            if event.match_type:
                output += f" [{event.match_type}]"
            output += "\n"
        else:
            output += f"- {event.date}\n"

    return _text(output)


@server.tool()
async def get_presence(kind: str = TRAINING, season: Optional[str] = None) -> list[TextContent]:
    """Show who attended each training or match of a season.

    Args:
        kind: "training" or "match"
        season: Season label, latest season by default
    """
    if kind not in (MATCH, TRAINING):
        return _text(f"Unknown event kind '{kind}'. Use 'match' or 'training'")

    players, season = _snapshot(season)
    rows = event_presence(players, kind, season)

    label = "Training presence" if kind == TRAINING else "Match presence"
    output = f"**{label}** (Season {season})\n\n"
    if not rows:
        output += "No events recorded."
    for row in rows:
        what = f" vs {row.event.opponent}" if row.event.opponent else ""
        output += f"- **{row.date}**{what}: {row.present_count} present"
        if row.teams:
            output += f" ({', '.join(row.teams)})"
        output += "\n"
        if row.present_players:
            output += f"  {', '.join(row.present_players)}\n"

    return _text(output)


def main() -> None:
    """Run the MCP server over stdio."""
    setup_logging()
    logger.info("Starting club-season-stats MCP server")
    server.run()


if __name__ == "__main__":
    main()
