"""Sports scoreboard transformer.

Providers return games in one of three shapes, detected per record:

- box score: flat SportsData.io record (``HomeTeam``, ``HomeTeamScore`` ...)
- competition: ESPN-style ``competitions[0].competitors`` record
- league teams: MLB stats style ``teams.home.team.name`` record
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from portfolio_proxy.errors import InvalidSportType
from portfolio_proxy.models import SPORT_TYPES, GameRecord

FINAL_STATUSES = {"Final", "F/OT", "F/SO", "Closed"}


@dataclass(frozen=True)
class BoxScoreGame:
    raw: Dict[str, Any]


@dataclass(frozen=True)
class CompetitionGame:
    raw: Dict[str, Any]
    competition: Dict[str, Any]


@dataclass(frozen=True)
class LeagueTeamsGame:
    raw: Dict[str, Any]
    teams: Dict[str, Any]


RawGame = Union[BoxScoreGame, CompetitionGame, LeagueTeamsGame]


def classify_game(raw: Dict[str, Any]) -> RawGame:
    """Detect which provider shape a raw game record has."""
    competitions = raw.get("competitions")
    if isinstance(competitions, list):
        first = competitions[0] if competitions and isinstance(competitions[0], dict) else {}
        return CompetitionGame(raw=raw, competition=first)

    teams = raw.get("teams")
    if isinstance(teams, dict) and ("home" in teams or "away" in teams):
        return LeagueTeamsGame(raw=raw, teams=teams)

    return BoxScoreGame(raw=raw)


def _mapping(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _to_int(value: Any) -> int:
    if isinstance(value, bool) or value is None:
        return 0
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0


def _first_present(raw: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def _game_id(value: Any) -> Optional[int]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return None


def _clock(raw: Dict[str, Any]) -> Optional[str]:
    minutes = raw.get("TimeRemainingMinutes")
    seconds = raw.get("TimeRemainingSeconds")
    if minutes is not None:
        return f"{_to_int(minutes)}:{_to_int(seconds):02d}"
    remaining = raw.get("TimeRemaining")
    return str(remaining) if remaining else None


def _segment(prefix: str, value: Any) -> str:
    text = str(value)
    return f"{prefix}{text}" if text.isdigit() else text


def _box_score_status(sport: str, raw: Dict[str, Any]) -> str:
    status = str(raw.get("Status") or "")
    if raw.get("IsClosed") or status in FINAL_STATUSES:
        return "Final"
    if status != "InProgress":
        return status or "Scheduled"

    clock = _clock(raw)
    if sport == "mlb":
        if raw.get("InningDescription"):
            return str(raw["InningDescription"])
        return f"Inning {raw['Inning']}" if raw.get("Inning") else "In Progress"

    if sport == "nhl":
        segment = raw.get("Period")
        label = _segment("Period ", segment) if segment else ""
    else:
        segment = raw.get("Quarter")
        label = _segment("Q", segment) if segment else ""

    if label and clock:
        return f"{label} - {clock}"
    return label or "In Progress"


def _from_box_score(sport: str, game: BoxScoreGame) -> GameRecord:
    raw = game.raw
    if sport == "mlb":
        description = raw.get("InningDescription")
        details = f"Inning: {description}" if description else ""
    else:
        details = raw.get("LastPlay") or ""

    return GameRecord(
        GameID=_game_id(_first_present(raw, "GameID", "GlobalGameID", "GameKey")),
        DateTime=str(_first_present(raw, "DateTime", "Date") or ""),
        Status=_box_score_status(sport, raw),
        AwayTeam=str(raw.get("AwayTeam") or ""),
        HomeTeam=str(raw.get("HomeTeam") or ""),
        AwayTeamScore=_to_int(_first_present(raw, "AwayTeamScore", "AwayTeamRuns", "AwayScore")),
        HomeTeamScore=_to_int(_first_present(raw, "HomeTeamScore", "HomeTeamRuns", "HomeScore")),
        Channel=str(raw.get("Channel") or ""),
        StadiumDetails=str(details),
    )


def _team_name(team: Any) -> str:
    if not isinstance(team, dict):
        return ""
    return str(team.get("name") or team.get("displayName") or team.get("abbreviation") or "")


def _from_competition(game: CompetitionGame) -> GameRecord:
    competition = game.competition
    listed = competition.get("competitors")
    competitors = [c for c in listed if isinstance(c, dict)] if isinstance(listed, list) else []

    by_side = {c.get("homeAway"): c for c in competitors if c.get("homeAway") in ("home", "away")}
    if len(by_side) == 2:
        away, home = by_side["away"], by_side["home"]
    else:
        # Positional order is [away, home] when sides are not labelled
        away = competitors[0] if len(competitors) > 0 else {}
        home = competitors[1] if len(competitors) > 1 else {}

    status_type = _mapping(_mapping(competition.get("status")).get("type"))
    if status_type.get("completed"):
        status = "Final"
    elif status_type.get("state") == "pre":
        status = "Scheduled"
    else:
        status = "In Progress"

    return GameRecord(
        GameID=_game_id(game.raw.get("id")),
        DateTime=str(game.raw.get("date") or competition.get("date") or ""),
        Status=status,
        AwayTeam=_team_name(away.get("team")),
        HomeTeam=_team_name(home.get("team")),
        AwayTeamScore=_to_int(away.get("score")),
        HomeTeamScore=_to_int(home.get("score")),
    )


def _from_league_teams(game: LeagueTeamsGame) -> GameRecord:
    away = _mapping(game.teams.get("away"))
    home = _mapping(game.teams.get("home"))
    status = _mapping(game.raw.get("status")).get("abstractGameState") or "Scheduled"

    return GameRecord(
        GameID=_game_id(game.raw.get("gamePk")),
        DateTime=str(game.raw.get("gameDate") or ""),
        Status=str(status),
        AwayTeam=_team_name(away.get("team")),
        HomeTeam=_team_name(home.get("team")),
        AwayTeamScore=_to_int(away.get("score")),
        HomeTeamScore=_to_int(home.get("score")),
    )


def transform_game(sport: str, raw: Dict[str, Any]) -> GameRecord:
    """Normalize one raw game record according to its detected shape."""
    game = classify_game(raw)
    if isinstance(game, CompetitionGame):
        return _from_competition(game)
    if isinstance(game, LeagueTeamsGame):
        return _from_league_teams(game)
    return _from_box_score(sport, game)


def transform_games(sport: str, raw: Any) -> List[GameRecord]:
    """Normalize a provider scoreboard for one sport.

    Args:
        sport: One of mlb, nfl, nhl, nba
        raw: Decoded provider payload, expected to be a list of games

    Returns:
        Normalized games; empty when the payload is not a list

    Raises:
        InvalidSportType: If the sport code is unknown
    """
    if sport not in SPORT_TYPES:
        raise InvalidSportType()
    if not isinstance(raw, list):
        return []
    return [transform_game(sport, item) for item in raw if isinstance(item, dict)]
