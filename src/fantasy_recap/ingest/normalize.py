"""Turn provider trees into strict league models.

Any element that can repeat (matchups, teams, players, leagues) may arrive as a
single node or as a list; everything here goes through :func:`as_sequence` so
downstream code only ever sees ordered sequences.
"""

from __future__ import annotations

import logging
import math
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from fantasy_recap.errors import StructuralParseError
from fantasy_recap.ingest.points import extract_points
from fantasy_recap.ingest.xml_tree import TEXT_KEY
from fantasy_recap.models import LeagueDocument, MatchupRecord, PlayerRecord, TeamRecord


logger = logging.getLogger(__name__)

NodePath = Tuple[str, ...]


def as_sequence(value: Any) -> List[Any]:
    """Return ``value`` as a list, preserving order; empty for missing nodes."""

    if value is None or value == "":
        return []
    if isinstance(value, list):
        return list(value)
    return [value]


def child(node: Any, key: str) -> Any:
    if not isinstance(node, Mapping):
        return None
    return node.get(key)


def text_of(value: Any) -> Optional[str]:
    """Scalar text for a leaf that may carry attributes (``{"_": text, "$": {...}}``)."""

    if isinstance(value, Mapping):
        value = value.get(TEXT_KEY)
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def require(node: Any, *keys: str, where: NodePath = ()) -> Any:
    """Walk ``keys`` from ``node``; raise :class:`StructuralParseError` tagged with the missing path."""

    current = node
    walked: NodePath = where
    for key in keys:
        walked = walked + (key,)
        current = child(current, key)
        if current is None:
            raise StructuralParseError(walked)
    return current


def sequence_at(node: Any, *keys: str, where: NodePath = ()) -> List[Any]:
    """Containers along ``keys[:-1]`` are required; the repeatable leaf may be absent."""

    parent = require(node, *keys[:-1], where=where) if len(keys) > 1 else node
    return as_sequence(child(parent, keys[-1]))


def _require_text(node: Any, *keys: str, where: NodePath) -> str:
    value = text_of(require(node, *keys, where=where))
    if value is None:
        raise StructuralParseError(where + keys, f"empty value at {'.'.join(where + keys)}")
    return value


def _parse_float(raw: str, path: NodePath) -> float:
    try:
        value = float(raw)
    except ValueError:
        raise StructuralParseError(path, f"{'.'.join(path)} is not numeric: {raw!r}") from None
    if math.isnan(value) or math.isinf(value):
        raise StructuralParseError(path, f"{'.'.join(path)} is not a finite number: {raw!r}")
    return value


def _display_name(player: Any) -> Optional[str]:
    name = child(player, "name")
    full = text_of(child(name, "full")) if isinstance(name, Mapping) else text_of(name)
    if full:
        return full
    parts = [text_of(child(name, part)) for part in ("first", "last")]
    joined = " ".join(part for part in parts if part)
    return joined or None


def parse_player(player: Any) -> PlayerRecord:
    key = text_of(child(player, "player_key")) or ""
    return PlayerRecord(
        key=key,
        display_name=_display_name(player) or key or "Unknown Player",
        points=extract_points(player),
    )


def _parse_team(team: Any, where: NodePath) -> TeamRecord:
    total_path = where + ("team_points", "total")
    total = _parse_float(_require_text(team, "team_points", "total", where=where), total_path)
    roster = child(child(team, "roster"), "players")
    players = [parse_player(player) for player in as_sequence(child(roster, "player"))]
    return TeamRecord(
        name=_require_text(team, "name", where=where),
        team_key=_require_text(team, "team_key", where=where),
        total_points=total,
        roster=tuple(players),
    )


def _parse_matchup(matchup: Any, where: NodePath) -> MatchupRecord:
    teams = sequence_at(matchup, "teams", "team", where=where)
    if len(teams) != 2:
        raise StructuralParseError(
            where + ("teams", "team"),
            f"expected 2 teams at {'.'.join(where + ('teams', 'team'))}, found {len(teams)}",
        )
    team_a, team_b = (
        _parse_team(team, where + ("teams", f"team[{idx}]")) for idx, team in enumerate(teams)
    )
    return MatchupRecord(
        team_a=team_a,
        team_b=team_b,
        winner_key=text_of(child(matchup, "winner_team_key")) or "",
        recap_url=text_of(child(matchup, "matchup_recap_url")),
    )


def _parse_week(league: Any, scoreboard: Any, where: NodePath) -> int:
    path = where + ("scoreboard", "week")
    raw = text_of(child(scoreboard, "week")) or text_of(child(league, "current_week"))
    if raw is None:
        raise StructuralParseError(path)
    try:
        number = float(raw)
    except ValueError:
        raise StructuralParseError(path, f"week is not numeric: {raw!r}") from None
    if not number.is_integer() or number < 0:
        raise StructuralParseError(path, f"week is not a whole number: {raw!r}")
    return int(number)


def parse_league_document(tree: Mapping[str, Any]) -> LeagueDocument:
    """Normalize a scoreboard-with-rosters tree into a :class:`LeagueDocument`."""

    where: NodePath = ("fantasy_content", "league")
    league = require(tree, *where)
    scoreboard = require(league, "scoreboard", where=where)
    matchup_nodes = sequence_at(scoreboard, "matchups", "matchup", where=where + ("scoreboard",))
    matchups = [
        _parse_matchup(node, where + ("scoreboard", "matchups", f"matchup[{idx}]"))
        for idx, node in enumerate(matchup_nodes)
    ]
    league_id = text_of(child(league, "league_key")) or text_of(child(league, "league_id")) or ""
    document = LeagueDocument(
        id=league_id,
        name=text_of(child(league, "name")) or "Unknown League",
        week=_parse_week(league, scoreboard, where),
        matchups=tuple(matchups),
    )
    logger.debug(
        "Normalized league %s week %s with %d matchups",
        document.id,
        document.week,
        len(document.matchups),
    )
    return document


def parse_player_stats_document(tree: Mapping[str, Any]) -> List[PlayerRecord]:
    """Players from a stats-by-key-batch document, in document order."""

    players = sequence_at(tree, "fantasy_content", "players", "player")
    return [parse_player(player) for player in players]


def collect_player_keys(league: LeagueDocument) -> List[str]:
    keys: List[str] = []
    for team in league.iter_teams():
        keys.extend(player.key for player in team.roster if player.key)
    return keys


def parse_league_list(tree: Mapping[str, Any]) -> List[dict[str, str]]:
    """League id/name pairs from a ``users;use_login=1/games/leagues`` document."""

    user_nodes = sequence_at(tree, "fantasy_content", "users", "user")
    leagues: List[dict[str, str]] = []
    for user in user_nodes:
        for game in as_sequence(child(child(user, "games"), "game")):
            for league in as_sequence(child(child(game, "leagues"), "league")):
                league_id = text_of(child(league, "league_id"))
                if not league_id:
                    continue
                leagues.append({"league_id": league_id, "name": text_of(child(league, "name")) or league_id})
    return leagues


def chunked(items: Sequence[str], size: int) -> List[List[str]]:
    if size < 1:
        raise ValueError("chunk size must be positive")
    return [list(items[start : start + size]) for start in range(0, len(items), size)]
