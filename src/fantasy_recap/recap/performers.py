"""Rank each team's roster by fantasy points and keep the top performers."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Literal, Mapping, Sequence, Tuple

from fantasy_recap.errors import StructuralParseError
from fantasy_recap.ingest import load_document, parse_player_stats_document
from fantasy_recap.models import LeagueDocument, PlayerRecord, TopPerformer


logger = logging.getLogger(__name__)

DEFAULT_TOP_N = 2

PerformerSource = Literal["roster", "player_stats", "none"]


@dataclass(frozen=True)
class PerformerReport:
    """Top performers per team key plus the data source they came from."""

    by_team: Mapping[str, Tuple[TopPerformer, ...]] = field(default_factory=dict)
    source: PerformerSource = "none"

    def for_team(self, team_key: str) -> Tuple[TopPerformer, ...]:
        return tuple(self.by_team.get(team_key, ()))


def _present(players: Iterable[PlayerRecord]) -> List[Tuple[str, float]]:
    return [(player.display_name, player.points) for player in players if player.points is not None]


def _rank(entries: Sequence[Tuple[str, float]], limit: int) -> Tuple[TopPerformer, ...]:
    # sorted() is stable, so equal scores keep scan order.
    ranked = sorted(entries, key=lambda entry: entry[1], reverse=True)
    return tuple(TopPerformer(name=name, points=points) for name, points in ranked[:limit])


def _collect_from_rosters(league: LeagueDocument) -> Dict[str, List[Tuple[str, float]]]:
    collected: Dict[str, List[Tuple[str, float]]] = {}
    for team in league.iter_teams():
        collected.setdefault(team.team_key, []).extend(_present(team.roster))
    return collected


def _collect_from_player_stats(
    league: LeagueDocument,
    stats_documents: Sequence[Any],
) -> Dict[str, List[Tuple[str, float]]]:
    team_by_player: Dict[str, str] = {}
    collected: Dict[str, List[Tuple[str, float]]] = {}
    for team in league.iter_teams():
        collected.setdefault(team.team_key, [])
        for player in team.roster:
            if player.key:
                team_by_player.setdefault(player.key, team.team_key)

    for idx, document in enumerate(stats_documents):
        try:
            players = parse_player_stats_document(load_document(document))
        except StructuralParseError as exc:
            logger.warning("Skipping player stats document %d: %s", idx, exc)
            continue
        for player in players:
            team_key = team_by_player.get(player.key)
            if team_key is None or player.points is None:
                continue
            collected[team_key].append((player.display_name, player.points))
    return collected


def collect_top_performers(
    league: LeagueDocument,
    stats_documents: Sequence[Any] = (),
    *,
    limit: int = DEFAULT_TOP_N,
) -> PerformerReport:
    """Return up to ``limit`` performers per team, highest points first.

    Roster points are used when any team in the league has at least one scored
    player. Otherwise players are mapped back to teams by key and scored from
    the (possibly chunked) player-stats documents, concatenated in the order
    given. Unreadable stats documents are skipped.
    """

    if limit < 0:
        raise ValueError("limit must be >= 0")

    collected = _collect_from_rosters(league)
    source: PerformerSource = "roster"
    if not any(collected.values()):
        collected = _collect_from_player_stats(league, stats_documents)
        source = "player_stats" if any(collected.values()) else "none"
        logger.info(
            "Roster payload had no player points; player stats fallback %s",
            "succeeded" if source == "player_stats" else "found nothing",
        )

    by_team = {team_key: _rank(entries, limit) for team_key, entries in collected.items()}
    return PerformerReport(by_team=by_team, source=source)
