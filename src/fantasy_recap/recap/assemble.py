"""Render generated fragments into the final recap markup."""

from __future__ import annotations

from html import escape
from typing import List, Optional, Sequence, Tuple

from fantasy_recap.models import CompactMatchupView, GeneratedFragment, LeagueDocument, TeamScore
from fantasy_recap.recap.prompts import format_points


def score_extremes(league: LeagueDocument) -> Optional[Tuple[TeamScore, TeamScore]]:
    """Highest and lowest scoring teams across the league; first seen wins ties."""

    scores = [TeamScore(name=team.name, points=team.total_points) for team in league.iter_teams()]
    if not scores:
        return None
    return max(scores, key=lambda score: score.points), min(scores, key=lambda score: score.points)


def _matchup_block(number: int, view: CompactMatchupView, fragment: GeneratedFragment) -> List[str]:
    high, low = sorted((view.score_a, view.score_b), reverse=True)
    winner = escape(view.winner_name)
    loser = escape(view.loser_name)
    return [
        f"<h3>Matchup {number}: {winner} 🆚 {loser}</h3>",
        f"<p>🏆 Winner: {winner}<br>",
        f"📊 Score: {format_points(high)} - {format_points(low)}</p>",
        f"<p>{escape(fragment.text)}</p>",
    ]


def assemble_recap(
    league_name: str,
    week: int,
    fragments: Sequence[GeneratedFragment],
    views: Sequence[CompactMatchupView],
    highest: Optional[TeamScore],
    lowest: Optional[TeamScore],
) -> str:
    """Build the recap document. Pure: identical input yields identical output."""

    if len(fragments) != len(views):
        raise ValueError(f"{len(fragments)} fragments for {len(views)} matchups")
    ordered = sorted(fragments, key=lambda fragment: fragment.matchup_index)

    lines = [f"<h1>🏈 {escape(league_name)} - Week {week} 🏈</h1>"]
    if not views:
        lines.append("<p>No matchups were found for this week.</p>")
    for number, (view, fragment) in enumerate(zip(views, ordered), start=1):
        lines.extend(_matchup_block(number, view, fragment))

    if highest is not None and lowest is not None:
        lines.extend(
            [
                "<h2>Highs &amp; Lows</h2>",
                f"<p>🏆 Highest scoring team: {escape(highest.name)} with {format_points(highest.points)} points.</p>",
                f"<p>😞 Lowest scoring team: {escape(lowest.name)} with {format_points(lowest.points)} points.</p>",
            ]
        )
    return "\n".join(lines) + "\n"
