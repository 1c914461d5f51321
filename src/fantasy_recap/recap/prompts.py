"""Per-matchup prompt construction."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from fantasy_recap.config import DEFAULT_BANNED_PHRASES, DEFAULT_STYLE_HINTS
from fantasy_recap.models import CompactMatchupView, LeagueDocument, MatchupRecord, TopPerformer
from fantasy_recap.recap.performers import PerformerReport


DEFAULT_MOOD = "neutral"
MAX_MOOD_LENGTH = 80


@dataclass(frozen=True)
class PromptUnit:
    """One generation request and the data its fallback is built from."""

    index: int
    prompt: str
    view: CompactMatchupView


def format_points(value: float) -> str:
    return str(round(float(value), 2))


def format_performers(performers: Sequence[TopPerformer]) -> str:
    if not performers:
        return "n/a"
    return ", ".join(f"{p.name} ({format_points(p.points)} pts)" for p in performers)


def normalize_mood(mood: str | None) -> str:
    text = " ".join((mood or "").split())
    return text[:MAX_MOOD_LENGTH] or DEFAULT_MOOD


def build_compact_view(matchup: MatchupRecord, performers: PerformerReport) -> CompactMatchupView:
    return CompactMatchupView(
        team_a_name=matchup.team_a.name,
        team_b_name=matchup.team_b.name,
        winner_name=matchup.winner.name,
        winner_is_a=matchup.winner is matchup.team_a,
        score_a=matchup.team_a.total_points,
        score_b=matchup.team_b.total_points,
        top_a=performers.for_team(matchup.team_a.team_key),
        top_b=performers.for_team(matchup.team_b.team_key),
    )


def build_compact_views(league: LeagueDocument, performers: PerformerReport) -> List[CompactMatchupView]:
    return [build_compact_view(matchup, performers) for matchup in league.matchups]


def select_style_hint(index: int, style_hints: Sequence[str] = DEFAULT_STYLE_HINTS) -> str:
    if not style_hints:
        return ""
    return style_hints[index % len(style_hints)]


def build_prompt(
    view: CompactMatchupView,
    week: int,
    mood: str,
    style_hint: str,
    *,
    banned_phrases: Sequence[str] = DEFAULT_BANNED_PHRASES,
) -> str:
    mood = normalize_mood(mood)
    lines = [
        f"Write a {mood}-themed recap of one week {week} fantasy football matchup.",
        f"Let the {mood} theme steer tone and word choice without naming the theme outright.",
        "",
        f"Matchup: {view.team_a_name} vs {view.team_b_name}",
        f"Winner: {view.winner_name}",
        f"Final score: {view.team_a_name} {format_points(view.score_a)} - "
        f"{view.team_b_name} {format_points(view.score_b)}",
        f"Top performers for {view.team_a_name}: {format_performers(view.top_a)}",
        f"Top performers for {view.team_b_name}: {format_performers(view.top_b)}",
        "",
        "Rules:",
        "- Write 3-4 sentences.",
        "- Mention 1-2 of the named performers with their exact point totals.",
    ]
    if banned_phrases:
        quoted = ", ".join(f'"{phrase}"' for phrase in banned_phrases)
        lines.append(f"- Do not use these phrases: {quoted}.")
    lines.append("- Output plain prose only: no markdown, no code fences, no headings, no lists.")
    if style_hint:
        lines.append(f"- Style for this matchup: {style_hint}")
    return "\n".join(lines)


def build_prompt_units(
    views: Sequence[CompactMatchupView],
    week: int,
    mood: str,
    *,
    style_hints: Sequence[str] = DEFAULT_STYLE_HINTS,
    banned_phrases: Sequence[str] = DEFAULT_BANNED_PHRASES,
) -> List[PromptUnit]:
    return [
        PromptUnit(
            index=index,
            prompt=build_prompt(
                view,
                week,
                mood,
                select_style_hint(index, style_hints),
                banned_phrases=banned_phrases,
            ),
            view=view,
        )
        for index, view in enumerate(views)
    ]
