"""Deterministic template recap used when a generation call fails."""

from __future__ import annotations

from typing import Dict, Tuple

from fantasy_recap.models import CompactMatchupView
from fantasy_recap.recap.prompts import format_points, normalize_mood


FALLBACK_EMOJIS: Tuple[str, ...] = ("🏈", "🔥", "⚡", "🎯", "💥")

_DEFAULT_VOCABULARY: Tuple[str, ...] = ("beat", "got past", "outlasted", "took down")

# Matched by substring against the lowercased mood, in insertion order.
MOOD_VOCABULARY: Dict[str, Tuple[str, ...]] = {
    "spooky": ("haunted", "spooked", "buried", "cursed"),
    "pirate": ("plundered", "sank", "boarded", "made walk the plank"),
    "western": ("outdrew", "ran out of town", "rustled", "lassoed"),
    "space": ("eclipsed", "launched past", "outorbited", "vaporized"),
    "royal": ("dethroned", "knighted themselves over", "outranked", "banished"),
    "angry": ("flattened", "steamrolled", "crushed", "trampled"),
}


def vocabulary_for(mood: str) -> Tuple[str, ...]:
    lowered = normalize_mood(mood).lower()
    for keyword, verbs in MOOD_VOCABULARY.items():
        if keyword in lowered:
            return verbs
    return _DEFAULT_VOCABULARY


def build_fallback_text(view: CompactMatchupView, *, mood: str, index: int, week: int) -> str:
    """Recap built only from ``view``; selection rotates by ``index`` modulo list length."""

    emoji = FALLBACK_EMOJIS[index % len(FALLBACK_EMOJIS)]
    verbs = vocabulary_for(mood)
    verb = verbs[index % len(verbs)]
    margin = format_points(abs(view.score_a - view.score_b))
    opening = (
        f"{emoji} {view.winner_name} {verb} {view.loser_name} "
        f"{format_points(view.winner_score)}-{format_points(view.loser_score)} in week {week}, "
        f"a margin of {margin} points."
    )
    leaders = view.winner_top
    if leaders:
        lead = leaders[0]
        closing = f"{lead.name} led the way with {format_points(lead.points)} points."
    else:
        closing = "No individual scoring was available for this one."
    return f"{opening} {closing}"
