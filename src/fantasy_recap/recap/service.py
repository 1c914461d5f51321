"""Recap pipeline entry point: raw provider documents in, recap markup out."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, List, Literal, Optional

import httpx
from pydantic import BaseModel, Field

from fantasy_recap.config import RecapSettings
from fantasy_recap.errors import MissingCredentialError, RecapError
from fantasy_recap.ingest import load_document, parse_league_document
from fantasy_recap.models import GeneratedFragment, LeagueDocument
from fantasy_recap.providers.notify import LogNotifier, Notifier
from fantasy_recap.providers.openai import OpenAIChatGenerator
from fantasy_recap.recap.assemble import assemble_recap, score_extremes
from fantasy_recap.recap.performers import collect_top_performers
from fantasy_recap.recap.prompts import (
    DEFAULT_MOOD,
    PromptUnit,
    build_compact_views,
    build_prompt_units,
    normalize_mood,
)
from fantasy_recap.recap.runner import TextGenerator, run_all


logger = logging.getLogger(__name__)

NOTIFY_TIMEOUT = 2.0


class RecapRequest(BaseModel):
    scoreboard: Any
    player_stats: List[Any] = Field(default_factory=list)
    mood: str = DEFAULT_MOOD


class RecapOutcome(BaseModel):
    status: Literal["success", "failure"]
    markup: Optional[str] = None
    reason: Optional[str] = None
    status_code: int = 200
    elapsed: float = 0.0
    matchups: int = 0
    fallback_fragments: int = 0

    @property
    def ok(self) -> bool:
        return self.status == "success"


def _warn_on_disputed_winners(league: LeagueDocument) -> None:
    for idx, matchup in enumerate(league.matchups):
        if matchup.winner_disagrees_with_score:
            logger.warning(
                "Matchup %d: labeled winner %s (%.2f) did not outscore %s (%.2f)",
                idx,
                matchup.winner.name,
                matchup.winner.total_points,
                matchup.loser.name,
                matchup.loser.total_points,
            )


async def _generate(
    units: List[PromptUnit],
    generator: Optional[TextGenerator],
    settings: RecapSettings,
    *,
    mood: str,
    week: int,
) -> List[GeneratedFragment]:
    options = dict(mood=mood, week=week, concurrency=settings.concurrency, timeout=settings.generation_timeout)
    if generator is not None:
        return await run_all(units, generator, **options)
    async with httpx.AsyncClient(timeout=settings.generation_timeout + 1.0) as client:
        return await run_all(units, OpenAIChatGenerator.from_settings(settings, client=client), **options)


async def _run_pipeline(
    request: RecapRequest,
    settings: RecapSettings,
    generator: Optional[TextGenerator],
) -> tuple[str, LeagueDocument, List[GeneratedFragment]]:
    if generator is None and not settings.openai_api_key:
        raise MissingCredentialError("OPENAI_API_KEY is not configured")

    league = parse_league_document(load_document(request.scoreboard))
    _warn_on_disputed_winners(league)
    performers = collect_top_performers(league, request.player_stats, limit=settings.top_n)
    views = build_compact_views(league, performers)
    mood = normalize_mood(request.mood)
    units = build_prompt_units(
        views,
        league.week,
        mood,
        style_hints=settings.style_hints,
        banned_phrases=settings.banned_phrases,
    )
    fragments = await _generate(units, generator, settings, mood=mood, week=league.week)
    extremes = score_extremes(league)
    highest, lowest = extremes if extremes else (None, None)
    markup = assemble_recap(league.name, league.week, fragments, views, highest, lowest)
    return markup, league, fragments


async def _notify(notifier: Notifier, message: str) -> None:
    try:
        await asyncio.wait_for(notifier.send(message), timeout=NOTIFY_TIMEOUT)
    except Exception as exc:
        logger.warning("Notification delivery failed: %s", exc)


async def generate_recap(
    request: RecapRequest,
    *,
    settings: RecapSettings,
    generator: Optional[TextGenerator] = None,
    notifier: Optional[Notifier] = None,
) -> RecapOutcome:
    """Run the whole pipeline and report success or failure; never raises.

    Per-matchup generation failures are absorbed by fallback fragments; only
    upstream problems (bad documents, missing credentials) produce a failure.
    """

    notifier = notifier or LogNotifier()
    start = time.perf_counter()
    logger.info("Starting recap generation (mood=%r)", request.mood)
    try:
        markup, league, fragments = await _run_pipeline(request, settings, generator)
    except RecapError as exc:
        elapsed = time.perf_counter() - start
        logger.error("Recap generation failed: %s", exc.message)
        outcome = RecapOutcome(status="failure", reason=exc.message, status_code=exc.status_code, elapsed=elapsed)
        await _notify(notifier, f"❌ Recap failed after {elapsed:.2f}s: {exc.message}")
        return outcome
    except Exception as exc:
        elapsed = time.perf_counter() - start
        logger.exception("Unexpected error generating recap")
        reason = f"Error generating summary: {exc}"
        await _notify(notifier, f"❌ Recap failed after {elapsed:.2f}s: {reason}")
        return RecapOutcome(status="failure", reason=reason, status_code=500, elapsed=elapsed)

    elapsed = time.perf_counter() - start
    fallbacks = sum(1 for fragment in fragments if fragment.source == "fallback")
    logger.info(
        "Recap for %s week %d built in %.2fs (%d matchups, %d fallback)",
        league.name,
        league.week,
        elapsed,
        len(fragments),
        fallbacks,
    )
    await _notify(
        notifier,
        f"✅ Recap for {league.name} week {league.week} generated in {elapsed:.2f}s "
        f"({len(fragments)} matchups, {fallbacks} fallback)",
    )
    return RecapOutcome(
        status="success",
        markup=markup,
        elapsed=elapsed,
        matchups=len(fragments),
        fallback_fragments=fallbacks,
    )
