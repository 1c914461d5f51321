"""Run per-matchup generation calls under a concurrency cap."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Protocol, Sequence

from fantasy_recap.completions import clean_completion
from fantasy_recap.errors import GenerationError
from fantasy_recap.models import GeneratedFragment
from fantasy_recap.recap.fallback import build_fallback_text
from fantasy_recap.recap.prompts import PromptUnit


logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 3
DEFAULT_TIMEOUT = 6.5


class TextGenerator(Protocol):
    async def generate(self, prompt: str) -> str:
        ...


async def _generate_one(
    unit: PromptUnit,
    generator: TextGenerator,
    *,
    timeout: float,
    mood: str,
    week: int,
) -> GeneratedFragment:
    try:
        raw = await asyncio.wait_for(generator.generate(unit.prompt), timeout=timeout)
        text = clean_completion(raw or "")
        if not text:
            raise GenerationError("empty completion")
        return GeneratedFragment(matchup_index=unit.index, text=text, source="model")
    except asyncio.TimeoutError:
        logger.warning("Generation for matchup %d timed out after %.1fs; using fallback", unit.index, timeout)
    except Exception as exc:
        logger.warning("Generation for matchup %d failed (%s); using fallback", unit.index, exc)
    return GeneratedFragment(
        matchup_index=unit.index,
        text=build_fallback_text(unit.view, mood=mood, index=unit.index, week=week),
        source="fallback",
    )


async def run_all(
    units: Sequence[PromptUnit],
    generator: TextGenerator,
    *,
    mood: str,
    week: int,
    concurrency: int = DEFAULT_CONCURRENCY,
    timeout: float = DEFAULT_TIMEOUT,
) -> List[GeneratedFragment]:
    """Generate one fragment per unit; output order always matches ``units``.

    Each task writes only its own slot of the pre-sized result list, so
    completion order never affects the result. A failed unit is replaced by its
    fallback fragment and never raises.
    """

    if concurrency < 1:
        raise ValueError("concurrency must be >= 1")
    results: List[Optional[GeneratedFragment]] = [None] * len(units)
    sem = asyncio.Semaphore(concurrency)

    async def guarded(position: int, unit: PromptUnit) -> None:
        async with sem:
            results[position] = await _generate_one(
                unit, generator, timeout=timeout, mood=mood, week=week
            )

    await asyncio.gather(*(guarded(position, unit) for position, unit in enumerate(units)))
    return [fragment for fragment in results if fragment is not None]
