"""Recap pipeline: top performers, prompts, bounded generation and assembly."""

from .assemble import assemble_recap, score_extremes
from .fallback import build_fallback_text
from .performers import PerformerReport, collect_top_performers
from .prompts import PromptUnit, build_compact_views, build_prompt, build_prompt_units
from .runner import TextGenerator, run_all
from .service import RecapOutcome, RecapRequest, generate_recap

__all__ = [
    "PerformerReport",
    "PromptUnit",
    "RecapOutcome",
    "RecapRequest",
    "TextGenerator",
    "assemble_recap",
    "build_compact_views",
    "build_fallback_text",
    "build_prompt",
    "build_prompt_units",
    "collect_top_performers",
    "generate_recap",
    "run_all",
    "score_extremes",
]
