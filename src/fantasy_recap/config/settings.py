"""Runtime settings for the recap service, resolved once at process start."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional, Tuple


logger = logging.getLogger(__name__)

DEFAULT_STYLE_HINTS: Tuple[str, ...] = (
    "Open with the decisive moment of the week.",
    "Tell it from the losing manager's point of view.",
    "Frame it like a terse post-game press conference.",
    "Lead with the final margin, then explain how it happened.",
)

DEFAULT_BANNED_PHRASES: Tuple[str, ...] = (
    "nail-biter",
    "edge of your seat",
    "stole the show",
    "when the dust settled",
    "at the end of the day",
    "left it all on the field",
    "a game of two halves",
)

_TRUE_TOKENS = {"1", "true", "t", "yes", "y", "on"}


def _env_float(name: str, default: float, *, clamp_min: float | None = None, clamp_max: float | None = None) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid float for %s: %s; using default %.2f", name, raw, default)
        return default
    if clamp_min is not None:
        value = max(clamp_min, value)
    if clamp_max is not None:
        value = min(clamp_max, value)
    return value


def _env_int(name: str, default: int, *, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    return value


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in _TRUE_TOKENS


def _env_str(name: str, default: Optional[str] = None) -> Optional[str]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


@dataclass(frozen=True)
class RecapSettings:
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    openai_base_url: str = "https://api.openai.com/v1"
    max_output_tokens: int = 280
    temperature: float = 0.85
    concurrency: int = 3
    generation_timeout: float = 6.5
    top_n: int = 2
    style_hints: Tuple[str, ...] = DEFAULT_STYLE_HINTS
    banned_phrases: Tuple[str, ...] = DEFAULT_BANNED_PHRASES
    dev_mode: bool = False
    log_file: Path = Path("log.json")
    yahoo_client_id: Optional[str] = None
    yahoo_client_secret: Optional[str] = None
    yahoo_redirect_uri: str = "http://localhost:8000/oauth/callback"
    notify_webhook_url: Optional[str] = None
    stats_batch_size: int = 25

    @classmethod
    def from_env(cls) -> "RecapSettings":
        """Build settings from the process environment."""

        return cls(
            openai_api_key=_env_str("OPENAI_API_KEY"),
            openai_model=_env_str("RECAP_OPENAI_MODEL", cls.openai_model),
            openai_base_url=_env_str("RECAP_OPENAI_BASE_URL", cls.openai_base_url).rstrip("/"),
            max_output_tokens=_env_int("RECAP_MAX_TOKENS", cls.max_output_tokens, min_value=16),
            temperature=_env_float("RECAP_TEMPERATURE", cls.temperature, clamp_min=0.0, clamp_max=2.0),
            concurrency=_env_int("RECAP_CONCURRENCY", cls.concurrency, min_value=1),
            generation_timeout=_env_float("RECAP_TIMEOUT_SECONDS", cls.generation_timeout, clamp_min=0.1),
            top_n=_env_int("RECAP_TOP_N", cls.top_n, min_value=0),
            dev_mode=_env_flag("RECAP_DEV"),
            log_file=Path(_env_str("RECAP_LOG_FILE", "log.json")),
            yahoo_client_id=_env_str("YAHOO_CLIENT_ID"),
            yahoo_client_secret=_env_str("YAHOO_CLIENT_SECRET"),
            yahoo_redirect_uri=_env_str("YAHOO_REDIRECT_URI", cls.yahoo_redirect_uri),
            notify_webhook_url=_env_str("RECAP_NOTIFY_WEBHOOK"),
        )

    def with_overrides(self, **changes) -> "RecapSettings":
        """Return a copy with non-``None`` overrides applied."""

        return replace(self, **{key: value for key, value in changes.items() if value is not None})
