"""Persist and load prompt profiles (style hints and banned phrases)."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

from fantasy_recap.config import DEFAULT_BANNED_PHRASES, DEFAULT_STYLE_HINTS, RecapSettings


@dataclass
class PromptProfile:
    style_hints: Tuple[str, ...] = DEFAULT_STYLE_HINTS
    banned_phrases: Tuple[str, ...] = DEFAULT_BANNED_PHRASES

    @classmethod
    def load(cls, path: Path) -> "PromptProfile":
        data = json.loads(path.read_text(encoding="utf-8"))
        hints = tuple(str(hint).strip() for hint in data.get("style_hints", ()) if str(hint).strip())
        phrases = tuple(str(p).strip() for p in data.get("banned_phrases", ()) if str(p).strip())
        return cls(
            style_hints=hints or DEFAULT_STYLE_HINTS,
            banned_phrases=phrases or DEFAULT_BANNED_PHRASES,
        )

    def save(self, path: Path) -> None:
        payload = {
            "style_hints": list(self.style_hints),
            "banned_phrases": list(self.banned_phrases),
        }
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    def apply(self, settings: RecapSettings) -> RecapSettings:
        return settings.with_overrides(style_hints=self.style_hints, banned_phrases=self.banned_phrases)
