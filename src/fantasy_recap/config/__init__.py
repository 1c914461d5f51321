"""Configuration helpers for the recap service."""

from .settings import DEFAULT_BANNED_PHRASES, DEFAULT_STYLE_HINTS, RecapSettings

__all__ = [
    "DEFAULT_BANNED_PHRASES",
    "DEFAULT_STYLE_HINTS",
    "RecapSettings",
]
