"""Pydantic models for API I/O."""

from .recap import ScoreboardPayload, SummaryRequest, SummaryResponse
from .yahoo import (
    LeagueSummary,
    LeaguesResponse,
    RefreshRequest,
    ScoreboardResponse,
    TokenResponse,
)

__all__ = [
    "LeagueSummary",
    "LeaguesResponse",
    "RefreshRequest",
    "ScoreboardPayload",
    "ScoreboardResponse",
    "SummaryRequest",
    "SummaryResponse",
    "TokenResponse",
]
