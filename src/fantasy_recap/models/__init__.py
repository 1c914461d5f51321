"""Pydantic models shared across ingestion and recap layers."""

from .league import (
    CompactMatchupView,
    GeneratedFragment,
    LeagueDocument,
    MatchupRecord,
    PlayerRecord,
    TeamRecord,
    TeamScore,
    TopPerformer,
)

__all__ = [
    "CompactMatchupView",
    "GeneratedFragment",
    "LeagueDocument",
    "MatchupRecord",
    "PlayerRecord",
    "TeamRecord",
    "TeamScore",
    "TopPerformer",
]
