from __future__ import annotations

from typing import Any, List

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class ScoreboardPayload(BaseModel):
    scoreboard: Any = None
    player_stats: List[Any] = Field(default_factory=list, alias="playerStats")

    model_config = ConfigDict(populate_by_name=True)


class SummaryRequest(BaseModel):
    scoreboard_data: ScoreboardPayload | None = Field(default=None, alias="scoreboardData")
    mood: str | None = None

    model_config = ConfigDict(populate_by_name=True)


class SummaryResponse(BaseModel):
    summary: str
    matchups: int
    fallback_fragments: int
