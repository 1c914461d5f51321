from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class LeagueSummary(BaseModel):
    league_id: str
    name: str


class LeaguesResponse(BaseModel):
    leagues: List[LeagueSummary]
    new_access_token: str | None = None
    new_refresh_token: str | None = None


class ScoreboardResponse(BaseModel):
    scoreboard: str
    player_stats: List[str] = Field(default_factory=list, alias="playerStats")
    new_access_token: str | None = None
    new_refresh_token: str | None = None

    model_config = ConfigDict(populate_by_name=True)


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    expires_in: int
