"""Canonical league models produced by the normalizer and consumed by the recap pipeline."""

from __future__ import annotations

from typing import Any, Literal, Optional, Tuple

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict


class PlayerRecord(BaseModel):
    """Roster entry; ``points`` is ``None`` when no usable scoring data was found."""

    key: str
    display_name: str
    points: Optional[float] = None

    model_config = ConfigDict(frozen=True)


class TeamRecord(BaseModel):
    name: str
    team_key: str
    total_points: float
    roster: Tuple[PlayerRecord, ...] = ()

    model_config = ConfigDict(frozen=True)


class MatchupRecord(BaseModel):
    team_a: TeamRecord
    team_b: TeamRecord
    winner_key: str = ""
    recap_url: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @property
    def teams(self) -> Tuple[TeamRecord, TeamRecord]:
        return self.team_a, self.team_b

    @property
    def winner(self) -> TeamRecord:
        """Team named by the provider's winner key, else the higher scorer (team A on a tie)."""

        if self.winner_key and self.winner_key == self.team_a.team_key:
            return self.team_a
        if self.winner_key and self.winner_key == self.team_b.team_key:
            return self.team_b
        if self.team_b.total_points > self.team_a.total_points:
            return self.team_b
        return self.team_a

    @property
    def loser(self) -> TeamRecord:
        return self.team_b if self.winner is self.team_a else self.team_a

    @property
    def winner_disagrees_with_score(self) -> bool:
        """True when the labeled winner did not strictly outscore the loser."""

        return self.winner.total_points <= self.loser.total_points


class LeagueDocument(BaseModel):
    id: str
    name: str
    week: int = Field(..., ge=0)
    matchups: Tuple[MatchupRecord, ...] = ()

    model_config = ConfigDict(frozen=True)

    def iter_teams(self):
        for matchup in self.matchups:
            yield matchup.team_a
            yield matchup.team_b


class TopPerformer(BaseModel):
    name: str
    points: float

    model_config = ConfigDict(frozen=True)


class CompactMatchupView(BaseModel):
    """Minimal projection of a matchup handed to the generation step.

    ``winner_is_a`` records which side won; two teams may share a display name.
    """

    team_a_name: str
    team_b_name: str
    winner_name: str
    winner_is_a: bool
    score_a: float
    score_b: float
    top_a: Tuple[TopPerformer, ...] = ()
    top_b: Tuple[TopPerformer, ...] = ()

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _infer_winner_side(cls, data: Any) -> Any:
        if isinstance(data, dict) and "winner_is_a" not in data:
            data = {**data, "winner_is_a": data.get("winner_name") == data.get("team_a_name")}
        return data

    @property
    def loser_name(self) -> str:
        return self.team_b_name if self.winner_is_a else self.team_a_name

    @property
    def winner_score(self) -> float:
        return self.score_a if self.winner_is_a else self.score_b

    @property
    def loser_score(self) -> float:
        return self.score_b if self.winner_is_a else self.score_a

    @property
    def winner_top(self) -> Tuple[TopPerformer, ...]:
        return self.top_a if self.winner_is_a else self.top_b


class GeneratedFragment(BaseModel):
    matchup_index: int = Field(..., ge=0)
    text: str
    source: Literal["model", "fallback"] = "model"

    model_config = ConfigDict(frozen=True)


class TeamScore(BaseModel):
    name: str
    points: float

    model_config = ConfigDict(frozen=True)
