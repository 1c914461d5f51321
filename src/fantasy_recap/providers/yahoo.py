"""Async client for the Yahoo Fantasy v2 API and its OAuth token endpoint."""

from __future__ import annotations

import asyncio
import logging
import urllib.parse
from dataclasses import dataclass
from typing import List, Optional

import httpx

from fantasy_recap.config import RecapSettings
from fantasy_recap.errors import ProviderError, UnauthorizedError
from fantasy_recap.ingest import (
    chunked,
    collect_player_keys,
    load_document,
    parse_league_document,
    parse_league_list,
)


logger = logging.getLogger(__name__)

API_BASE = "https://fantasysports.yahooapis.com/fantasy/v2"
AUTH_URL = "https://api.login.yahoo.com/oauth2/request_auth"
TOKEN_URL = "https://api.login.yahoo.com/oauth2/get_token"
GAME_CODE = "nfl"


@dataclass(frozen=True)
class TokenSet:
    access_token: str
    refresh_token: str
    expires_in: int


@dataclass(frozen=True)
class ScoreboardBundle:
    scoreboard: str
    player_stats: List[str]


def league_key(league_id: str) -> str:
    league_id = league_id.strip()
    if ".l." in league_id:
        return league_id
    return f"{GAME_CODE}.l.{league_id}"


def build_authorize_url(settings: RecapSettings, state: str | None = None) -> str:
    params = {
        "client_id": settings.yahoo_client_id or "",
        "redirect_uri": settings.yahoo_redirect_uri,
        "response_type": "code",
    }
    if state:
        params["state"] = state
    return AUTH_URL + "?" + urllib.parse.urlencode(params)


class YahooClient:
    def __init__(self, settings: RecapSettings, *, client: Optional[httpx.AsyncClient] = None):
        self.settings = settings
        self._client = client or httpx.AsyncClient(timeout=15.0)

    async def aclose(self) -> None:
        await self._client.aclose()

    @staticmethod
    def _check(resp: httpx.Response, what: str) -> None:
        if resp.status_code == 401:
            raise UnauthorizedError(f"Yahoo rejected the credential while fetching {what}")
        if resp.status_code >= 300:
            raise ProviderError(
                f"Yahoo returned HTTP {resp.status_code} while fetching {what}",
                upstream_status=resp.status_code,
            )

    async def _get(self, url: str, access_token: str, what: str) -> str:
        try:
            resp = await self._client.get(url, headers={"Authorization": f"Bearer {access_token}"})
        except httpx.HTTPError as exc:
            raise ProviderError(f"request for {what} failed: {exc}") from exc
        self._check(resp, what)
        return resp.text

    async def _token_request(self, data: dict[str, str]) -> TokenSet:
        payload = {
            "client_id": self.settings.yahoo_client_id or "",
            "client_secret": self.settings.yahoo_client_secret or "",
            "redirect_uri": self.settings.yahoo_redirect_uri,
            **data,
        }
        try:
            resp = await self._client.post(TOKEN_URL, data=payload)
        except httpx.HTTPError as exc:
            raise ProviderError(f"token request failed: {exc}") from exc
        if resp.status_code in (400, 401):
            raise UnauthorizedError("Yahoo rejected the token request")
        self._check(resp, "tokens")
        try:
            body = resp.json()
            return TokenSet(
                access_token=body["access_token"],
                refresh_token=body.get("refresh_token", data.get("refresh_token", "")),
                expires_in=int(body.get("expires_in", 3600)),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise ProviderError(f"unexpected token payload: {exc}") from exc

    async def exchange_code(self, code: str) -> TokenSet:
        return await self._token_request({"grant_type": "authorization_code", "code": code})

    async def refresh_access_token(self, refresh_token: str) -> TokenSet:
        return await self._token_request({"grant_type": "refresh_token", "refresh_token": refresh_token})

    async def fetch_leagues(self, access_token: str) -> List[dict[str, str]]:
        url = f"{API_BASE}/users;use_login=1/games;game_keys={GAME_CODE}/leagues"
        text = await self._get(url, access_token, "leagues")
        return parse_league_list(load_document(text))

    async def fetch_player_stats(self, access_token: str, player_keys: List[str], week: int) -> str:
        url = f"{API_BASE}/players;player_keys={','.join(player_keys)}/stats;type=week;week={week}"
        return await self._get(url, access_token, "player stats")

    async def fetch_scoreboard(self, access_token: str, league_id: str, week: int) -> ScoreboardBundle:
        """Scoreboard with rosters plus the weekly stats for every rostered player."""

        url = f"{API_BASE}/league/{league_key(league_id)}/scoreboard;week={week}/matchups/teams/roster/players"
        scoreboard = await self._get(url, access_token, "scoreboard")
        keys = collect_player_keys(parse_league_document(load_document(scoreboard)))
        batches = chunked(keys, self.settings.stats_batch_size)
        logger.info("Fetching stats for %d players in %d batches", len(keys), len(batches))
        player_stats = await asyncio.gather(
            *(self.fetch_player_stats(access_token, batch, week) for batch in batches)
        )
        return ScoreboardBundle(scoreboard=scoreboard, player_stats=list(player_stats))
