"""REST API for fantasy recaps."""

from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from typing import Awaitable, Callable, Optional, Tuple, TypeVar

from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse

from fantasy_recap.api.schemas import (
    LeagueSummary,
    LeaguesResponse,
    RefreshRequest,
    ScoreboardResponse,
    SummaryRequest,
    SummaryResponse,
    TokenResponse,
)
from fantasy_recap.config import RecapSettings
from fantasy_recap.errors import RecapError, UnauthorizedError
from fantasy_recap.logsink import configure_logging
from fantasy_recap.providers import (
    Notifier,
    TokenSet,
    YahooClient,
    build_authorize_url,
    build_notifier,
)
from fantasy_recap.recap import RecapRequest, TextGenerator, generate_recap


logger = logging.getLogger(__name__)

T = TypeVar("T")


def _http_error(exc: RecapError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.message)


def _callback_page(tokens: TokenSet) -> str:
    message = json.dumps(
        {
            "accessToken": tokens.access_token,
            "refreshToken": tokens.refresh_token,
            "expiresIn": tokens.expires_in,
        }
    ).replace("<", "\\u003c")
    return f"""<!DOCTYPE html>
<html>
  <head><title>OAuth Callback</title></head>
  <body>
    <script type="text/javascript">
      (function() {{
        if (window.opener) {{
          window.opener.postMessage({message}, window.location.origin);
          window.close();
        }}
      }})();
    </script>
    <p>Authentication successful. You can close this window.</p>
  </body>
</html>
"""


def create_app(
    settings: RecapSettings | None = None,
    *,
    generator: Optional[TextGenerator] = None,
    yahoo: Optional[YahooClient] = None,
    notifier: Optional[Notifier] = None,
) -> FastAPI:
    settings = settings or RecapSettings.from_env()
    configure_logging(settings)
    owns_yahoo = yahoo is None
    yahoo_client = yahoo or YahooClient(settings)
    notifier = notifier or build_notifier(settings)

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        yield
        if owns_yahoo:
            await yahoo_client.aclose()

    app = FastAPI(title="fantasy recap", lifespan=lifespan)
    app.state.settings = settings
    app.state.yahoo = yahoo_client

    async def with_refresh(
        call: Callable[[str], Awaitable[T]],
        access_token: str,
        refresh_token: str | None,
    ) -> Tuple[T, TokenSet | None]:
        try:
            return await call(access_token), None
        except UnauthorizedError:
            if not refresh_token:
                raise
        logger.info("Access token rejected; refreshing and retrying once")
        tokens = await yahoo_client.refresh_access_token(refresh_token)
        return await call(tokens.access_token), tokens

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/oauth/start")
    async def oauth_start() -> RedirectResponse:
        return RedirectResponse(build_authorize_url(settings), status_code=302)

    @app.get("/oauth/callback")
    async def oauth_callback(code: str = Query(...)):
        try:
            tokens = await yahoo_client.exchange_code(code)
        except RecapError as exc:
            logger.error("OAuth code exchange failed: %s", exc.message)
            return JSONResponse(status_code=500, content={"error": "OAuth failed"})
        return HTMLResponse(_callback_page(tokens))

    @app.post("/oauth/refresh", response_model=TokenResponse)
    async def oauth_refresh(payload: RefreshRequest) -> TokenResponse:
        try:
            tokens = await yahoo_client.refresh_access_token(payload.refresh_token)
        except RecapError as exc:
            raise _http_error(exc) from exc
        return TokenResponse(
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            expires_in=tokens.expires_in,
        )

    @app.get("/leagues", response_model=LeaguesResponse)
    async def leagues(
        access_token: str | None = Query(None),
        refresh_token: str | None = Query(None),
    ) -> LeaguesResponse:
        if not access_token:
            raise HTTPException(status_code=400, detail="Missing access token")
        try:
            rows, tokens = await with_refresh(yahoo_client.fetch_leagues, access_token, refresh_token)
        except UnauthorizedError as exc:
            raise HTTPException(status_code=401, detail="Authentication failed") from exc
        except RecapError as exc:
            raise _http_error(exc) from exc
        return LeaguesResponse(
            leagues=[LeagueSummary(**row) for row in rows],
            new_access_token=tokens.access_token if tokens else None,
            new_refresh_token=tokens.refresh_token if tokens else None,
        )

    @app.get("/scoreboard", response_model=ScoreboardResponse)
    async def scoreboard(
        access_token: str | None = Query(None),
        refresh_token: str | None = Query(None),
        week: int | None = Query(None, ge=1),
        league_id: str | None = Query(None),
    ) -> ScoreboardResponse:
        if not access_token or week is None or not league_id:
            raise HTTPException(
                status_code=400,
                detail="Missing required query parameters: access_token, week, or league_id",
            )

        async def fetch(token: str):
            return await yahoo_client.fetch_scoreboard(token, league_id, week)

        try:
            bundle, tokens = await with_refresh(fetch, access_token, refresh_token)
        except UnauthorizedError as exc:
            raise HTTPException(status_code=401, detail="Authentication failed") from exc
        except RecapError as exc:
            raise _http_error(exc) from exc
        return ScoreboardResponse(
            scoreboard=bundle.scoreboard,
            player_stats=bundle.player_stats,
            new_access_token=tokens.access_token if tokens else None,
            new_refresh_token=tokens.refresh_token if tokens else None,
        )

    @app.post("/summary", response_model=SummaryResponse)
    async def summary(payload: SummaryRequest) -> SummaryResponse:
        data = payload.scoreboard_data
        if data is None or not data.scoreboard:
            raise HTTPException(status_code=400, detail="Missing required data: scoreboardData.scoreboard")
        outcome = await generate_recap(
            RecapRequest(
                scoreboard=data.scoreboard,
                player_stats=data.player_stats,
                mood=payload.mood or "neutral",
            ),
            settings=settings,
            generator=generator,
            notifier=notifier,
        )
        if not outcome.ok:
            raise HTTPException(status_code=outcome.status_code, detail=outcome.reason)
        return SummaryResponse(
            summary=outcome.markup or "",
            matchups=outcome.matchups,
            fallback_fragments=outcome.fallback_fragments,
        )

    return app
