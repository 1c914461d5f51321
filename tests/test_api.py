import json

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from fantasy_recap.api import create_app
from fantasy_recap.config import RecapSettings
from fantasy_recap.providers import YahooClient

from .samples import NAMESPACE, player_stats_xml, player_xml, two_matchup_league


LEAGUES_XML = f"""<?xml version="1.0" encoding="UTF-8"?>
<fantasy_content xmlns="{NAMESPACE}">
  <users count="1"><user><guid>ABC</guid>
    <games count="1"><game><game_key>nfl</game_key>
      <leagues count="2">
        <league><league_key>nfl.l.111</league_key><league_id>111</league_id><name>Office League</name></league>
        <league><league_key>nfl.l.222</league_key><league_id>222</league_id><name>Family League</name></league>
      </leagues>
    </game></games>
  </user></users>
</fantasy_content>
"""


class StaticGenerator:
    async def generate(self, prompt: str) -> str:
        return "```html\nA tidy recap.\n```"


class QuietNotifier:
    async def send(self, message: str) -> None:
        return None


class FakeYahoo:
    """Routes Yahoo API and token requests; rejects the ``stale`` access token."""

    def __init__(self):
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)
        if "get_token" in url:
            form = dict(item.split("=", 1) for item in request.content.decode().split("&"))
            if form.get("code") == "bad" or form.get("refresh_token") == "revoked":
                return httpx.Response(400, json={"error": "invalid_grant"})
            return httpx.Response(
                200, json={"access_token": "fresh", "refresh_token": "r2", "expires_in": 3600}
            )
        if request.headers.get("Authorization") == "Bearer stale":
            return httpx.Response(401, text="token_expired")
        if "/leagues" in url:
            return httpx.Response(200, text=LEAGUES_XML)
        if "/scoreboard;" in url:
            return httpx.Response(200, text=two_matchup_league(with_points=False))
        if "players;player_keys=" in url:
            keys = url.split("player_keys=", 1)[1].split("/", 1)[0].split(",")
            return httpx.Response(200, text=player_stats_xml([player_xml(key, key, 10.0) for key in keys]))
        return httpx.Response(404)


def _build_app(fake: FakeYahoo | None = None, **settings_overrides):
    settings = RecapSettings(yahoo_client_id="client-123", **settings_overrides)
    fake = fake or FakeYahoo()
    yahoo = YahooClient(settings, client=httpx.AsyncClient(transport=httpx.MockTransport(fake)))
    return create_app(settings, generator=StaticGenerator(), yahoo=yahoo, notifier=QuietNotifier())


@pytest.fixture(scope="module")
async def client():
    app = _build_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        async_client.app = app
        yield async_client


@pytest.mark.anyio
async def test_health(client: AsyncClient):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


@pytest.mark.anyio
async def test_summary_returns_markup(client: AsyncClient):
    resp = await client.post(
        "/summary",
        json={"scoreboardData": {"scoreboard": two_matchup_league(), "playerStats": []}, "mood": "pirate"},
    )
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["matchups"] == 2
    assert body["fallback_fragments"] == 0
    assert body["summary"].count("<p>A tidy recap.</p>") == 2
    assert "```" not in body["summary"]


@pytest.mark.anyio
async def test_summary_requires_scoreboard(client: AsyncClient):
    resp = await client.post("/summary", json={"mood": "spooky"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Missing required data: scoreboardData.scoreboard"


@pytest.mark.anyio
async def test_summary_rejects_unparseable_document(client: AsyncClient):
    resp = await client.post("/summary", json={"scoreboardData": {"scoreboard": "<oops"}})
    assert resp.status_code == 400


@pytest.mark.anyio
async def test_oauth_start_redirects_to_yahoo(client: AsyncClient):
    resp = await client.get("/oauth/start")
    assert resp.status_code == 302
    location = resp.headers["location"]
    assert location.startswith("https://api.login.yahoo.com/oauth2/request_auth?")
    assert "client_id=client-123" in location
    assert "response_type=code" in location


@pytest.mark.anyio
async def test_oauth_callback_posts_tokens_to_opener(client: AsyncClient):
    resp = await client.get("/oauth/callback", params={"code": "good"})
    assert resp.status_code == 200
    assert "window.opener.postMessage" in resp.text
    assert '"accessToken": "fresh"' in resp.text


@pytest.mark.anyio
async def test_oauth_callback_failure(client: AsyncClient):
    resp = await client.get("/oauth/callback", params={"code": "bad"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "OAuth failed"}


@pytest.mark.anyio
async def test_oauth_refresh(client: AsyncClient):
    resp = await client.post("/oauth/refresh", json={"refresh_token": "r1"})
    assert resp.status_code == 200
    assert resp.json() == {"access_token": "fresh", "refresh_token": "r2", "expires_in": 3600}

    resp = await client.post("/oauth/refresh", json={"refresh_token": "revoked"})
    assert resp.status_code == 401


@pytest.mark.anyio
async def test_leagues(client: AsyncClient):
    resp = await client.get("/leagues", params={"access_token": "good"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["leagues"] == [
        {"league_id": "111", "name": "Office League"},
        {"league_id": "222", "name": "Family League"},
    ]
    assert body["new_access_token"] is None


@pytest.mark.anyio
async def test_leagues_requires_token(client: AsyncClient):
    resp = await client.get("/leagues")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Missing access token"


@pytest.mark.anyio
async def test_leagues_refreshes_expired_token_once():
    fake = FakeYahoo()
    app = _build_app(fake)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        resp = await client.get("/leagues", params={"access_token": "stale", "refresh_token": "r1"})
        assert resp.status_code == 200
        body = resp.json()
        assert len(body["leagues"]) == 2
        assert body["new_access_token"] == "fresh"
        assert body["new_refresh_token"] == "r2"

        resp = await client.get("/leagues", params={"access_token": "stale"})
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Authentication failed"

    token_calls = [r for r in fake.requests if "get_token" in str(r.url)]
    assert len(token_calls) == 1


@pytest.mark.anyio
async def test_scoreboard_batches_player_stats():
    fake = FakeYahoo()
    app = _build_app(fake, stats_batch_size=3)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        resp = await client.get(
            "/scoreboard", params={"access_token": "good", "week": 3, "league_id": "12345"}
        )
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert "Team A" in body["scoreboard"]
    assert len(body["playerStats"]) == 2

    scoreboard_calls = [str(r.url) for r in fake.requests if "/scoreboard;" in str(r.url)]
    assert len(scoreboard_calls) == 1
    assert "/league/nfl.l.12345/scoreboard;week=3/" in scoreboard_calls[0]


@pytest.mark.anyio
async def test_scoreboard_requires_parameters(client: AsyncClient):
    resp = await client.get("/scoreboard", params={"access_token": "good"})
    assert resp.status_code == 400


@pytest.mark.anyio
async def test_scoreboard_output_feeds_summary():
    app = _build_app()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        board = await client.get("/scoreboard", params={"access_token": "good", "week": 3, "league_id": "12345"})
        resp = await client.post(
            "/summary",
            content=json.dumps({"scoreboardData": board.json()}),
            headers={"Content-Type": "application/json"},
        )
    assert resp.status_code == 200
    assert resp.json()["matchups"] == 2
