"""Lightweight REST client for the fantasy recap API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the fantasy recap REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("scoreboard", type=Path, nargs="?", help="Scoreboard XML")
    parser.add_argument("--player-stats", type=Path, nargs="*", default=[], help="Player stats XML files")
    parser.add_argument("--mood", default="neutral", help="Theme for the recap")
    parser.add_argument("--output", type=Path, help="Write the returned markup here")
    parser.add_argument("--leagues", metavar="ACCESS_TOKEN", help="List leagues for a token and exit")
    parser.add_argument("--timeout", type=float, default=60.0, help="Request timeout in seconds")
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url, timeout=args.timeout) as client:
        if args.leagues:
            resp = client.get("/leagues", params={"access_token": args.leagues})
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))
            return

        if args.scoreboard is None:
            raise SystemExit("scoreboard XML is required unless using --leagues")

        body = {
            "scoreboardData": {
                "scoreboard": args.scoreboard.read_text(encoding="utf-8"),
                "playerStats": [path.read_text(encoding="utf-8") for path in args.player_stats],
            },
            "mood": args.mood,
        }
        resp = client.post("/summary", json=body)
        if resp.status_code >= 400:
            raise SystemExit(f"summary failed ({resp.status_code}): {resp.text}")
        payload = resp.json()
        print(f"Received recap for {payload['matchups']} matchups ({payload['fallback_fragments']} fallback)")
        if args.output:
            args.output.write_text(payload["summary"], encoding="utf-8")
            print(f"Recap saved to {args.output}")
        else:
            print(payload["summary"])


if __name__ == "__main__":
    main()
