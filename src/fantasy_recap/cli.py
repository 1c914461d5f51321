"""Command-line interface for generating a recap from saved Yahoo documents."""

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path

from fantasy_recap.config import RecapSettings
from fantasy_recap.config_loader import PromptProfile
from fantasy_recap.logsink import configure_logging
from fantasy_recap.providers import build_notifier
from fantasy_recap.recap import RecapRequest, generate_recap


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate a weekly fantasy recap from scoreboard XML")
    parser.add_argument("scoreboard", type=Path, help="Path to scoreboard-with-rosters XML")
    parser.add_argument(
        "--player-stats",
        type=Path,
        nargs="*",
        default=[],
        help="Player stats XML documents (one per key batch)",
    )
    parser.add_argument("--mood", default="neutral", help="Theme for the recap prose")
    parser.add_argument("--output", type=Path, default=Path("recap.html"), help="Output markup path")
    parser.add_argument("--top-n", type=int, default=None, help="Top performers kept per team")
    parser.add_argument("--concurrency", type=int, default=None, help="Generation calls in flight at once")
    parser.add_argument("--timeout", type=float, default=None, help="Per-call generation timeout in seconds")
    parser.add_argument("--load-profile", type=Path, default=None, help="Load prompt profile JSON")
    parser.add_argument("--save-profile", type=Path, default=None, help="Save prompt profile JSON")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = RecapSettings.from_env().with_overrides(
        top_n=max(0, args.top_n) if args.top_n is not None else None,
        concurrency=max(1, args.concurrency) if args.concurrency is not None else None,
        generation_timeout=args.timeout,
    )
    profile = PromptProfile(settings.style_hints, settings.banned_phrases)
    if args.load_profile:
        profile = PromptProfile.load(args.load_profile)
        settings = profile.apply(settings)
    if args.save_profile:
        profile.save(args.save_profile)
        print(f"Saved prompt profile to {args.save_profile}")
    configure_logging(settings)

    request = RecapRequest(
        scoreboard=args.scoreboard.read_text(encoding="utf-8"),
        player_stats=[path.read_text(encoding="utf-8") for path in args.player_stats],
        mood=args.mood,
    )
    outcome = asyncio.run(generate_recap(request, settings=settings, notifier=build_notifier(settings)))
    if not outcome.ok:
        print(f"Recap generation failed: {outcome.reason}")
        return 1

    args.output.write_text(outcome.markup or "", encoding="utf-8")
    print(
        f"Wrote recap for {outcome.matchups} matchups to {args.output} "
        f"({outcome.fallback_fragments} fallback, {outcome.elapsed:.2f}s)"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
