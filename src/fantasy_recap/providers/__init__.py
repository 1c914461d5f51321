"""External collaborators: text generation, league data and notifications."""

from fantasy_recap.completions import clean_completion

from .notify import LogNotifier, Notifier, WebhookNotifier, build_notifier
from .openai import OpenAIChatGenerator
from .yahoo import ScoreboardBundle, TokenSet, YahooClient, build_authorize_url, league_key

__all__ = [
    "LogNotifier",
    "Notifier",
    "OpenAIChatGenerator",
    "ScoreboardBundle",
    "TokenSet",
    "WebhookNotifier",
    "YahooClient",
    "build_authorize_url",
    "build_notifier",
    "clean_completion",
    "league_key",
]
