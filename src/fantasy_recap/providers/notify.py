"""Notification sinks for one-line pipeline status messages."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

import httpx

from fantasy_recap.config import RecapSettings


logger = logging.getLogger(__name__)


class Notifier(Protocol):
    async def send(self, message: str) -> None:
        ...


class LogNotifier:
    async def send(self, message: str) -> None:
        logger.info("%s", message)


class WebhookNotifier:
    def __init__(self, url: str, *, client: Optional[httpx.AsyncClient] = None, timeout: float = 5.0):
        self.url = url
        self.timeout = timeout
        self._client = client

    async def send(self, message: str) -> None:
        if self._client is not None:
            resp = await self._client.post(self.url, json={"text": message})
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(self.url, json={"text": message})
        resp.raise_for_status()


def build_notifier(settings: RecapSettings) -> Notifier:
    if settings.notify_webhook_url:
        return WebhookNotifier(settings.notify_webhook_url)
    return LogNotifier()
