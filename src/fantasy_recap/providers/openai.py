"""Chat-completions text generator."""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from fantasy_recap.completions import clean_completion
from fantasy_recap.config import RecapSettings
from fantasy_recap.errors import GenerationError, MissingCredentialError


logger = logging.getLogger(__name__)


class OpenAIChatGenerator:
    def __init__(
        self,
        *,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: str = "https://api.openai.com/v1",
        max_tokens: int = 280,
        temperature: float = 0.85,
        client: Optional[httpx.AsyncClient] = None,
    ):
        if not api_key:
            raise MissingCredentialError("OPENAI_API_KEY is not configured")
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.max_tokens = max_tokens
        self.temperature = temperature
        self._client = client

    @classmethod
    def from_settings(
        cls, settings: RecapSettings, *, client: Optional[httpx.AsyncClient] = None
    ) -> "OpenAIChatGenerator":
        return cls(
            api_key=settings.openai_api_key or "",
            model=settings.openai_model,
            base_url=settings.openai_base_url,
            max_tokens=settings.max_output_tokens,
            temperature=settings.temperature,
            client=client,
        )

    def _payload(self, prompt: str) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }

    async def _post(self, client: httpx.AsyncClient, prompt: str) -> httpx.Response:
        return await client.post(
            f"{self.base_url}/chat/completions",
            json=self._payload(prompt),
            headers={"Authorization": f"Bearer {self.api_key}"},
        )

    async def generate(self, prompt: str) -> str:
        try:
            if self._client is not None:
                resp = await self._post(self._client, prompt)
            else:
                async with httpx.AsyncClient(timeout=30.0) as client:
                    resp = await self._post(client, prompt)
        except httpx.HTTPError as exc:
            raise GenerationError(f"request failed: {exc}") from exc

        if resp.status_code >= 300:
            raise GenerationError(f"completion request returned HTTP {resp.status_code}")
        try:
            content = resp.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise GenerationError(f"unexpected completion payload: {exc}") from exc
        if not isinstance(content, str):
            raise GenerationError("completion content is not text")
        return clean_completion(content)
