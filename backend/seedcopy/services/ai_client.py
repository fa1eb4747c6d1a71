"""Chat-completion client for the AI provider.

One POST per call, no retries. Every failure mode (missing key, network
error, timeout, non-2xx, malformed or empty body) surfaces as
``AICompletionError`` so callers can apply their fallback in one place.
"""

import logging
from typing import Optional

import httpx

from seedcopy.config import settings
from seedcopy.middleware.exceptions import UpstreamServiceError

logger = logging.getLogger(__name__)


class AICompletionError(UpstreamServiceError):
    """The AI provider did not return usable text."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__("AI completion failed", details=message)
        self.upstream_status = status_code


class AICompletionClient:

    def __init__(
        self,
        api_key: str,
        base_url: str,
        model: str,
        temperature: float = 0.8,
        max_tokens: int = 2000,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
        )

    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        """Return the assistant message text for a system + user prompt pair."""
        if not self.api_key:
            raise AICompletionError("AI API key is not configured")

        try:
            response = await self._client.post(
                "/chat/completions",
                json={
                    "model": self.model,
                    "messages": [
                        {"role": "system", "content": system_prompt},
                        {"role": "user", "content": user_prompt},
                    ],
                    "temperature": self.temperature,
                    "max_tokens": self.max_tokens,
                },
                headers={"Authorization": f"Bearer {self.api_key}"},
            )
        except httpx.TimeoutException as e:
            raise AICompletionError(f"AI request timed out: {e}") from e
        except httpx.HTTPError as e:
            raise AICompletionError(f"AI request failed: {e}") from e

        if response.status_code >= 400:
            logger.error(
                f"AI provider error {response.status_code}: {response.text[:200]}"
            )
            raise AICompletionError(
                f"AI provider returned {response.status_code}",
                status_code=response.status_code,
            )

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise AICompletionError(f"Malformed AI response: {e}") from e

        if not isinstance(content, str) or not content.strip():
            raise AICompletionError("AI response was empty")
        return content

    async def aclose(self) -> None:
        await self._client.aclose()


_ai_client: Optional[AICompletionClient] = None


async def get_ai_client() -> AICompletionClient:
    """Get or create the process-wide AI client."""
    global _ai_client
    if _ai_client is None:
        _ai_client = AICompletionClient(
            api_key=settings.ai_api_key,
            base_url=settings.ai_base_url,
            model=settings.ai_model,
            temperature=settings.ai_temperature,
            max_tokens=settings.ai_max_tokens,
            timeout=settings.ai_timeout_seconds,
        )
    return _ai_client


async def close_ai_client():
    global _ai_client
    if _ai_client:
        await _ai_client.aclose()
        _ai_client = None
