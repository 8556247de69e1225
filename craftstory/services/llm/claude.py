"""
Claude LLM provider.

Wraps ``anthropic.AsyncAnthropic``. Concurrent onboarding flows share one
client, so requests go through a semaphore; transient failures are retried
with exponential backoff.
"""

import asyncio
import logging

from anthropic import (
    APIConnectionError,
    APITimeoutError,
    AsyncAnthropic,
    RateLimitError,
)
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from craftstory.core.config import get_settings
from craftstory.services.llm.base import BaseLLM

logger = logging.getLogger(__name__)


class ClaudeLLM(BaseLLM):
    """Claude API provider with rate-limit semaphore and retry logic."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.7,
        max_concurrent: int = 5,
    ) -> None:
        settings = get_settings()
        self._model = model or settings.claude_model
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._semaphore = asyncio.Semaphore(max_concurrent)
        self._client = AsyncAnthropic(api_key=api_key or settings.claude_api_key)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=16),
        retry=retry_if_exception_type((ConnectionError, TimeoutError)),
        reraise=True,
    )
    async def _call_api(
        self,
        messages: list[dict[str, str]],
        system: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """Send a Messages API request, respecting the concurrency semaphore.

        SDK exceptions are translated to ``ConnectionError`` / ``TimeoutError``
        (retried) or ``RuntimeError`` (not retried).
        """
        async with self._semaphore:
            try:
                kwargs: dict = {
                    "model": self._model,
                    "max_tokens": max_tokens or self._max_tokens,
                    "temperature": temperature if temperature is not None else self._temperature,
                    "messages": messages,
                }
                if system:
                    kwargs["system"] = system

                response = await self._client.messages.create(**kwargs)
                return "".join(
                    block.text for block in response.content if getattr(block, "type", "text") == "text"
                )

            except APITimeoutError as exc:
                logger.warning("Claude API timeout: %s", exc)
                raise TimeoutError(f"Claude API request timed out: {exc}") from exc
            except APIConnectionError as exc:
                logger.warning("Claude API connection error: %s", exc)
                raise ConnectionError(f"Failed to connect to Claude API: {exc}") from exc
            except RateLimitError as exc:
                logger.warning("Claude API rate limit hit: %s", exc)
                raise ConnectionError(f"Claude API rate limit exceeded: {exc}") from exc
            except Exception as exc:
                logger.error("Unexpected Claude API error: %s", exc)
                raise RuntimeError(f"Claude API error: {exc}") from exc

    async def generate(self, prompt: str, **kwargs) -> str:
        """Generate a single-turn response."""
        return await self._call_api(
            messages=[{"role": "user", "content": prompt}],
            system=kwargs.pop("system", None),
            temperature=kwargs.pop("temperature", None),
            max_tokens=kwargs.pop("max_tokens", None),
        )

    async def chat(self, messages: list[dict[str, str]], **kwargs) -> str:
        """Continue a conversation; the system prompt travels separately.

        The Messages API expects the first turn to come from the user, so a
        leading assistant greeting is dropped.
        """
        turns = [m for m in messages if m.get("role") in ("user", "assistant")]
        while turns and turns[0]["role"] != "user":
            turns.pop(0)
        return await self._call_api(
            messages=turns,
            system=kwargs.pop("system", None),
            temperature=kwargs.pop("temperature", None),
            max_tokens=kwargs.pop("max_tokens", None),
        )
