"""
Ollama LLM provider.

Talks to a locally running Ollama server through ``ollama.AsyncClient``.
Useful for offline development and for field deployments without an
Anthropic key.
"""

import logging

from ollama import AsyncClient, ResponseError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from craftstory.core.config import get_settings
from craftstory.services.llm.base import BaseLLM

logger = logging.getLogger(__name__)


class OllamaLLM(BaseLLM):
    """Ollama local LLM provider with retry logic."""

    def __init__(
        self,
        base_url: str | None = None,
        model: str | None = None,
        temperature: float = 0.7,
    ) -> None:
        """Initialize the Ollama provider.

        Args:
            base_url: Ollama server URL (falls back to settings if not provided).
            model: Model name to use (e.g. "llama3.2").
            temperature: Default sampling temperature.
        """
        settings = get_settings()
        self._base_url = base_url or settings.ollama_base_url
        self._model = model or settings.ollama_model
        self._temperature = temperature
        self._client = AsyncClient(host=self._base_url)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=16),
        retry=retry_if_exception_type((ConnectionError, TimeoutError)),
        reraise=True,
    )
    async def _call_api(
        self,
        messages: list[dict[str, str]],
        temperature: float | None = None,
    ) -> str:
        """Send a chat request to the Ollama server."""
        try:
            response = await self._client.chat(
                model=self._model,
                messages=messages,
                options={
                    "temperature": temperature if temperature is not None else self._temperature
                },
            )
            return response.message.content

        except ConnectionError as exc:
            logger.warning("Ollama connection error (%s): %s", self._base_url, exc)
            raise ConnectionError(
                f"Failed to connect to Ollama at {self._base_url}: {exc}"
            ) from exc
        except TimeoutError as exc:
            logger.warning("Ollama timeout (%s): %s", self._base_url, exc)
            raise TimeoutError(f"Ollama request timed out ({self._base_url}): {exc}") from exc
        except ResponseError as exc:
            logger.error("Ollama response error: %s", exc)
            raise RuntimeError(f"Ollama error: {exc}") from exc
        except Exception as exc:
            logger.error("Unexpected Ollama error: %s", exc)
            raise RuntimeError(f"Ollama error: {exc}") from exc

    @staticmethod
    def _with_system(messages: list[dict[str, str]], system: str | None) -> list[dict[str, str]]:
        if not system:
            return list(messages)
        return [{"role": "system", "content": system}, *messages]

    async def generate(self, prompt: str, **kwargs) -> str:
        """Generate a single-turn response."""
        messages = self._with_system(
            [{"role": "user", "content": prompt}], kwargs.pop("system", None)
        )
        return await self._call_api(messages=messages, temperature=kwargs.pop("temperature", None))

    async def chat(self, messages: list[dict[str, str]], **kwargs) -> str:
        """Continue a conversation; Ollama accepts the system prompt inline."""
        history = self._with_system(messages, kwargs.pop("system", None))
        return await self._call_api(messages=history, temperature=kwargs.pop("temperature", None))
