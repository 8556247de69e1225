"""
Abstract base class for LLM providers.

The extractor and the multilingual assistant only depend on this interface,
so Claude and a local Ollama model are interchangeable.
"""

from abc import ABC, abstractmethod


class BaseLLM(ABC):
    """Interface that every LLM provider must implement."""

    @abstractmethod
    async def generate(self, prompt: str, **kwargs) -> str:
        """Generate a free-form text response.

        Args:
            prompt: The user prompt to send to the model.
            **kwargs: Provider-specific options (system, temperature, max_tokens).

        Returns:
            The model's text response.
        """

    @abstractmethod
    async def chat(self, messages: list[dict[str, str]], **kwargs) -> str:
        """Continue a multi-turn conversation.

        Args:
            messages: Ordered ``{"role": "user"|"assistant", "content": ...}`` turns.
                The last entry is the message to answer.
            **kwargs: Provider-specific options (system, temperature, max_tokens).

        Returns:
            The assistant's reply text.
        """
