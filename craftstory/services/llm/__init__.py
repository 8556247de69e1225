"""Language model providers behind the ``BaseLLM`` interface."""

from craftstory.core.config import Settings, get_settings

from .base import BaseLLM

__all__ = ["BaseLLM", "LLM_PROVIDERS", "create_llm"]

LLM_PROVIDERS = ("claude", "ollama")


def create_llm(settings: Settings | None = None) -> BaseLLM:
    """Build the provider named by ``settings.llm_provider``.

    Model names, the Ollama host and the Anthropic key all come from
    *settings*, so the providers never read the global settings when
    built here.

    Raises:
        ValueError: If the provider is not one of ``LLM_PROVIDERS``.
    """
    settings = settings or get_settings()
    provider = settings.llm_provider.lower()

    if provider == "claude":
        from .claude import ClaudeLLM

        if not settings.claude_api_key:
            raise ValueError("CLAUDE_API_KEY must be set when LLM_PROVIDER=claude")
        return ClaudeLLM(api_key=settings.claude_api_key, model=settings.claude_model)
    if provider == "ollama":
        from .ollama import OllamaLLM

        return OllamaLLM(base_url=settings.ollama_base_url, model=settings.ollama_model)
    raise ValueError(
        f"Unknown LLM provider: {settings.llm_provider!r} (expected one of {', '.join(LLM_PROVIDERS)})"
    )
