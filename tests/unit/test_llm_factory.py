"""Tests for building the configured LLM provider from Settings."""

from unittest.mock import patch

import pytest

from craftstory.core.config import Settings
from craftstory.services.llm import create_llm
from craftstory.services.llm.claude import ClaudeLLM
from craftstory.services.llm.ollama import OllamaLLM


class TestCreateLLM:
    def test_ollama_uses_configured_host_and_model(self):
        settings = Settings(
            llm_provider="ollama",
            ollama_base_url="http://gpu-box:11434",
            ollama_model="qwen2.5",
        )

        with patch("craftstory.services.llm.ollama.AsyncClient") as client_cls:
            llm = create_llm(settings)

        assert isinstance(llm, OllamaLLM)
        assert llm._model == "qwen2.5"
        client_cls.assert_called_once_with(host="http://gpu-box:11434")

    def test_claude_uses_configured_key_and_model(self):
        settings = Settings(
            llm_provider="Claude",
            claude_api_key="sk-test-key",
            claude_model="claude-haiku",
        )

        with patch("craftstory.services.llm.claude.AsyncAnthropic") as client_cls:
            llm = create_llm(settings)

        assert isinstance(llm, ClaudeLLM)
        assert llm._model == "claude-haiku"
        client_cls.assert_called_once_with(api_key="sk-test-key")

    def test_claude_without_key(self):
        with pytest.raises(ValueError, match="CLAUDE_API_KEY"):
            create_llm(Settings(llm_provider="claude", claude_api_key=""))

    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="gemini"):
            create_llm(Settings(llm_provider="gemini"))
