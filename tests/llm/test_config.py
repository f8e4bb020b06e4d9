# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Tests for LLM configuration and the provider factory."""

import os
from unittest.mock import patch

import pytest

from craftbot.llm import get_provider
from craftbot.llm.config import GeminiConfig, LLMConfig, OllamaConfig
from craftbot.llm.exceptions import LLMNotConfiguredError
from craftbot.llm.providers.gemini import GeminiProvider
from craftbot.llm.providers.ollama import OllamaProvider


def test_llm_config_defaults():
    """Test LLM config defaults."""
    config = LLMConfig()

    assert config.provider == "gemini"
    assert config.get_model() == "gemini-2.0-flash"
    assert config.max_tokens == 200


def test_llm_config_with_custom_ollama():
    """Test LLM config with custom Ollama settings."""
    config = LLMConfig(provider="ollama", ollama=OllamaConfig(base_url="http://custom:8080", model="qwen2"))

    assert config.ollama.base_url == "http://custom:8080"
    assert config.get_model() == "qwen2"


@pytest.mark.asyncio
async def test_get_provider_by_name():
    """Test factory returns the configured provider."""
    gemini = get_provider(LLMConfig(gemini=GeminiConfig(api_key="k")))
    ollama = get_provider(LLMConfig(provider="ollama"))
    try:
        assert isinstance(gemini, GeminiProvider)
        assert isinstance(ollama, OllamaProvider)
    finally:
        await gemini.close()
        await ollama.close()


def test_get_provider_without_gemini_key():
    """Test missing Gemini key surfaces as not configured."""
    with patch.dict(os.environ, {}, clear=True):
        with pytest.raises(LLMNotConfiguredError):
            get_provider(LLMConfig())
