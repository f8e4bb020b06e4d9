# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Provider registry and factory."""

from craftbot.llm.base import LLMProvider
from craftbot.llm.config import LLMConfig
from craftbot.llm.exceptions import LLMError


def get_provider(config: LLMConfig) -> LLMProvider:
    """Get provider instance based on configuration.

    Args:
        config: LLM configuration

    Returns:
        Initialized provider instance

    Raises:
        LLMError: If provider type is unsupported
        LLMNotConfiguredError: If the provider lacks required settings
    """
    if config.provider == "gemini":
        from craftbot.llm.providers.gemini import GeminiProvider

        return GeminiProvider(config.gemini)

    elif config.provider == "ollama":
        from craftbot.llm.providers.ollama import OllamaProvider

        return OllamaProvider(config.ollama)

    else:
        raise LLMError(f"Unsupported provider: {config.provider}")


__all__ = ["get_provider"]
