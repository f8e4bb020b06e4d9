# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""LLM provider layer used by the chat assistant.

Public API:
    - LLMProvider: Protocol defining provider interface
    - LLMConfig: Configuration models
    - get_provider: Provider factory
    - Request/Response types
    - Exception hierarchy
"""

from craftbot.llm.base import LLMProvider
from craftbot.llm.config import GeminiConfig, LLMConfig, OllamaConfig
from craftbot.llm.exceptions import (
    LLMAuthenticationError,
    LLMConnectionError,
    LLMError,
    LLMInvalidResponseError,
    LLMModelNotFoundError,
    LLMNotConfiguredError,
    LLMRateLimitError,
    LLMTimeoutError,
)
from craftbot.llm.providers import get_provider
from craftbot.llm.types import CompletionRequest, CompletionResponse, TokenUsage

__all__ = [
    "LLMProvider",
    "get_provider",
    # Config
    "LLMConfig",
    "GeminiConfig",
    "OllamaConfig",
    # Types
    "CompletionRequest",
    "CompletionResponse",
    "TokenUsage",
    # Exceptions
    "LLMError",
    "LLMNotConfiguredError",
    "LLMConnectionError",
    "LLMTimeoutError",
    "LLMRateLimitError",
    "LLMModelNotFoundError",
    "LLMInvalidResponseError",
    "LLMAuthenticationError",
]
