# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Base protocol for LLM providers."""

from typing import Protocol

from craftbot.llm.types import CompletionRequest, CompletionResponse


class LLMProvider(Protocol):
    """Protocol for LLM provider implementations.

    The chat assistant only needs single-shot text completion, so that is the
    whole surface a provider has to offer.
    """

    name: str

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """Generate text completion.

        Args:
            request: Completion request parameters

        Returns:
            Completion response with generated text

        Raises:
            LLMError: On provider-specific errors
        """
        ...

    async def health_check(self) -> bool:
        """Check if provider is available.

        Returns:
            True if provider is healthy and accessible
        """
        ...

    async def close(self) -> None:
        """Release HTTP resources."""
        ...
