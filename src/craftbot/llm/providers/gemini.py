# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Gemini provider implementation (REST generateContent API)."""

from __future__ import annotations

from typing import Any

import httpx

from craftbot.llm.config import GeminiConfig
from craftbot.llm.exceptions import (
    LLMAuthenticationError,
    LLMConnectionError,
    LLMInvalidResponseError,
    LLMModelNotFoundError,
    LLMNotConfiguredError,
    LLMRateLimitError,
    LLMTimeoutError,
)
from craftbot.llm.retry import retry_with_backoff
from craftbot.llm.types import CompletionRequest, CompletionResponse, TokenUsage
from craftbot.logging import get_logger

logger = get_logger(__name__)


class GeminiProvider:
    """Gemini LLM provider.

    Talks to the public Generative Language REST API with httpx, so no
    Google SDK is required.
    """

    name = "gemini"

    def __init__(self, config: GeminiConfig):
        """Initialize Gemini provider.

        Args:
            config: Gemini configuration

        Raises:
            LLMNotConfiguredError: If no API key is configured or exported
        """
        api_key = config.resolve_api_key()
        if not api_key:
            raise LLMNotConfiguredError("No GEMINI_API_KEY or GOOGLE_API_KEY set", provider=self.name)
        self.config = config
        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            timeout=httpx.Timeout(config.timeout_seconds),
            headers={"x-goog-api-key": api_key},
        )

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """Generate text completion.

        Args:
            request: Completion request

        Returns:
            Completion response

        Raises:
            LLMError: On API errors
        """

        async def _make_request() -> CompletionResponse:
            generation: dict[str, Any] = {"temperature": request.temperature}
            if request.max_tokens:
                generation["maxOutputTokens"] = request.max_tokens
            if request.stop:
                generation["stopSequences"] = request.stop
            payload = {
                "contents": [{"role": "user", "parts": [{"text": request.prompt}]}],
                "generationConfig": generation,
            }

            try:
                response = await self._client.post(f"/models/{request.model}:generateContent", json=payload)
                response.raise_for_status()
                data = response.json()
            except httpx.ConnectError as e:
                raise LLMConnectionError(
                    f"Failed to connect to Gemini at {self.config.base_url}", provider=self.name
                ) from e
            except httpx.TimeoutException as e:
                raise LLMTimeoutError(
                    f"Request timed out after {self.config.timeout_seconds}s", provider=self.name
                ) from e
            except httpx.HTTPStatusError as e:
                status = e.response.status_code
                if status in (401, 403):
                    raise LLMAuthenticationError(
                        f"Gemini rejected credentials (HTTP {status})", provider=self.name
                    ) from e
                if status == 404:
                    raise LLMModelNotFoundError(f"Model '{request.model}' not found", provider=self.name) from e
                if status == 429:
                    raise LLMRateLimitError("Gemini rate limit exceeded", provider=self.name) from e
                raise LLMInvalidResponseError(f"HTTP {status}", provider=self.name) from e

            return _parse_response(data, request.model)

        return await retry_with_backoff(_make_request, self.config, provider=self.name)

    async def health_check(self) -> bool:
        """Check if the model endpoint answers.

        Returns:
            True if Gemini is responding
        """
        try:
            response = await self._client.get(f"/models/{self.config.model}")
            return response.status_code == 200
        except Exception as e:
            logger.warning("gemini_health_check_failed", error=str(e))
            return False

    async def close(self) -> None:
        """Cleanup HTTP client."""
        await self._client.aclose()


def _parse_response(data: dict[str, Any], model: str) -> CompletionResponse:
    candidates = data.get("candidates") or []
    if not candidates:
        raise LLMInvalidResponseError("Gemini returned no candidates", provider="gemini")
    first = candidates[0]
    parts = (first.get("content") or {}).get("parts") or []
    text = "".join(part.get("text", "") for part in parts if isinstance(part, dict))

    usage = None
    meta = data.get("usageMetadata")
    if meta:
        usage = TokenUsage(
            prompt_tokens=int(meta.get("promptTokenCount", 0)),
            completion_tokens=int(meta.get("candidatesTokenCount", 0)),
            total_tokens=int(meta.get("totalTokenCount", 0)),
        )

    return CompletionResponse(
        text=text.strip(),
        model=model,
        finish_reason=first.get("finishReason"),
        usage=usage,
    )
