# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Ollama provider implementation."""

from __future__ import annotations

from typing import Any

import httpx

from craftbot.llm.config import OllamaConfig
from craftbot.llm.exceptions import (
    LLMConnectionError,
    LLMInvalidResponseError,
    LLMModelNotFoundError,
    LLMTimeoutError,
)
from craftbot.llm.retry import retry_with_backoff
from craftbot.llm.types import CompletionRequest, CompletionResponse, TokenUsage
from craftbot.logging import get_logger

logger = get_logger(__name__)


class OllamaProvider:
    """Ollama LLM provider implementation.

    Provides access to local Ollama models via HTTP API.
    """

    name = "ollama"

    def __init__(self, config: OllamaConfig):
        self.config = config
        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            timeout=httpx.Timeout(config.timeout_seconds),
        )

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """Generate text completion via /api/generate."""

        async def _make_request() -> CompletionResponse:
            payload: dict[str, Any] = {
                "model": request.model,
                "prompt": request.prompt,
                "stream": False,
                "options": {"temperature": request.temperature},
            }
            if request.max_tokens:
                payload["options"]["num_predict"] = request.max_tokens
            if request.stop:
                payload["options"]["stop"] = request.stop

            try:
                response = await self._client.post("/api/generate", json=payload)
                response.raise_for_status()
                data = response.json()
            except httpx.ConnectError as e:
                raise LLMConnectionError(
                    f"Failed to connect to Ollama at {self.config.base_url}", provider=self.name
                ) from e
            except httpx.TimeoutException as e:
                raise LLMTimeoutError(
                    f"Request timed out after {self.config.timeout_seconds}s", provider=self.name
                ) from e
            except httpx.HTTPStatusError as e:
                if e.response.status_code == 404:
                    raise LLMModelNotFoundError(f"Model '{request.model}' not found", provider=self.name) from e
                raise LLMInvalidResponseError(f"HTTP {e.response.status_code}", provider=self.name) from e

            usage = None
            if "prompt_eval_count" in data or "eval_count" in data:
                prompt_tokens = int(data.get("prompt_eval_count", 0))
                completion_tokens = int(data.get("eval_count", 0))
                usage = TokenUsage(prompt_tokens, completion_tokens, prompt_tokens + completion_tokens)

            return CompletionResponse(
                text=data.get("response", "").strip(),
                model=request.model,
                finish_reason=data.get("done_reason"),
                usage=usage,
            )

        return await retry_with_backoff(_make_request, self.config, provider=self.name)

    async def health_check(self) -> bool:
        """Check if Ollama is available."""
        try:
            response = await self._client.get("/api/tags")
            return response.status_code == 200
        except Exception as e:
            logger.warning("ollama_health_check_failed", error=str(e))
            return False

    async def close(self) -> None:
        """Cleanup HTTP client."""
        await self._client.aclose()
