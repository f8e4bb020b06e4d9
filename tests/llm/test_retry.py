# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Tests for provider retry."""

import pytest

from craftbot.llm.config import OllamaConfig
from craftbot.llm.exceptions import LLMAuthenticationError, LLMRateLimitError, LLMTimeoutError
from craftbot.llm.retry import backoff_delays, retry_with_backoff


def test_backoff_delays_grow_geometrically():
    policy = OllamaConfig(max_retries=3, retry_delay_seconds=0.5, retry_backoff_multiplier=2.0)
    assert list(backoff_delays(policy)) == [0.5, 1.0, 2.0]
    assert list(backoff_delays(OllamaConfig(max_retries=0))) == []


@pytest.mark.asyncio
async def test_retryable_errors_are_retried_until_success():
    calls = []

    async def flaky():
        calls.append(1)
        if len(calls) < 3:
            raise LLMTimeoutError("slow", provider="ollama")
        return "done"

    policy = OllamaConfig(max_retries=3, retry_delay_seconds=0.0)
    assert await retry_with_backoff(flaky, policy) == "done"
    assert len(calls) == 3


@pytest.mark.asyncio
async def test_last_error_raised_when_retries_exhausted():
    calls = []

    async def limited():
        calls.append(1)
        raise LLMRateLimitError("429")

    with pytest.raises(LLMRateLimitError):
        await retry_with_backoff(limited, OllamaConfig(max_retries=2, retry_delay_seconds=0.0))
    assert len(calls) == 3


@pytest.mark.asyncio
async def test_non_retryable_error_fails_immediately():
    calls = []

    async def denied():
        calls.append(1)
        raise LLMAuthenticationError("bad key", provider="gemini")

    with pytest.raises(LLMAuthenticationError) as info:
        await retry_with_backoff(denied, OllamaConfig(max_retries=5, retry_delay_seconds=0.0))
    assert len(calls) == 1
    assert info.value.provider == "gemini"
    assert info.value.retryable is False
