# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Retry of provider calls with exponential backoff."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterator
from typing import Protocol, TypeVar

from craftbot.llm.exceptions import LLMError
from craftbot.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class RetryPolicy(Protocol):
    """Retry fields shared by every provider config."""

    max_retries: int
    retry_delay_seconds: float
    retry_backoff_multiplier: float


def backoff_delays(policy: RetryPolicy) -> Iterator[float]:
    """Yield the sleep before each retry, ``max_retries`` values in total."""
    delay = policy.retry_delay_seconds
    for _ in range(max(0, policy.max_retries)):
        yield delay
        delay *= policy.retry_backoff_multiplier


async def retry_with_backoff(
    func: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    *,
    provider: str = "llm",
) -> T:
    """Call ``func`` until it succeeds or fails with a non-retryable error.

    Args:
        func: Async function performing one request
        policy: Provider config carrying the retry fields
        provider: Provider name for log events

    Raises:
        LLMError: The last error once retries are exhausted, or the first
            non-retryable one
    """
    delays = backoff_delays(policy)
    attempt = 0
    while True:
        attempt += 1
        try:
            return await func()
        except LLMError as e:
            if not e.retryable:
                raise
            delay = next(delays, None)
            if delay is None:
                logger.error("llm_retry_exhausted", provider=provider, attempts=attempt, error=str(e))
                raise
            logger.warning("llm_retry_attempt", provider=provider, attempt=attempt, delay_s=delay, error=str(e))
            await asyncio.sleep(delay)
