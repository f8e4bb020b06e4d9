# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Exception hierarchy for LLM operations.

The chat assistant treats every LLMError as "no reply". ``retryable`` marks
the failures worth another attempt after a backoff.
"""

from __future__ import annotations


class LLMError(Exception):
    """Base exception for LLM operations."""

    retryable = False

    def __init__(self, message: str, *, provider: str | None = None) -> None:
        super().__init__(message)
        self.provider = provider


class LLMNotConfiguredError(LLMError):
    """Provider is missing required settings (e.g. an API key)."""


class LLMConnectionError(LLMError):
    """Provider endpoint unreachable."""


class LLMTimeoutError(LLMError):
    """Generation request timed out."""

    retryable = True


class LLMRateLimitError(LLMError):
    """Provider answered HTTP 429."""

    retryable = True


class LLMModelNotFoundError(LLMError):
    """Configured model does not exist on the provider."""


class LLMInvalidResponseError(LLMError):
    """Response could not be interpreted."""


class LLMAuthenticationError(LLMError):
    """Provider rejected the credentials."""
