# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Type definitions for LLM requests and responses."""

from dataclasses import dataclass


@dataclass
class TokenUsage:
    """Token usage statistics for one generation."""

    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


@dataclass
class CompletionRequest:
    """Request for text completion."""

    prompt: str
    model: str
    temperature: float = 0.7
    max_tokens: int | None = None
    stop: list[str] | None = None


@dataclass
class CompletionResponse:
    """Response from text completion."""

    text: str
    model: str
    finish_reason: str | None = None
    usage: TokenUsage | None = None
