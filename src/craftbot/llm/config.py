# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration models for LLM providers."""

from __future__ import annotations

import os
from typing import Literal

from pydantic import BaseModel, Field


class GeminiConfig(BaseModel):
    """Configuration for Gemini provider."""

    api_key: str | None = None
    model: str = "gemini-2.0-flash"
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    timeout_seconds: float = 30.0
    max_retries: int = 3
    retry_delay_seconds: float = 1.0
    retry_backoff_multiplier: float = 2.0

    def resolve_api_key(self) -> str | None:
        """Return the configured key, falling back to GEMINI_API_KEY / GOOGLE_API_KEY."""
        return self.api_key or os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")


class OllamaConfig(BaseModel):
    """Configuration for Ollama provider."""

    base_url: str = "http://localhost:11434"
    model: str = "llama3"
    timeout_seconds: float = 30.0
    max_retries: int = 3
    retry_delay_seconds: float = 1.0
    retry_backoff_multiplier: float = 2.0


class LLMConfig(BaseModel):
    """Main LLM configuration."""

    provider: Literal["gemini", "ollama"] = "gemini"
    gemini: GeminiConfig = Field(default_factory=GeminiConfig)
    ollama: OllamaConfig = Field(default_factory=OllamaConfig)
    temperature: float = 0.9
    max_tokens: int | None = 200

    def get_model(self) -> str:
        """Return the configured model name for the active provider."""
        if self.provider == "gemini":
            return self.gemini.model
        if self.provider == "ollama":
            return self.ollama.model
        raise ValueError(f"Unknown LLM provider: {self.provider}")
