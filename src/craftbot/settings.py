# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Application settings."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from craftbot.paths import default_config_path


class Settings(BaseSettings):
    config_path: Path = Field(default_factory=default_config_path)
    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"
    bot_password: str | None = Field(
        default=None,
        validation_alias=AliasChoices("CRAFTBOT_BOT_PASSWORD", "BOT_PASSWORD", "bot_password"),
    )

    model_config = SettingsConfigDict(
        env_prefix="CRAFTBOT_",
        env_nested_delimiter="__",
        extra="ignore",
    )
