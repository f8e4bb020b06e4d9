# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration management for craftbot agents.

Every server-specific literal (zone markers, menu titles, command strings) and
every timing constant lives here as a default, so a different server only
needs a different YAML file.
"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from craftbot.errors import ConfigError
from craftbot.llm.config import LLMConfig
from craftbot.logging import get_logger

logger = get_logger(__name__)


class ConnectionConfig(BaseModel):
    """Where the protocol bridge listens, and what it should join."""

    host: str = "127.0.0.1"
    port: int = 25599
    server_host: str = "play.pinoy-craft.com"
    server_port: int = 25565
    version: str | None = "1.20"
    online: bool = False
    connect_timeout_s: float = 30.0
    request_timeout_s: float = 10.0

    model_config = ConfigDict(extra="ignore")


class AccountConfig(BaseModel):
    """One player account driven by one agent."""

    username: str
    home_command: str = "/home"
    password: str | None = None  # falls back to Settings.bot_password
    allow_assistant: bool = False
    assistant_on_start: bool = False  # only honoured when allow_assistant is set

    model_config = ConfigDict(extra="ignore")


class ZoneConfig(BaseModel):
    """Chat markers used to infer which zone the agent is in."""

    lobby_marker: str = "Welcome to PINOYCRAFT"
    survival_marker: str = "[mcMMO] Overhaul Era"
    continued_marker: str = "has been continued."

    model_config = ConfigDict(extra="ignore")


class CommandConfig(BaseModel):
    """Chat command templates."""

    login: str = "/l {password}"
    zone_switch: str = "/server survival"
    balance: str = "/bal"
    sell: str = "/sell hand"
    pay: str = "/pay {recipient} {amount}"
    whisper: str = "/w {recipient} {message}"

    model_config = ConfigDict(extra="ignore")


class JoinConfig(BaseModel):
    """Lobby login and zone-switch pacing."""

    login_grace_s: float = 1.0
    continued_grace_s: float = 0.5
    lobby_settle_s: float = 0.5
    backoff_step_s: float = 60.0
    watchdog_interval_s: float = 180.0

    model_config = ConfigDict(extra="ignore")


class ReconnectConfig(BaseModel):
    """Reconnect ceiling and linear delay step."""

    max_attempts: int = 5
    delay_step_s: float = 60.0

    model_config = ConfigDict(extra="ignore")


class MenuConfig(BaseModel):
    """Server-rendered shop menu titles and the items to click in them."""

    listing_titles: list[str] = Field(default_factory=lambda: ["ꜰᴀʀᴍ ᴀɴᴅ ꜰᴏᴏᴅ [ᴘᴀɢᴇ 1/5]"])
    confirm_title_markers: list[str] = Field(default_factory=lambda: ["Selling (Cactus)", "cactus"])
    confirm_item_name: str = "ender_chest"
    confirm_display_pattern: str = r"ender.?chest"

    model_config = ConfigDict(extra="ignore")


class ShopConfig(BaseModel):
    """Periodic sell cycle settings."""

    enabled: bool = True
    interval_s: float = 300.0
    item_name: str = "cactus"
    item_label: str = "Cactus"
    display_pattern: str = "cactus"
    staging_slot: int = 36  # first hotbar slot in the player inventory window
    hotbar_index: int = 0
    settle_delay_s: float = 3.0
    balance_timeout_s: float = 5.0
    recipient: str = "zlkm_"
    capture_lines: int = 5
    menus: MenuConfig = Field(default_factory=MenuConfig)

    model_config = ConfigDict(extra="ignore")


class AssistantConfig(BaseModel):
    """Optional chat assistant."""

    history_limit: int = 100
    max_reply_lines: int = 3
    max_line_length: int = 230
    line_delay_s: float = 0.6
    persona: list[str] = Field(
        default_factory=lambda: [
            "You are a helpful Minecraft in-game chat assistant and a regular cactus farmer.",
            "Act like a normal player: casual language, contractions, no salutations unless greeted.",
            "You only know what is in the chat log.",
            "Reply concisely in plain text suitable for Minecraft chat (no markdown), one or two sentences.",
        ]
    )
    llm: LLMConfig = Field(default_factory=LLMConfig)

    model_config = ConfigDict(extra="ignore")


class FleetConfig(BaseModel):
    """Multi-agent startup."""

    startup_stagger_s: float = 5.0

    model_config = ConfigDict(extra="ignore")


class BotConfig(BaseModel):
    """Complete configuration for a fleet of agents."""

    connection: ConnectionConfig = Field(default_factory=ConnectionConfig)
    accounts: list[AccountConfig] = Field(
        default_factory=lambda: [AccountConfig(username="zlkm_worker_1")]
    )
    zones: ZoneConfig = Field(default_factory=ZoneConfig)
    commands: CommandConfig = Field(default_factory=CommandConfig)
    join: JoinConfig = Field(default_factory=JoinConfig)
    reconnect: ReconnectConfig = Field(default_factory=ReconnectConfig)
    shop: ShopConfig = Field(default_factory=ShopConfig)
    assistant: AssistantConfig = Field(default_factory=AssistantConfig)
    fleet: FleetConfig = Field(default_factory=FleetConfig)

    model_config = ConfigDict(extra="ignore")

    @classmethod
    def from_yaml(cls, path: Path | str) -> BotConfig:
        path = Path(path)
        logger.info("config_loading", path=str(path))
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        return cls.model_validate(data)

    def to_yaml(self, path: Path | str) -> None:
        path = Path(path)
        logger.info("config_saving", path=str(path))
        path.parent.mkdir(parents=True, exist_ok=True)
        data = self.model_dump(mode="json")
        text = yaml.dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)
        path.write_text(text, encoding="utf-8")


def load_config(path: Path | str) -> BotConfig:
    """Load configuration, wrapping I/O and validation failures in ConfigError."""
    try:
        return BotConfig.from_yaml(path)
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {path}") from e
    except (yaml.YAMLError, ValidationError) as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e
