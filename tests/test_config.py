# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Tests for configuration loading and settings."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from craftbot.config import AccountConfig, BotConfig, load_config
from craftbot.errors import ConfigError
from craftbot.llm.config import GeminiConfig
from craftbot.paths import default_config_path
from craftbot.settings import Settings


def test_defaults_match_server_behavior() -> None:
    config = BotConfig()

    assert config.zones.lobby_marker == "Welcome to PINOYCRAFT"
    assert config.commands.sell == "/sell hand"
    assert config.shop.staging_slot == 36
    assert config.shop.interval_s == 300.0
    assert config.reconnect.max_attempts == 5
    assert config.join.watchdog_interval_s == 180.0
    assert config.assistant.max_line_length == 230
    assert [account.username for account in config.accounts] == ["zlkm_worker_1"]


def test_yaml_partial_override(tmp_path: Path) -> None:
    path = tmp_path / "craftbot.yaml"
    path.write_text(
        "\n".join(
            [
                "accounts:",
                "  - username: zlkm_worker_2",
                "    home_command: /home farm",
                "shop:",
                "  interval_s: 60",
                "  menus:",
                "    listing_titles: ['Farm Page 1']",
                "unknown_section: true",
            ]
        ),
        encoding="utf-8",
    )

    config = load_config(path)

    assert config.accounts == [AccountConfig(username="zlkm_worker_2", home_command="/home farm")]
    assert config.shop.interval_s == 60.0
    assert config.shop.menus.listing_titles == ["Farm Page 1"]
    assert config.shop.staging_slot == 36


def test_to_yaml_writes_loadable_file(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "config.yaml"
    BotConfig().to_yaml(path)

    assert "ꜰᴀʀᴍ ᴀɴᴅ ꜰᴏᴏᴅ" in path.read_text(encoding="utf-8")
    assert load_config(path) == BotConfig()


def test_missing_file_raises_config_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "absent.yaml")


@pytest.mark.parametrize("content", ["accounts: [\n", "shop:\n  interval_s: soon\n"])
def test_invalid_file_raises_config_error(tmp_path: Path, content: str) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError, match="Invalid config"):
        load_config(path)


def test_config_path_env_override(tmp_path: Path) -> None:
    custom = tmp_path / "custom.yaml"
    with patch.dict(os.environ, {"CRAFTBOT_CONFIG_PATH": str(custom)}):
        assert default_config_path() == custom


def test_settings_read_environment(tmp_path: Path) -> None:
    env = {
        "CRAFTBOT_LOG_LEVEL": "DEBUG",
        "CRAFTBOT_LOG_FORMAT": "json",
        "BOT_PASSWORD": "from-env",
        "CRAFTBOT_CONFIG_PATH": str(tmp_path / "c.yaml"),
    }
    with patch.dict(os.environ, env, clear=True):
        settings = Settings()

    assert settings.log_level == "DEBUG"
    assert settings.log_format == "json"
    assert settings.bot_password == "from-env"
    assert settings.config_path == tmp_path / "c.yaml"


def test_gemini_key_falls_back_to_environment() -> None:
    with patch.dict(os.environ, {"GOOGLE_API_KEY": "google-key"}, clear=True):
        assert GeminiConfig().resolve_api_key() == "google-key"
        assert GeminiConfig(api_key="explicit").resolve_api_key() == "explicit"
    with patch.dict(os.environ, {}, clear=True):
        assert GeminiConfig().resolve_api_key() is None
