# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Filesystem paths for craftbot configuration."""

from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_config_dir

ENV_CONFIG_PATH = "CRAFTBOT_CONFIG_PATH"
CONFIG_FILENAME = "config.yaml"


def default_config_dir() -> Path:
    """Get the default configuration directory."""
    return Path(user_config_dir("craftbot", "craftbot"))


def default_config_path() -> Path:
    """Get the default configuration file path.

    ``CRAFTBOT_CONFIG_PATH`` wins over the platform config directory.
    """
    env_path = os.getenv(ENV_CONFIG_PATH)
    if env_path:
        return Path(env_path)
    return default_config_dir() / CONFIG_FILENAME
