# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Pytest configuration and fixtures."""

from __future__ import annotations

import pytest

from craftbot.config import (
    AccountConfig,
    BotConfig,
    FleetConfig,
    JoinConfig,
    ReconnectConfig,
    ShopConfig,
)
from tests.fakes import FakeClient


@pytest.fixture
def fake_client() -> FakeClient:
    client = FakeClient()
    client.connected = True
    client.ready = True
    return client


@pytest.fixture
def fast_config() -> BotConfig:
    """Default configuration with every timer shrunk to milliseconds."""
    return BotConfig(
        accounts=[AccountConfig(username="zlkm_worker_1")],
        join=JoinConfig(
            login_grace_s=0.02,
            continued_grace_s=0.01,
            lobby_settle_s=0.05,
            backoff_step_s=0.01,
            watchdog_interval_s=0.5,
        ),
        reconnect=ReconnectConfig(max_attempts=5, delay_step_s=0.0),
        shop=ShopConfig(interval_s=0.05, settle_delay_s=0.0, balance_timeout_s=0.1),
        fleet=FleetConfig(startup_stagger_s=0.0),
    )
