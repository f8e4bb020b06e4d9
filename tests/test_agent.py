# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""End-to-end agent behavior against the in-memory client."""

from __future__ import annotations

import asyncio

import pytest

from craftbot.client.base import Item, Menu
from craftbot.config import AccountConfig, BotConfig
from craftbot.core.agent import Agent
from craftbot.core.state import Zone
from craftbot.llm.exceptions import LLMNotConfiguredError

from tests.fakes import FakeClient, FakeProvider

LOBBY = "Welcome to PINOYCRAFT, zlkm_worker_1!"
SURVIVAL = "[mcMMO] Overhaul Era is enabled"
CONTINUED = "Your previous session has been continued."
SWITCH = "/server survival"


class Harness:
    def __init__(self, config: BotConfig, account: AccountConfig | None = None) -> None:
        self.clients: list[FakeClient] = []
        self.exits: list[int] = []
        self.connect_error: Exception | None = None
        self.provider_error: Exception | None = None
        self.agent = Agent(
            account or config.accounts[0],
            config,
            password="hunter2",
            client_factory=self._client,
            provider_factory=self._provider,
            on_exhausted=self.exits.append,
        )

    def _client(self, account: AccountConfig) -> FakeClient:
        client = FakeClient(account.username)
        client.connect_error = self.connect_error
        self.clients.append(client)
        return client

    def _provider(self, _config: object) -> FakeProvider:
        if self.provider_error is not None:
            raise self.provider_error
        return FakeProvider()

    @property
    def client(self) -> FakeClient:
        return self.clients[-1]

    async def start_live(self) -> FakeClient:
        await self.agent.start()
        self.client.go_live()
        return self.client


@pytest.fixture
async def harness(fast_config: BotConfig):
    h = Harness(fast_config)
    yield h
    await h.agent.stop()


@pytest.mark.asyncio
async def test_continued_session_line_after_lobby_skips_login(harness: Harness) -> None:
    client = await harness.start_live()
    state = harness.agent.state

    client.say(LOBBY)
    client.say(CONTINUED)

    assert state.zone == Zone.LOBBY
    assert state.session_continued is True
    assert state.join_scheduled is True
    assert harness.agent.join.pending_delay_s == pytest.approx(0.01)
    assert client.commands("/l ") == []

    await asyncio.sleep(0.08)
    assert client.commands("/l ") == []
    assert client.sent.count(SWITCH) == 1


@pytest.mark.asyncio
async def test_fresh_lobby_logs_in_then_switches(harness: Harness) -> None:
    client = await harness.start_live()

    client.say(LOBBY)
    await asyncio.sleep(0.1)

    assert client.sent[:2] == ["/l hunter2", SWITCH]


@pytest.mark.asyncio
async def test_survival_arrival_resets_join_and_goes_home(harness: Harness) -> None:
    client = await harness.start_live()
    agent = harness.agent
    agent.state.join_attempts = 3

    client.say(SURVIVAL)
    client.say(SURVIVAL)

    assert agent.state.zone == Zone.SURVIVAL
    assert agent.state.join_attempts == 0
    assert client.sent.count("/home") == 1
    assert agent.sell_engine is not None and agent.sell_engine.running


@pytest.mark.asyncio
async def test_leaving_survival_stops_selling(harness: Harness) -> None:
    client = await harness.start_live()
    client.say(SURVIVAL)
    client.say(LOBBY)

    assert harness.agent.sell_engine is not None
    assert not harness.agent.sell_engine.running


@pytest.mark.asyncio
async def test_disconnect_rebuilds_connection(harness: Harness) -> None:
    first = await harness.start_live()
    first.say(SURVIVAL)

    await first.disconnect()
    await asyncio.sleep(0.02)

    assert len(harness.clients) == 2
    second = harness.client
    assert second.connect_calls == 1
    assert first.events.listener_count("menu_open") == 0
    assert second.events.listener_count("menu_open") == 1
    assert harness.agent.state.zone == Zone.UNKNOWN
    assert harness.agent.state.reconnect_attempts == 1

    second.go_live()
    assert harness.agent.state.reconnect_attempts == 0


@pytest.mark.asyncio
async def test_menu_reaction_from_dropped_connection_is_cancelled(harness: Harness) -> None:
    first = await harness.start_live()
    stale_send = harness.agent.sell_engine._send
    confirm = Menu(window_id=4, title="Selling (Cactus)", slots=[Item(name="ender_chest", count=1)])

    first.events.emit("menu_open", confirm)
    await asyncio.sleep(0.01)
    assert first.commands("/bal") == ["/bal"]

    await first.disconnect()
    await asyncio.sleep(0.01)
    second = harness.client
    assert second is not first
    second.go_live()
    await asyncio.sleep(0.15)

    assert first.commands("/w ") == []
    assert second.commands("/w ") == []
    assert first.events.listener_count("message") == 0

    assert stale_send("/bal") is False
    assert second.commands("/bal") == []


@pytest.mark.asyncio
async def test_five_failed_connects_exit_with_code_one(fast_config: BotConfig) -> None:
    harness = Harness(fast_config)
    harness.connect_error = ConnectionError("bridge down")

    await harness.agent.start()
    await asyncio.sleep(0.05)

    assert harness.exits == [1]
    assert len(harness.clients) == 5
    await harness.agent.stop()


@pytest.mark.asyncio
async def test_stop_does_not_reconnect(fast_config: BotConfig) -> None:
    harness = Harness(fast_config)
    await harness.start_live()

    await harness.agent.stop()
    await asyncio.sleep(0.02)

    assert len(harness.clients) == 1
    assert harness.agent.state.reconnect_attempts == 0


@pytest.mark.asyncio
async def test_assistant_follows_account_and_toggles(fast_config: BotConfig) -> None:
    account = AccountConfig(username="zlkm_worker_1", allow_assistant=True, assistant_on_start=True)
    harness = Harness(fast_config, account)
    client = await harness.start_live()
    agent = harness.agent

    assert agent.assistant is not None
    agent.disable_assistant("test")
    assert agent.assistant is None
    assert agent.enable_assistant("test") is True
    assert agent.enable_assistant("again") is True

    client.say("steve » zlkm_worker_1 hi")
    await asyncio.sleep(0.05)
    assert "ok" in client.sent

    await client.disconnect()
    await asyncio.sleep(0.02)
    assert agent.assistant is not None
    assert agent.assistant.client is harness.client
    await agent.stop()


@pytest.mark.asyncio
async def test_allowed_assistant_waits_for_explicit_enable(fast_config: BotConfig) -> None:
    harness = Harness(fast_config, AccountConfig(username="zlkm_worker_1", allow_assistant=True))
    await harness.start_live()
    agent = harness.agent

    assert agent.assistant is None
    assert agent.assistant_enabled is False
    assert agent.enable_assistant("manual") is True
    assert agent.assistant is not None
    await agent.stop()


@pytest.mark.asyncio
async def test_assistant_not_allowed_for_account(harness: Harness) -> None:
    await harness.start_live()
    assert harness.agent.enable_assistant("test") is False
    assert harness.agent.assistant is None


@pytest.mark.asyncio
async def test_assistant_without_api_key_stays_disabled(fast_config: BotConfig) -> None:
    account = AccountConfig(username="zlkm_worker_1", allow_assistant=True, assistant_on_start=True)
    harness = Harness(fast_config, account)
    harness.provider_error = LLMNotConfiguredError("No GEMINI_API_KEY or GOOGLE_API_KEY set")

    await harness.start_live()

    assert harness.agent.assistant is None
    await harness.agent.stop()
