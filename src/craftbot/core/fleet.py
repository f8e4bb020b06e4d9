# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Runs one agent per configured account."""

from __future__ import annotations

import asyncio
import contextlib
from typing import TYPE_CHECKING, Any

from craftbot.core.agent import Agent
from craftbot.logging import get_logger

if TYPE_CHECKING:
    from craftbot.config import AccountConfig, BotConfig

logger = get_logger(__name__)


class FleetManager:
    """Creates agents and starts them with a per-index stagger."""

    def __init__(self, config: BotConfig, *, password: str | None = None, **agent_options: Any) -> None:
        self.config = config
        self._password = password
        self._agent_options = agent_options
        self._agents: dict[str, Agent] = {}
        self._start_tasks: list[asyncio.Task[None]] = []
        self._stopped: asyncio.Event | None = None

    def create_agent(self, account: AccountConfig) -> Agent:
        if account.username in self._agents:
            raise ValueError(f"Duplicate account: {account.username}")
        agent = Agent(account, self.config, password=self._password, **self._agent_options)
        self._agents[agent.id] = agent
        logger.info("agent_created", agent=agent.id)
        return agent

    def list_agents(self) -> list[Agent]:
        return list(self._agents.values())

    def get_agent(self, agent_id: str) -> Agent | None:
        return self._agents.get(agent_id)

    async def start(self) -> None:
        """Create every configured agent and schedule its staggered start."""
        stagger = self.config.fleet.startup_stagger_s
        for index, account in enumerate(self.config.accounts):
            agent = self.create_agent(account)
            self._start_tasks.append(asyncio.create_task(self._start_later(agent, index * stagger)))
        logger.info("fleet_started", agents=len(self._agents), stagger_s=stagger)

    async def _start_later(self, agent: Agent, delay: float) -> None:
        if delay > 0:
            await asyncio.sleep(delay)
        await agent.start()

    async def run(self) -> None:
        """Start the fleet and wait until stop() is called or the task is cancelled."""
        self._stopped = asyncio.Event()
        await self.start()
        await self._stopped.wait()

    async def stop(self) -> None:
        for task in self._start_tasks:
            task.cancel()
        for task in self._start_tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._start_tasks.clear()

        for agent in self.list_agents():
            try:
                await agent.stop()
            except Exception:
                logger.exception("agent_stop_failed", agent=agent.id)
        if self._stopped is not None:
            self._stopped.set()
        logger.info("fleet_stopped", agents=len(self._agents))
