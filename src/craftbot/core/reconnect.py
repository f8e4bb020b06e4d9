# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Reconnect supervision with a bounded attempt count."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import TYPE_CHECKING, NoReturn

from craftbot.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Awaitable, Iterable

    from craftbot.config import ReconnectConfig
    from craftbot.core.state import AgentState

logger = get_logger(__name__)

EXIT_RECONNECT_EXHAUSTED = 1

Disposer = tuple[str, Callable[[], object]]


def terminate_process(code: int) -> NoReturn:
    """Default exhaustion handler: leave the event loop with an exit code."""
    raise SystemExit(code)


def reconnect_delay(attempt: int, step_s: float) -> float:
    return step_s * attempt


class ReconnectSupervisor:
    """Tears down per-connection components and schedules reconnects.

    The attempt counter only resets on a login event, so a server that accepts
    the TCP connection but keeps kicking the player still hits the ceiling.
    """

    def __init__(
        self,
        state: AgentState,
        config: ReconnectConfig,
        reconnect: Callable[[], Awaitable[None]],
        on_exhausted: Callable[[int], object] = terminate_process,
    ) -> None:
        self.state = state
        self.config = config
        self._reconnect = reconnect
        self._on_exhausted = on_exhausted
        self._task: asyncio.Task[None] | None = None
        self.log = logger.bind(agent=state.agent_id)

    def handle_disconnect(self, reason: str, disposers: Iterable[Disposer] = ()) -> None:
        """Dispose connection-scoped components, then schedule a reconnect."""
        for name, dispose in disposers:
            try:
                dispose()
            except Exception:
                self.log.exception("dispose_failed", component=name)

        if self.state.reconnect_scheduled:
            self.log.debug("reconnect_already_scheduled", reason=reason)
            return

        self.state.reconnect_attempts += 1
        attempt = self.state.reconnect_attempts
        if attempt >= self.config.max_attempts:
            self.log.error("reconnect_exhausted", attempts=attempt, reason=reason)
            self._on_exhausted(EXIT_RECONNECT_EXHAUSTED)
            return

        delay = reconnect_delay(attempt, self.config.delay_step_s)
        self.state.reconnect_scheduled = True
        self.log.warning("reconnect_scheduled", attempt=attempt, delay_s=delay, reason=reason)
        self._task = asyncio.create_task(self._run(attempt, delay))

    async def _run(self, attempt: int, delay: float) -> None:
        try:
            await asyncio.sleep(delay)
        except asyncio.CancelledError:
            return
        self._task = None
        self.state.reconnect_scheduled = False
        self.log.info("reconnecting", attempt=attempt)
        try:
            await self._reconnect()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.log.exception("reconnect_failed", attempt=attempt)
            self.handle_disconnect(f"reconnect failed: {e}")

    def on_login(self) -> None:
        if self.state.reconnect_attempts:
            self.log.info("reconnect_counter_reset", attempts=self.state.reconnect_attempts)
        self.state.reconnect_attempts = 0

    def cancel(self) -> None:
        task = self._task
        self._task = None
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()
        self.state.reconnect_scheduled = False
