# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Lobby login and zone-switch sequencing.

The server parks a freshly connected player in the lobby. Getting to the
survival zone takes an optional login command followed by a zone-switch
command, and the switch is often ignored while the login is still being
processed. Requests are therefore deduplicated, paced with a growing backoff
and re-validated when they fire. A watchdog re-runs the sequence if the agent
ever sits outside the target zone for a full period.
"""

from __future__ import annotations

import asyncio
import contextlib
from typing import TYPE_CHECKING

from craftbot.core.state import AgentState, Zone
from craftbot.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

    from craftbot.config import CommandConfig, JoinConfig

logger = get_logger(__name__)

TARGET_ZONE = Zone.SURVIVAL


def join_backoff(attempt: int, step_s: float) -> float:
    """Delay before zone-switch attempt ``attempt`` (1-based).

    The first attempt goes out immediately; later ones wait ``step_s * attempt``.
    """
    if attempt <= 1:
        return 0.0
    return step_s * attempt


class JoinSequencer:
    """Owns the zone-switch timer, the lobby settle timer and the watchdog."""

    def __init__(
        self,
        state: AgentState,
        join: JoinConfig,
        commands: CommandConfig,
        password: str,
        send: Callable[[str], bool],
        is_ready: Callable[[], bool],
    ) -> None:
        self.state = state
        self.join = join
        self.commands = commands
        self._password = password
        self._send = send
        self._is_ready = is_ready
        self._switch_task: asyncio.Task[None] | None = None
        self._settle_task: asyncio.Task[None] | None = None
        self._watchdog_task: asyncio.Task[None] | None = None
        self.pending_delay_s: float | None = None
        self.log = logger.bind(agent=state.agent_id)

    # -- zone switch -------------------------------------------------------

    def request_zone_switch(self, reason: str, min_delay: float = 0.0) -> bool:
        """Schedule one zone-switch command.

        Returns:
            True if a new attempt was scheduled, False if skipped
        """
        if self.state.zone == TARGET_ZONE:
            self.log.debug("zone_switch_skipped_at_target", reason=reason)
            return False
        if self.state.join_scheduled:
            self.state.join_duplicates_skipped += 1
            self.log.debug(
                "zone_switch_duplicate_skipped",
                reason=reason,
                skipped=self.state.join_duplicates_skipped,
            )
            return False

        self.state.join_attempts += 1
        attempt = self.state.join_attempts
        delay = max(join_backoff(attempt, self.join.backoff_step_s), min_delay)
        self.state.join_scheduled = True
        self.pending_delay_s = delay
        self.log.info("zone_switch_scheduled", reason=reason, attempt=attempt, delay_s=delay)
        self._switch_task = asyncio.create_task(self._fire_switch(attempt, delay, reason))
        return True

    async def _fire_switch(self, attempt: int, delay: float, reason: str) -> None:
        try:
            await asyncio.sleep(delay)
        except asyncio.CancelledError:
            return
        self._switch_task = None
        self.state.join_scheduled = False
        self.pending_delay_s = None

        if not self._is_ready():
            self.log.warning("zone_switch_dropped_not_ready", attempt=attempt, reason=reason)
            return
        if self.state.zone == TARGET_ZONE:
            self.log.debug("zone_switch_dropped_at_target", attempt=attempt)
            return

        self.log.info("zone_switch_sending", attempt=attempt, reason=reason, command=self.commands.zone_switch)
        self._send(self.commands.zone_switch)

    def reset_backoff(self) -> None:
        """Arrived at the target zone: forget attempts and drop pending timers."""
        if self.state.join_attempts:
            self.log.info("zone_switch_backoff_reset", attempts=self.state.join_attempts)
        self.cancel_pending()
        self.state.join_attempts = 0

    def cancel_pending(self) -> None:
        """Cancel the pending switch and settle timers. Keeps the attempt count."""
        for task in (self._switch_task, self._settle_task):
            if task is not None and not task.done() and task is not asyncio.current_task():
                task.cancel()
        self._switch_task = None
        self._settle_task = None
        self.state.join_scheduled = False
        self.pending_delay_s = None

    # -- lobby sequence ----------------------------------------------------

    def on_lobby_entered(self) -> None:
        """Arm the settle window so a trailing continued-session line is seen."""
        if self.state.session_continued or self.join.lobby_settle_s <= 0:
            self.run_join_sequence("lobby-entered")
            return
        if self._settle_task is not None and not self._settle_task.done():
            return
        self._settle_task = asyncio.create_task(self._settle_then_join())

    async def _settle_then_join(self) -> None:
        try:
            await asyncio.sleep(self.join.lobby_settle_s)
        except asyncio.CancelledError:
            return
        self._settle_task = None
        if self.state.zone != Zone.LOBBY:
            return
        self.run_join_sequence("lobby-entered")

    def on_session_continued(self) -> None:
        """Continued-session line seen while in the lobby."""
        settle = self._settle_task
        if settle is None or settle.done():
            return
        settle.cancel()
        self._settle_task = None
        self.run_join_sequence("session-continued")

    def run_join_sequence(self, reason: str) -> None:
        if self.state.zone == Zone.LOBBY:
            self._join_from_lobby(reason)
        else:
            self.request_zone_switch(f"{reason}-direct", min_delay=0.0)

    def _join_from_lobby(self, reason: str) -> None:
        if self.state.session_continued:
            self.log.info("lobby_session_continued", reason=reason)
            self.request_zone_switch(f"{reason}-continued", min_delay=self.join.continued_grace_s)
            return

        self.log.info("lobby_login", reason=reason)
        self._send(self.commands.login.format(password=self._password))
        self.request_zone_switch(f"{reason}-new-login", min_delay=self.join.login_grace_s)

    # -- watchdog ----------------------------------------------------------

    def start_watchdog(self) -> None:
        if self._watchdog_task is not None and not self._watchdog_task.done():
            return
        self._watchdog_task = asyncio.create_task(self._watchdog_loop())

    async def stop_watchdog(self) -> None:
        task = self._watchdog_task
        self._watchdog_task = None
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def _watchdog_loop(self) -> None:
        try:
            while True:
                await asyncio.sleep(self.join.watchdog_interval_s)
                try:
                    self.check_target_zone()
                except Exception:
                    self.log.exception("watchdog_check_failed")
        except asyncio.CancelledError:
            return

    def check_target_zone(self) -> None:
        """Re-run the join sequence if the agent is ready but not at the target."""
        if not self._is_ready():
            self.log.debug("watchdog_skipped_not_ready")
            return
        if self.state.zone == TARGET_ZONE:
            return
        self.log.info("watchdog_rejoin", zone=self.state.zone.value)
        self.run_join_sequence("watchdog")
