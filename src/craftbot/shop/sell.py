# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Periodic sell cycle and payout.

While the agent is in the survival zone, every ``interval_s`` the engine
moves each stack of the target item into the staging hotbar slot and sells
it with the sell-hand command, then reports the earnings and pays the whole
balance out to the configured recipient.
"""

from __future__ import annotations

import asyncio
import contextlib
from typing import TYPE_CHECKING

from craftbot.core.state import Zone
from craftbot.errors import ClientError
from craftbot.logging import get_logger
from craftbot.shop.items import ItemMatcher

if TYPE_CHECKING:
    from collections.abc import Callable

    from craftbot.client.base import GameClient
    from craftbot.config import CommandConfig, ShopConfig
    from craftbot.core.state import AgentState
    from craftbot.shop.balance import Balance, BalanceTracker

logger = get_logger(__name__)

SELL_ZONE = Zone.SURVIVAL


def format_earned(before: Balance, after: Balance) -> str:
    """Dollar difference between two balance reads, or ``unknown``."""
    if not (before.known and after.known):
        return "unknown"
    return f"${after.value - before.value:,.2f}"


class SellEngine:
    """Runs the sell loop for one connection."""

    def __init__(
        self,
        client: GameClient,
        state: AgentState,
        shop: ShopConfig,
        commands: CommandConfig,
        balance: BalanceTracker,
        send: Callable[[str], bool],
    ) -> None:
        self.client = client
        self.state = state
        self.shop = shop
        self.commands = commands
        self.balance = balance
        self._send = send
        self.target = ItemMatcher(shop.item_name, shop.display_pattern)
        self._task: asyncio.Task[None] | None = None
        self.log = logger.bind(agent=state.agent_id)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def handle_zone_change(self, zone: Zone) -> None:
        if zone == SELL_ZONE and self.shop.enabled:
            self.start()
        else:
            self.stop()

    def start(self) -> None:
        if self.running:
            return
        self.log.info("sell_loop_started", interval_s=self.shop.interval_s, item=self.shop.item_name)
        self._task = asyncio.create_task(self._loop())

    def stop(self) -> None:
        task = self._task
        self._task = None
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()
            self.log.info("sell_loop_stopped")

    def dispose(self) -> None:
        self.stop()

    async def _loop(self) -> None:
        with contextlib.suppress(asyncio.CancelledError):
            while True:
                await asyncio.sleep(self.shop.interval_s)
                if self.state.zone != SELL_ZONE:
                    continue
                await self.tick()

    async def tick(self) -> bool:
        """Run one sell cycle unless one is already in progress.

        Returns:
            False if the tick was skipped because a cycle was running
        """
        if self.state.is_selling:
            self.log.info("sell_cycle_skipped_busy")
            return False
        self.state.is_selling = True
        try:
            await self.sell_all()
        except Exception:
            self.log.exception("sell_cycle_failed")
        finally:
            self.state.is_selling = False
        return True

    async def sell_all(self) -> None:
        remaining = self.target.count(self.client.inventory_items())
        if remaining <= 0:
            self.log.info("sell_cycle_nothing_to_sell", item=self.shop.item_name)
            return

        self.log.info("sell_cycle_started", item=self.shop.item_name, count=remaining)
        before = await self.balance.query()
        self._select_hotbar()

        stacks = 0
        while remaining > 0:
            slots = self.client.inventory_slots()
            slot = self.target.find_slot(slots)
            if slot is None:
                break
            stack = slots[slot]
            count = stack.count if stack is not None else 0

            if slot != self.shop.staging_slot:
                try:
                    await self.client.move_slot_item(slot, self.shop.staging_slot)
                except ClientError as e:
                    self.log.warning(
                        "sell_move_failed", source=slot, destination=self.shop.staging_slot, error=str(e)
                    )
                    break

            self._select_hotbar()
            self._send(self.commands.sell)
            stacks += 1
            remaining -= count
            await asyncio.sleep(self.shop.settle_delay_s)

        after = await self.balance.query()
        earned = format_earned(before, after)
        self.log.info("sell_cycle_finished", stacks=stacks, earned=earned)
        summary = f"{self.shop.item_label} sold! - Earned: {earned}"
        self._send(self.commands.whisper.format(recipient=self.shop.recipient, message=summary))

        try:
            await self.pay_all()
        except Exception:
            self.log.exception("payout_failed")

    async def pay_all(self) -> bool:
        """Pay the full current balance to the recipient.

        Returns:
            True if a pay command was sent
        """
        balance = await self.balance.query()
        if not balance.known or balance.value <= 0:
            self.log.info("payout_skipped", raw=balance.raw)
            return False
        amount = f"{balance.value:.2f}"
        self.log.info("payout", recipient=self.shop.recipient, amount=amount)
        return self._send(self.commands.pay.format(recipient=self.shop.recipient, amount=amount))

    def _select_hotbar(self) -> None:
        if self.client.hotbar_slot != self.shop.hotbar_index:
            self.client.set_hotbar_slot(self.shop.hotbar_index)
