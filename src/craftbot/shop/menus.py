# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Reactions to server-pushed shop menus.

Two menus matter: the category listing, where the target item is
right-clicked to open its sell screen, and the sell confirmation, where the
ender chest is left-clicked to confirm. Everything else is ignored.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import TYPE_CHECKING

from craftbot.client.base import ClickKind
from craftbot.client.text import flatten_title
from craftbot.errors import ClientError
from craftbot.logging import get_logger
from craftbot.shop.items import ItemMatcher

if TYPE_CHECKING:
    from collections.abc import Callable

    from craftbot.client.base import ChatLine, GameClient, Menu
    from craftbot.config import CommandConfig, MenuConfig, ShopConfig
    from craftbot.shop.balance import BalanceTracker

logger = get_logger(__name__)


class MenuKind(str, Enum):
    LISTING = "listing"
    SELL_CONFIRM = "sell_confirm"
    UNRECOGNIZED = "unrecognized"


def classify_menu(title: str, config: MenuConfig) -> MenuKind:
    """Classify a flattened menu title.

    Listing titles must match exactly; confirmation titles match on any
    configured substring.
    """
    if title in config.listing_titles:
        return MenuKind.LISTING
    if any(marker and marker in title for marker in config.confirm_title_markers):
        return MenuKind.SELL_CONFIRM
    return MenuKind.UNRECOGNIZED


class MenuDriver:
    """Clicks through the shop menus as they open."""

    def __init__(
        self,
        client: GameClient,
        shop: ShopConfig,
        commands: CommandConfig,
        balance: BalanceTracker,
        send: Callable[[str], bool],
    ) -> None:
        self.client = client
        self.shop = shop
        self.commands = commands
        self.balance = balance
        self._send = send
        self.target = ItemMatcher(shop.item_name, shop.display_pattern)
        self.confirm = ItemMatcher(shop.menus.confirm_item_name, shop.menus.confirm_display_pattern)
        self.capture_remaining = 0
        self._capturing = False
        self._tasks: set[asyncio.Task[None]] = set()
        self.log = logger.bind(agent=client.username)
        client.events.on("menu_open", self._on_menu_open)

    def dispose(self) -> None:
        """Unsubscribe and cancel menu reactions still in flight."""
        self.client.events.off("menu_open", self._on_menu_open)
        self._stop_capture()
        for task in list(self._tasks):
            if task is not asyncio.current_task():
                task.cancel()
        self._tasks.clear()

    def _on_menu_open(self, menu: Menu) -> None:
        task = asyncio.create_task(self.handle_menu_open(menu))
        self._tasks.add(task)
        task.add_done_callback(self._menu_task_done)

    def _menu_task_done(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            self.log.error("menu_handler_failed", error=repr(task.exception()))

    async def handle_menu_open(self, menu: Menu) -> None:
        title = flatten_title(menu.title)
        kind = classify_menu(title, self.shop.menus)
        self.log.info("menu_opened", title=title, kind=kind.value, window_id=menu.window_id, slots=len(menu.slots))
        if kind == MenuKind.LISTING:
            await self._open_item_sell_screen(menu)
        elif kind == MenuKind.SELL_CONFIRM:
            await self._confirm_sale(menu)

    async def _open_item_sell_screen(self, menu: Menu) -> None:
        slot = self.target.find_slot(menu.slots)
        if slot is None:
            self.log.info("menu_item_missing", item=self.shop.item_name, window_id=menu.window_id)
            return

        self.log.info("menu_click", item=self.shop.item_name, slot=slot, kind=ClickKind.SECONDARY.value)
        try:
            await self.client.click_slot(menu, slot, ClickKind.SECONDARY)
        except ClientError as e:
            self.log.warning("menu_click_failed", item=self.shop.item_name, slot=slot, error=str(e))
            return
        self._start_capture()

    async def _confirm_sale(self, menu: Menu) -> None:
        slot = self.confirm.find_slot(menu.slots)
        if slot is None:
            self.log.info("menu_item_missing", item=self.shop.menus.confirm_item_name, window_id=menu.window_id)
            return

        self.log.info("menu_click", item=self.shop.menus.confirm_item_name, slot=slot, kind=ClickKind.PRIMARY.value)
        try:
            await self.client.click_slot(menu, slot, ClickKind.PRIMARY)
        except ClientError as e:
            self.log.warning("menu_click_failed", item=self.shop.menus.confirm_item_name, slot=slot, error=str(e))
            return

        remaining = self.target.count(self.client.inventory_items())
        balance = await self.balance.query()
        item = self.shop.item_name
        message = f"Sold {item}. [{balance.raw}, inventory {item}: {remaining}]"
        self._send(self.commands.whisper.format(recipient=self.shop.recipient, message=message))

    # Diagnostic capture of the lines following a listing click

    def _start_capture(self) -> None:
        self.capture_remaining = self.shop.capture_lines
        if self.capture_remaining > 0 and not self._capturing:
            self.client.events.on("message", self._capture_line)
            self._capturing = True

    def _stop_capture(self) -> None:
        if self._capturing:
            self.client.events.off("message", self._capture_line)
            self._capturing = False
        self.capture_remaining = 0

    def _capture_line(self, line: ChatLine) -> None:
        if self.capture_remaining <= 0:
            self._stop_capture()
            return
        self.capture_remaining -= 1
        self.log.info("menu_capture_line", text=str(line), remaining=self.capture_remaining)
        if self.capture_remaining <= 0:
            self._stop_capture()
