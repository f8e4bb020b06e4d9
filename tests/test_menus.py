# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Tests for shop menu handling."""

from __future__ import annotations

import asyncio
import json

import pytest

from craftbot.client.base import ClickKind, Item, Menu
from craftbot.config import CommandConfig, MenuConfig, ShopConfig
from craftbot.shop.balance import BalanceTracker
from craftbot.shop.menus import MenuDriver, MenuKind, classify_menu

from tests.fakes import FakeClient

LISTING_TITLE = "ꜰᴀʀᴍ ᴀɴᴅ ꜰᴏᴏᴅ [ᴘᴀɢᴇ 1/5]"


def make_menu(title: object, slots: dict[int, Item], window_id: int = 7, size: int = 54) -> Menu:
    contents: list[Item | None] = [None] * size
    for index, item in slots.items():
        contents[index] = item
    return Menu(window_id=window_id, title=title, slots=contents)


@pytest.fixture
def driver(fake_client: FakeClient) -> MenuDriver:
    shop = ShopConfig(balance_timeout_s=0.05)
    tracker = BalanceTracker(fake_client, fake_client.send, timeout_s=shop.balance_timeout_s)
    return MenuDriver(fake_client, shop, CommandConfig(), tracker, fake_client.send)


@pytest.mark.parametrize(
    ("title", "kind"),
    [
        (LISTING_TITLE, MenuKind.LISTING),
        ("Selling (Cactus)", MenuKind.SELL_CONFIRM),
        ("Sell cactus x64", MenuKind.SELL_CONFIRM),
        ("ꜰᴀʀᴍ ᴀɴᴅ ꜰᴏᴏᴅ [ᴘᴀɢᴇ 2/5]", MenuKind.UNRECOGNIZED),
        ("Auction House", MenuKind.UNRECOGNIZED),
    ],
)
def test_classify_menu(title: str, kind: MenuKind) -> None:
    assert classify_menu(title, MenuConfig()) == kind


@pytest.mark.asyncio
async def test_listing_right_clicks_target_and_captures_lines(
    fake_client: FakeClient, driver: MenuDriver
) -> None:
    menu = make_menu(LISTING_TITLE, {13: Item(name="cactus", count=1)})

    await driver.handle_menu_open(menu)

    assert fake_client.clicks == [(7, 13, ClickKind.SECONDARY)]
    assert driver.capture_remaining == 5
    for n in range(5):
        fake_client.say(f"line {n}")
    assert driver.capture_remaining == 0
    assert fake_client.events.listener_count("message") == 0


@pytest.mark.asyncio
async def test_listing_without_target_is_benign(fake_client: FakeClient, driver: MenuDriver) -> None:
    await driver.handle_menu_open(make_menu(LISTING_TITLE, {2: Item(name="wheat", count=1)}))
    assert fake_client.clicks == []


@pytest.mark.asyncio
async def test_confirm_left_clicks_ender_chest_and_whispers(fake_client: FakeClient, driver: MenuDriver) -> None:
    fake_client.put(9, "cactus", 10)
    fake_client.replies["/bal"] = ["Balance: $42.00"]
    title = json.dumps({"text": "Selling ", "extra": [{"text": "(Cactus)"}]})
    menu = make_menu(title, {22: Item(name="ender_chest", count=1)}, window_id=8)

    await driver.handle_menu_open(menu)

    assert fake_client.clicks == [(8, 22, ClickKind.PRIMARY)]
    assert fake_client.sent[-1] == "/w zlkm_ Sold cactus. [Balance: $42.00, inventory cactus: 10]"


@pytest.mark.asyncio
async def test_confirm_matches_ender_chest_display_name(fake_client: FakeClient, driver: MenuDriver) -> None:
    menu = make_menu("Selling (Cactus)", {4: Item(name="barrier", display_name="Confirm EnderChest", count=1)})

    await driver.handle_menu_open(menu)

    assert fake_client.clicks == [(7, 4, ClickKind.PRIMARY)]


@pytest.mark.asyncio
async def test_click_failure_is_logged_not_raised(fake_client: FakeClient, driver: MenuDriver) -> None:
    fake_client.fail_clicks = True
    menu = make_menu("Selling (Cactus)", {22: Item(name="ender_chest", count=1)})

    await driver.handle_menu_open(menu)

    assert fake_client.sent == []


@pytest.mark.asyncio
async def test_unrecognized_menu_is_ignored(fake_client: FakeClient, driver: MenuDriver) -> None:
    await driver.handle_menu_open(make_menu("Auction House", {0: Item(name="cactus", count=1)}))
    assert fake_client.clicks == []


@pytest.mark.asyncio
async def test_menu_open_event_and_dispose(fake_client: FakeClient, driver: MenuDriver) -> None:
    fake_client.events.emit("menu_open", make_menu(LISTING_TITLE, {13: Item(name="cactus", count=1)}))
    await asyncio.sleep(0.01)
    assert len(fake_client.clicks) == 1

    driver.dispose()
    assert fake_client.events.listener_count("menu_open") == 0
    assert fake_client.events.listener_count("message") == 0


@pytest.mark.asyncio
async def test_dispose_cancels_confirm_in_flight(fake_client: FakeClient, driver: MenuDriver) -> None:
    fake_client.events.emit("menu_open", make_menu("Selling (Cactus)", {22: Item(name="ender_chest", count=1)}))
    await asyncio.sleep(0.01)
    assert fake_client.sent == ["/bal"]

    driver.dispose()
    await asyncio.sleep(0.1)

    assert fake_client.sent == ["/bal"]
    assert fake_client.events.listener_count("message") == 0
