# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Game client interface and the bridge implementation."""

from craftbot.client.base import ChatLine, ClickKind, GameClient, Item, Menu
from craftbot.client.bridge import BridgeClient
from craftbot.client.events import EventBus, EventWaiter

__all__ = [
    "BridgeClient",
    "ChatLine",
    "ClickKind",
    "EventBus",
    "EventWaiter",
    "GameClient",
    "Item",
    "Menu",
]
