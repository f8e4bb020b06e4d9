# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Sell cycle, payout, balance queries and shop menu handling."""

from craftbot.shop.balance import Balance, BalanceTracker, parse_balance
from craftbot.shop.menus import MenuDriver, MenuKind, classify_menu
from craftbot.shop.sell import SellEngine

__all__ = [
    "Balance",
    "BalanceTracker",
    "MenuDriver",
    "MenuKind",
    "SellEngine",
    "classify_menu",
    "parse_balance",
]
