# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Abstract game client consumed by agents.

The game protocol itself lives outside craftbot. A client adapts it to this
interface: lifecycle and chat events on ``events``, an inventory snapshot,
slot moves and menu clicks, and fire-and-forget chat commands.

Events emitted on ``events``:
    login()                      account accepted by the server
    spawn()                      player entity present in the world
    kicked(reason, logged_in)    server kicked the player
    end(reason)                  connection gone (always emitted once)
    error(exc)                   protocol-level error
    message(ChatLine)            every chat-like line
    menu_open(Menu)              server pushed an interactive menu
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from craftbot.client.events import EventBus


class ClickKind(str, Enum):
    """Slot activation kinds."""

    PRIMARY = "left"
    SECONDARY = "right"


class Item(BaseModel):
    """An item stack in an inventory or menu slot."""

    name: str = ""
    display_name: str = Field(default="", validation_alias=AliasChoices("display_name", "displayName"))
    count: int = 0

    model_config = ConfigDict(extra="ignore")


class Menu(BaseModel):
    """A server-pushed, slot-addressable menu."""

    window_id: int = 0
    title: Any = None
    slots: list[Item | None] = []

    model_config = ConfigDict(extra="ignore")


class ChatLine(BaseModel):
    """One incoming chat-like line."""

    text: str
    component: dict[str, Any] | None = None

    model_config = ConfigDict(extra="ignore")

    def __str__(self) -> str:
        return self.text


class GameClient(ABC):
    """Abstract base for game protocol clients."""

    def __init__(self, username: str) -> None:
        self.username = username
        self.events = EventBus()

    @abstractmethod
    async def connect(self) -> None:
        """Open the connection and start delivering events.

        Raises:
            ConnectionError: If the connection cannot be established
        """

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the connection. Idempotent; emits ``end`` if still open."""

    @abstractmethod
    def is_connected(self) -> bool:
        """True while the transport is open."""

    @abstractmethod
    def is_ready(self) -> bool:
        """True once the player has spawned and commands will be accepted."""

    @abstractmethod
    def send_command(self, line: str) -> None:
        """Send one chat line or command without waiting for any answer.

        Raises:
            NotConnectedError: If the client is not connected
        """

    @abstractmethod
    def inventory_slots(self) -> list[Item | None]:
        """Return the player inventory indexed by window slot."""

    @abstractmethod
    async def move_slot_item(self, source: int, destination: int) -> None:
        """Move a stack between inventory slots.

        Raises:
            ClientError: If the move is rejected or times out
        """

    @abstractmethod
    async def click_slot(self, menu: Menu, slot: int, kind: ClickKind) -> None:
        """Activate a slot in an open menu.

        Raises:
            ClientError: If the click is rejected or times out
        """

    @abstractmethod
    def set_hotbar_slot(self, index: int) -> None:
        """Select the held hotbar slot (0-8)."""

    @property
    @abstractmethod
    def hotbar_slot(self) -> int:
        """Currently selected hotbar index."""

    def inventory_items(self) -> list[Item]:
        return [item for item in self.inventory_slots() if item is not None]
