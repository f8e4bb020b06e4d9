# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""JSON-lines client for an external protocol bridge.

The bridge is a sidecar process that owns the real game connection and
relays it as one JSON object per line over TCP. Inbound objects carry an
``event`` key, outbound objects an ``op`` key. Requests that need an answer
carry an ``id`` and complete when the matching ``ack`` arrives.
"""

from __future__ import annotations

import asyncio
import contextlib
import itertools
import json
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from craftbot.client.base import ChatLine, ClickKind, GameClient, Item, Menu
from craftbot.errors import BridgeError, ClientError, NotConnectedError
from craftbot.logging import get_logger

if TYPE_CHECKING:
    from asyncio import StreamReader, StreamWriter

    from craftbot.config import ConnectionConfig

logger = get_logger(__name__)

MAX_LINE_BYTES = 1 << 20


class BridgeClient(GameClient):
    """Game client speaking the bridge JSON-lines protocol."""

    def __init__(self, username: str, config: ConnectionConfig) -> None:
        super().__init__(username)
        self.config = config
        self._reader: StreamReader | None = None
        self._writer: StreamWriter | None = None
        self._reader_task: asyncio.Task[None] | None = None
        self._pending: dict[int, asyncio.Future[None]] = {}
        self._ids = itertools.count(1)
        self._slots: list[Item | None] = []
        self._hotbar = 0
        self._ready = False
        self._ended = False
        self._end_reason: str | None = None

    async def connect(self) -> None:
        """Connect to the bridge and ask it to join the game server.

        Raises:
            ConnectionError: If the bridge is unreachable
        """
        try:
            self._reader, self._writer = await asyncio.wait_for(
                asyncio.open_connection(self.config.host, self.config.port, limit=MAX_LINE_BYTES),
                timeout=self.config.connect_timeout_s,
            )
        except (OSError, TimeoutError) as e:
            raise ConnectionError(f"Failed to connect to bridge at {self.config.host}:{self.config.port}") from e

        self._ended = False
        self._write(
            {
                "op": "join",
                "username": self.username,
                "host": self.config.server_host,
                "port": self.config.server_port,
                "version": self.config.version,
                "online": self.config.online,
            }
        )
        self._reader_task = asyncio.create_task(self._reader_loop())
        logger.info("bridge_connected", host=self.config.host, port=self.config.port, username=self.username)

    async def disconnect(self) -> None:
        task = self._reader_task
        self._reader_task = None
        if task is not None and task is not asyncio.current_task():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        await self._close("client_disconnect")

    def is_connected(self) -> bool:
        return self._writer is not None and not self._writer.is_closing()

    def is_ready(self) -> bool:
        return self.is_connected() and self._ready

    def send_command(self, line: str) -> None:
        self._write({"op": "chat", "text": line})

    def inventory_slots(self) -> list[Item | None]:
        return list(self._slots)

    async def move_slot_item(self, source: int, destination: int) -> None:
        await self._request("move_slot", src=source, dst=destination)

    async def click_slot(self, menu: Menu, slot: int, kind: ClickKind) -> None:
        await self._request("click", window_id=menu.window_id, slot=slot, button=kind.value)

    def set_hotbar_slot(self, index: int) -> None:
        self._write({"op": "set_hotbar", "slot": index})
        self._hotbar = index

    @property
    def hotbar_slot(self) -> int:
        return self._hotbar

    def _write(self, payload: dict[str, Any]) -> None:
        if not self.is_connected():
            raise NotConnectedError(f"{self.username}: bridge not connected")
        assert self._writer is not None
        data = json.dumps(payload, ensure_ascii=False) + "\n"
        self._writer.write(data.encode("utf-8"))

    async def _request(self, op: str, **fields: Any) -> None:
        request_id = next(self._ids)
        future: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._pending[request_id] = future
        try:
            self._write({"op": op, "id": request_id, **fields})
            assert self._writer is not None
            await self._writer.drain()
            await asyncio.wait_for(future, timeout=self.config.request_timeout_s)
        except TimeoutError as e:
            raise BridgeError(f"{op} #{request_id} timed out after {self.config.request_timeout_s}s") from e
        except (ConnectionError, OSError) as e:
            raise NotConnectedError(f"{op} #{request_id} failed: {e}") from e
        finally:
            self._pending.pop(request_id, None)

    async def _reader_loop(self) -> None:
        reason = "connection closed"
        try:
            assert self._reader is not None
            while True:
                try:
                    line = await self._reader.readline()
                except (ConnectionError, OSError, ValueError) as e:
                    reason = f"read failed: {e}"
                    break
                if not line:
                    break
                try:
                    message = json.loads(line)
                except ValueError:
                    logger.warning("bridge_invalid_line", line=line[:200])
                    continue
                if isinstance(message, dict):
                    self._dispatch(message)
        except asyncio.CancelledError:
            return
        await self._close(reason)

    def _dispatch(self, message: dict[str, Any]) -> None:
        event = message.get("event")
        try:
            if event == "message":
                self.events.emit("message", ChatLine(text=str(message.get("text", "")), component=message.get("json")))
            elif event == "menu_open":
                self.events.emit("menu_open", Menu.model_validate(message))
            elif event == "inventory":
                self._slots = _parse_slots(message.get("slots"))
            elif event == "hotbar":
                self._hotbar = int(message.get("slot", 0))
            elif event == "ack":
                self._resolve(message)
            elif event == "login":
                self.events.emit("login")
            elif event == "spawn":
                self._ready = True
                self.events.emit("spawn")
            elif event == "kicked":
                self.events.emit("kicked", message.get("reason"), bool(message.get("logged_in", False)))
            elif event == "error":
                self.events.emit("error", ClientError(str(message.get("message", "unknown bridge error"))))
            elif event == "end":
                self._ready = False
                # The socket closing right after delivers the single ``end`` event.
                self._end_reason = str(message.get("reason", "server_end"))
            else:
                logger.debug("bridge_unknown_event", event_name=event)
        except (ValidationError, TypeError, ValueError) as e:
            logger.warning("bridge_malformed_event", event_name=event, error=str(e))

    def _resolve(self, message: dict[str, Any]) -> None:
        future = self._pending.get(int(message.get("id", -1)))
        if future is None or future.done():
            return
        if message.get("ok", False):
            future.set_result(None)
        else:
            future.set_exception(BridgeError(str(message.get("error", "request rejected"))))

    async def _close(self, reason: str) -> None:
        if self._ended:
            return
        self._ended = True
        self._ready = False
        reason = self._end_reason or reason
        self._end_reason = None

        for future in self._pending.values():
            if not future.done():
                future.set_exception(NotConnectedError(f"connection ended: {reason}"))
        self._pending.clear()

        writer = self._writer
        self._writer = None
        self._reader = None
        if writer is not None:
            writer.close()
            with contextlib.suppress(ConnectionError, OSError, RuntimeError):
                await writer.wait_closed()

        logger.info("bridge_disconnected", username=self.username, reason=reason)
        self.events.emit("end", reason)


def _parse_slots(raw: Any) -> list[Item | None]:
    if not isinstance(raw, list):
        return []
    return [Item.model_validate(entry) if isinstance(entry, dict) else None for entry in raw]
