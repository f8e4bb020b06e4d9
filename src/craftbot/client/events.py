# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Event bus shared by game clients and the components listening to them.

Handlers run in registration order for each emitted event. Coroutine handlers
are scheduled as tasks in the same order, so an agent observes events in the
order they arrived on the connection.
"""

from __future__ import annotations

import asyncio
import inspect
from collections import defaultdict
from collections.abc import Callable
from typing import Any

from craftbot.logging import get_logger

logger = get_logger(__name__)

Handler = Callable[..., Any]


class EventBus:
    """Named-event pub/sub with sync and async handlers."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[Handler]] = defaultdict(list)
        self._tasks: set[asyncio.Task[Any]] = set()

    def on(self, event: str, handler: Handler) -> None:
        self._handlers[event].append(handler)

    def off(self, event: str, handler: Handler) -> None:
        handlers = self._handlers.get(event)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def expect(self, event: str, predicate: Callable[..., bool] | None = None) -> EventWaiter:
        """Start listening for the next matching event before issuing a command.

        Args:
            event: Event name to correlate
            predicate: Optional filter over the event arguments

        Returns:
            Waiter whose wait() yields the event arguments or None on timeout
        """
        return EventWaiter(self, event, predicate)

    def listener_count(self, event: str) -> int:
        return len(self._handlers.get(event, ()))

    def clear(self) -> None:
        """Drop every handler and cancel handler tasks still running."""
        self._handlers.clear()
        for task in list(self._tasks):
            task.cancel()
        self._tasks.clear()

    def emit(self, event: str, *args: Any) -> None:
        """Dispatch an event.

        Handler exceptions are logged and never reach the emitter.
        """
        for handler in list(self._handlers.get(event, ())):
            try:
                result = handler(*args)
            except Exception:
                logger.exception("event_handler_failed", event_name=event)
                continue
            if inspect.isawaitable(result):
                task = asyncio.ensure_future(result)
                self._tasks.add(task)
                task.add_done_callback(self._handler_task_done)

    def _handler_task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("event_handler_task_failed", error=repr(exc))


class EventWaiter:
    """Correlates the next matching event with a bounded wait."""

    def __init__(
        self,
        bus: EventBus,
        event: str,
        predicate: Callable[..., bool] | None = None,
    ) -> None:
        self._bus = bus
        self._event = event
        self._predicate = predicate
        self._future: asyncio.Future[tuple[Any, ...]] = asyncio.get_running_loop().create_future()
        bus.on(event, self._handle)

    def _handle(self, *args: Any) -> None:
        if self._future.done():
            return
        if self._predicate is not None and not self._predicate(*args):
            return
        self._future.set_result(args)
        self.cancel()

    def cancel(self) -> None:
        self._bus.off(self._event, self._handle)

    async def wait(self, timeout_s: float) -> tuple[Any, ...] | None:
        """Return the matched event arguments, or None if nothing matched in time."""
        try:
            return await asyncio.wait_for(self._future, timeout=max(0.0, timeout_s))
        except TimeoutError:
            return None
        finally:
            self.cancel()
