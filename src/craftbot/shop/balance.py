# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Balance queries over chat."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from craftbot.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

    from craftbot.client.base import GameClient

logger = get_logger(__name__)

_NUMBER_RE = re.compile(r"([0-9][0-9,]*\.?[0-9]*)")

UNKNOWN = "unknown"


@dataclass(frozen=True)
class Balance:
    """A balance reply: the raw line and the parsed amount (NaN if unparsed)."""

    raw: str
    value: float = math.nan

    @property
    def known(self) -> bool:
        return math.isfinite(self.value)


def parse_balance(text: str) -> float:
    """Extract the first numeric token from a balance line.

    Examples:
        >>> parse_balance("Balance: $1,234.56")
        1234.56
        >>> math.isnan(parse_balance("no numbers here"))
        True
    """
    match = _NUMBER_RE.search(text or "")
    if not match:
        return math.nan
    try:
        return float(match.group(1).replace(",", ""))
    except ValueError:
        return math.nan


class BalanceTracker:
    """Issues the balance command and correlates the next incoming line."""

    def __init__(
        self,
        client: GameClient,
        send: Callable[[str], bool],
        command: str = "/bal",
        timeout_s: float = 5.0,
    ) -> None:
        self.client = client
        self._send = send
        self.command = command
        self.timeout_s = timeout_s

    async def query(self) -> Balance:
        """Return the parsed balance, or ``Balance("unknown")`` on timeout."""
        waiter = self.client.events.expect("message")
        if not self._send(self.command):
            waiter.cancel()
            return Balance(UNKNOWN)
        result = await waiter.wait(self.timeout_s)
        if result is None:
            logger.warning("balance_timeout", username=self.client.username, timeout_s=self.timeout_s)
            return Balance(UNKNOWN)
        raw = str(result[0])
        balance = Balance(raw=raw, value=parse_balance(raw))
        logger.debug("balance_read", username=self.client.username, raw=raw, value=balance.value)
        return balance
