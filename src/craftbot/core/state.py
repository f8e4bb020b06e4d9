# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Per-agent mutable state shared by the agent's components."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Zone(str, Enum):
    """Server areas an agent can occupy."""

    UNKNOWN = "unknown"
    LOBBY = "lobby"
    SURVIVAL = "survival"


@dataclass
class AgentState:
    """Single owned state record of one agent.

    The record survives reconnects. Only ``reset_connection`` touches it when
    a new connection is built.
    """

    agent_id: str
    zone: Zone = Zone.UNKNOWN
    session_continued: bool = False

    # Reconnect backoff (reset by a login event)
    reconnect_attempts: int = 0
    reconnect_scheduled: bool = False

    # Zone-switch backoff (reset by arriving in the target zone)
    join_attempts: int = 0
    join_scheduled: bool = False
    join_duplicates_skipped: int = 0

    # Sell cycle
    is_selling: bool = False

    def reset_connection(self) -> None:
        """Forget everything learned from the previous connection."""
        self.zone = Zone.UNKNOWN
        self.session_continued = False
