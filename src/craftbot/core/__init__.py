# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Agent state machine: zones, join sequencing and reconnects.

``Agent`` and ``FleetManager`` live in ``craftbot.core.agent`` and
``craftbot.core.fleet``; they depend on the shop and assistant packages,
which in turn depend on this package's state types.
"""

from craftbot.core.join import JoinSequencer, join_backoff
from craftbot.core.reconnect import ReconnectSupervisor, terminate_process
from craftbot.core.state import AgentState, Zone
from craftbot.core.zones import ZoneDetection, ZoneDetector

__all__ = [
    "AgentState",
    "JoinSequencer",
    "ReconnectSupervisor",
    "Zone",
    "ZoneDetection",
    "ZoneDetector",
    "join_backoff",
    "terminate_process",
]
