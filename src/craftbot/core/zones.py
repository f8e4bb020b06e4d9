# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Zone detection from incoming chat lines.

The server never says where the player is; the only signal is the banner
text each zone prints on entry. Classification is a plain substring match.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from craftbot.core.state import Zone

if TYPE_CHECKING:
    from craftbot.config import ZoneConfig


@dataclass(frozen=True)
class ZoneDetection:
    """Result of classifying one line."""

    zone: Zone | None
    session_continued: bool


class ZoneDetector:
    """Stateless classifier over configured zone markers."""

    def __init__(self, config: ZoneConfig) -> None:
        self._markers: list[tuple[str, Zone]] = [
            (config.lobby_marker, Zone.LOBBY),
            (config.survival_marker, Zone.SURVIVAL),
        ]
        self._continued_marker = config.continued_marker

    def detect_zone(self, line: str) -> Zone | None:
        for marker, zone in self._markers:
            if marker and marker in line:
                return zone
        return None

    def is_continued_session(self, line: str) -> bool:
        return bool(self._continued_marker) and self._continued_marker in line

    def classify(self, line: str) -> ZoneDetection:
        if not line:
            return ZoneDetection(zone=None, session_continued=False)
        return ZoneDetection(zone=self.detect_zone(line), session_continued=self.is_continued_session(line))
