# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Item matching by registry name or display name."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from craftbot.client.base import Item


class ItemMatcher:
    """Matches an item by exact name or a case-insensitive display pattern."""

    def __init__(self, name: str, display_pattern: str | None = None) -> None:
        self.name = name
        self._display_re = re.compile(display_pattern, re.IGNORECASE) if display_pattern else None

    def matches(self, item: Item | None) -> bool:
        if item is None:
            return False
        if item.name == self.name:
            return True
        return self._display_re is not None and bool(self._display_re.search(item.display_name or ""))

    def find_slot(self, slots: Sequence[Item | None]) -> int | None:
        """Index of the first matching slot, or None."""
        for index, item in enumerate(slots):
            if self.matches(item):
                return index
        return None

    def count(self, items: Iterable[Item | None]) -> int:
        return sum(item.count for item in items if item is not None and self.matches(item))
