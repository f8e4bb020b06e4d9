# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Helpers for flattening server chat components into plain text."""

from __future__ import annotations

import json
from typing import Any


def component_to_plain(component: Any) -> str:
    """Flatten a chat component (``text`` + ``extra``, or ``with``) to plain text."""
    if component is None:
        return ""
    if isinstance(component, str):
        return component
    if isinstance(component, list):
        return "".join(component_to_plain(c) for c in component)
    if isinstance(component, dict):
        parts: list[str] = []
        text = component.get("text")
        if isinstance(text, str):
            parts.append(text)
        extra = component.get("extra")
        if isinstance(extra, list):
            parts.extend(component_to_plain(c) for c in extra)
        if not any(parts):
            with_args = component.get("with")
            if isinstance(with_args, list):
                return " ".join(component_to_plain(c) for c in with_args)
        return "".join(parts)
    return str(component)


def flatten_title(raw: Any) -> str:
    """Normalize a menu title that may be plain text or serialized JSON.

    Examples:
        >>> flatten_title('{"text":"Selling ","extra":[{"text":"(Cactus)"}]}')
        'Selling (Cactus)'
        >>> flatten_title("Plain")
        'Plain'
    """
    if raw is None:
        return "<no title>"
    component: Any = raw
    if isinstance(raw, str):
        try:
            component = json.loads(raw)
        except ValueError:
            return raw
        if not isinstance(component, (dict, list)):
            return raw
    if isinstance(component, (dict, list)):
        flat = component_to_plain(component)
        return flat or json.dumps(component, ensure_ascii=False)
    return str(component)
