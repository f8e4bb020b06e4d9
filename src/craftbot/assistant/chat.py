# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Chat line parsing for the assistant.

Server chat follows ``<prefix> sender » body``. When the raw component is
available the decorated line is rebuilt from its ``with[0].extra`` parts,
otherwise the plain text is used.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from craftbot.client.text import component_to_plain

if TYPE_CHECKING:
    from craftbot.client.base import ChatLine

SENDER_SEPARATOR = "»"

_LEADING_PUNCT = re.compile(r"^[\[\(<]+")
_TRAILING_PUNCT = re.compile(r"[\]\)>:;,]+$")
_ANGLE_PREFIX = re.compile(r"^<[^>]+>\s*")
_RANK_PREFIX = re.compile(r"^\[[^\]]+\]\s*")
_NAME_PUNCT = re.compile(r"^[:,-]\s*")


@dataclass(frozen=True)
class FlatMessage:
    text: str
    sender: str | None = None


@dataclass(frozen=True)
class AddressedPrompt:
    """A line addressed to the agent: the question and the full line it came in."""

    prompt: str
    from_player: str


def _with_args(base: dict[str, Any]) -> list[Any] | None:
    args = base.get("with")
    if isinstance(args, list) and args:
        return args
    nested = base.get("json")
    if isinstance(nested, dict):
        args = nested.get("with")
        if isinstance(args, list) and args:
            return args
    return None


def _decorated_line(base: dict[str, Any]) -> str:
    args = base.get("with")
    if not (isinstance(args, list) and args and isinstance(args[0], dict)):
        return ""
    first = args[0]
    extra = first.get("extra")
    if not (isinstance(extra, list) and extra):
        nested = first.get("json")
        extra = nested.get("extra") if isinstance(nested, dict) else None
    if isinstance(extra, list) and extra:
        return "".join(component_to_plain(part) for part in extra)
    return ""


def flatten_chat_message(line: ChatLine) -> FlatMessage:
    """Split a chat line into its body and (when recognizable) its sender."""
    component = line.component if isinstance(line.component, dict) else None
    base: dict[str, Any] | None = None
    if component is not None:
        unsigned = component.get("unsigned")
        base = unsigned if isinstance(unsigned, dict) else component

    raw = _decorated_line(base) if base is not None else ""
    if not raw:
        raw = line.text.strip()

    text = raw.strip()
    sender: str | None = None

    left, separator, right = raw.partition(SENDER_SEPARATOR)
    if separator:
        left, right = left.strip(), right.strip()
        if right:
            text = right
        tokens = left.split()
        if tokens:
            candidate = _TRAILING_PUNCT.sub("", _LEADING_PUNCT.sub("", tokens[-1]))
            if candidate:
                sender = candidate

    if sender is None and base is not None:
        args = _with_args(base)
        if args:
            name = component_to_plain(args[0]).strip()
            if name and " " not in name:
                sender = name

    return FlatMessage(text=text.strip(), sender=sender)


def _is_join_leave(content: str, sender: str | None) -> bool:
    lowered = content.lower()
    if "(+)" not in lowered and "(-)" not in lowered:
        return False
    return sender is None or "null" in sender.lower()


def extract_user_prompt(text: str, sender: str | None, username: str) -> AddressedPrompt | None:
    """Return the prompt if ``text`` is addressed to ``username``.

    Examples:
        >>> extract_user_prompt("bot_1: what time is it", "steve", "bot_1").prompt
        'what time is it'
        >>> extract_user_prompt("hello everyone", "steve", "bot_1") is None
        True
    """
    name = username.strip()
    if not name:
        return None

    content = _RANK_PREFIX.sub("", _ANGLE_PREFIX.sub("", text))
    if sender:
        lowered = content.lower()
        prefix = sender.lower()
        if lowered.startswith(prefix + ":") or lowered.startswith(prefix + " "):
            content = content[len(sender) + 1 :]
    content = content.strip()

    if not content.lower().startswith(name.lower()):
        return None
    if _is_join_leave(content, sender):
        return None

    remainder = _NAME_PUNCT.sub("", content[len(name) :].strip()).strip()
    if not remainder:
        return None
    return AddressedPrompt(prompt=remainder, from_player=text)
