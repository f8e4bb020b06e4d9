# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Prompt assembly for chat replies."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


def build_prompt(
    persona: Iterable[str],
    username: str,
    history: Iterable[str],
    from_player: str,
    prompt: str,
) -> str:
    """Compose the full completion prompt.

    Persona lines may reference the agent as ``{username}``.
    """
    lines = [line.replace("{username}", username) for line in persona]
    lines.append(f"You are {username}.")
    lines += [
        "",
        "Chat log since the bot joined:",
        "\n".join(history),
        "",
        "The latest player message addressed to you is:",
        from_player,
        "",
        "Respond only to the player message; do not repeat the chat log.",
        f"Player question: {prompt}",
    ]
    return "\n".join(lines)
