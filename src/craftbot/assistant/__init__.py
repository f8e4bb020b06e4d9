# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Optional LLM chat assistant."""

from craftbot.assistant.assistant import ChatAssistant
from craftbot.assistant.chat import AddressedPrompt, FlatMessage, extract_user_prompt, flatten_chat_message

__all__ = [
    "AddressedPrompt",
    "ChatAssistant",
    "FlatMessage",
    "extract_user_prompt",
    "flatten_chat_message",
]
