# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""LLM-backed replies to chat lines addressed to the agent."""

from __future__ import annotations

import asyncio
from collections import deque
from typing import TYPE_CHECKING

from craftbot.assistant.chat import extract_user_prompt, flatten_chat_message
from craftbot.assistant.prompt import build_prompt
from craftbot.llm.exceptions import LLMError
from craftbot.llm.types import CompletionRequest
from craftbot.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

    from craftbot.assistant.chat import AddressedPrompt
    from craftbot.client.base import ChatLine, GameClient
    from craftbot.config import AssistantConfig
    from craftbot.llm.base import LLMProvider

logger = get_logger(__name__)


class ChatAssistant:
    """Listens to chat on one connection and answers lines addressed to the agent.

    Only one generation runs at a time. Lines that arrive meanwhile still go
    into the history but are not answered.
    """

    def __init__(
        self,
        client: GameClient,
        provider: LLMProvider,
        config: AssistantConfig,
        send: Callable[[str], bool],
    ) -> None:
        self.client = client
        self.provider = provider
        self.config = config
        self._send = send
        self.history: deque[str] = deque(maxlen=config.history_limit)
        self.is_processing = False
        self._disposed = False
        self.log = logger.bind(agent=client.username)
        client.events.on("message", self.handle_message)
        self.log.info("assistant_attached", provider=provider.name)

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        self.client.events.off("message", self.handle_message)
        self.log.info("assistant_detached")

    async def handle_message(self, line: ChatLine) -> None:
        flat = flatten_chat_message(line)
        if not flat.text:
            return
        self.history.append(f"{flat.sender}: {flat.text}" if flat.sender else flat.text)

        if self.is_processing:
            return
        addressed = extract_user_prompt(flat.text, flat.sender, self.client.username)
        if addressed is None:
            return

        self.is_processing = True
        try:
            reply = await self.generate_reply(addressed)
            if reply:
                await self.send_reply(reply)
        finally:
            self.is_processing = False

    async def generate_reply(self, addressed: AddressedPrompt) -> str | None:
        llm = self.config.llm
        request = CompletionRequest(
            prompt=build_prompt(
                self.config.persona,
                self.client.username,
                self.history,
                addressed.from_player,
                addressed.prompt,
            ),
            model=llm.get_model(),
            temperature=llm.temperature,
            max_tokens=llm.max_tokens,
        )
        try:
            response = await self.provider.complete(request)
        except LLMError as e:
            self.log.warning("assistant_generation_failed", error=str(e), error_type=type(e).__name__)
            return None
        return response.text.strip() or None

    async def send_reply(self, text: str) -> None:
        lines = [line.strip() for line in text.splitlines() if line.strip()]
        for line in lines[: self.config.max_reply_lines]:
            if self._disposed:
                return
            self._send(line[: self.config.max_line_length])
            await asyncio.sleep(self.config.line_delay_s)
