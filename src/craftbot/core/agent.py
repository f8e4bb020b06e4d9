# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""One automated player.

An agent outlives its connections. The game client, the sell engine, the menu
driver and the chat assistant are rebuilt on every reconnect; the state
record, the join sequencer and the reconnect supervisor are kept.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from craftbot.assistant.assistant import ChatAssistant
from craftbot.client.bridge import BridgeClient
from craftbot.core.join import JoinSequencer
from craftbot.core.reconnect import ReconnectSupervisor, terminate_process
from craftbot.core.state import AgentState, Zone
from craftbot.core.zones import ZoneDetector
from craftbot.errors import ClientError
from craftbot.llm.exceptions import LLMError
from craftbot.llm.providers import get_provider
from craftbot.logging import get_logger
from craftbot.shop.balance import BalanceTracker
from craftbot.shop.menus import MenuDriver
from craftbot.shop.sell import SellEngine

if TYPE_CHECKING:
    from collections.abc import Callable

    from craftbot.client.base import ChatLine, GameClient
    from craftbot.config import AccountConfig, BotConfig
    from craftbot.core.reconnect import Disposer
    from craftbot.llm.base import LLMProvider
    from craftbot.llm.config import LLMConfig

logger = get_logger(__name__)

DEFAULT_PASSWORD = "password"


class Agent:
    """Drives one account: join, sell, pay out, reconnect."""

    def __init__(
        self,
        account: AccountConfig,
        config: BotConfig,
        *,
        password: str | None = None,
        client_factory: Callable[[AccountConfig], GameClient] | None = None,
        provider_factory: Callable[[LLMConfig], LLMProvider] = get_provider,
        on_exhausted: Callable[[int], object] = terminate_process,
    ) -> None:
        self.account = account
        self.config = config
        self.id = account.username
        self.state = AgentState(agent_id=self.id)
        self.log = logger.bind(agent=self.id)
        self._client_factory = client_factory or self._bridge_client
        self._provider_factory = provider_factory

        self.detector = ZoneDetector(config.zones)
        self.join = JoinSequencer(
            self.state,
            config.join,
            config.commands,
            password=account.password or password or DEFAULT_PASSWORD,
            send=self.send_command,
            is_ready=self.is_ready,
        )
        self.reconnect = ReconnectSupervisor(
            self.state,
            config.reconnect,
            reconnect=self._reconnect,
            on_exhausted=on_exhausted,
        )

        self.client: GameClient | None = None
        self.balance: BalanceTracker | None = None
        self.sell_engine: SellEngine | None = None
        self.menu_driver: MenuDriver | None = None
        self.assistant: ChatAssistant | None = None
        self.assistant_enabled = False
        self._provider: LLMProvider | None = None
        self._stopping = False

    def _bridge_client(self, account: AccountConfig) -> GameClient:
        return BridgeClient(account.username, self.config.connection)

    # -- lifecycle ---------------------------------------------------------

    async def start(self) -> None:
        self._stopping = False
        self.log.info("agent_starting", server=self.config.connection.server_host)
        client = self._build_connection()
        self.join.start_watchdog()
        if self.account.assistant_on_start:
            self.enable_assistant("account-config")
        await self._connect(client)

    async def stop(self) -> None:
        self._stopping = True
        self.log.info("agent_stopping")
        self.reconnect.cancel()
        await self.join.stop_watchdog()
        self._teardown()
        if self.client is not None:
            await self.client.disconnect()
        if self._provider is not None:
            await self._provider.close()
            self._provider = None

    def is_ready(self) -> bool:
        return self.client is not None and self.client.is_ready()

    def send_command(self, line: str) -> bool:
        """Send a chat command on the current connection; False if it could not go out."""
        if self.client is None:
            self.log.warning("command_dropped_no_client", command=line)
            return False
        try:
            self.client.send_command(line)
        except ClientError as e:
            self.log.warning("command_failed", command=line, error=str(e))
            return False
        self.log.debug("command_sent", command=line)
        return True

    # -- connection --------------------------------------------------------

    def _build_connection(self) -> GameClient:
        client = self._client_factory(self.account)
        self.client = client
        self.state.reset_connection()
        send = self._sender_for(client)

        self.balance = BalanceTracker(
            client,
            send,
            command=self.config.commands.balance,
            timeout_s=self.config.shop.balance_timeout_s,
        )
        self.sell_engine = SellEngine(
            client, self.state, self.config.shop, self.config.commands, self.balance, send
        )
        self.menu_driver = MenuDriver(
            client, self.config.shop, self.config.commands, self.balance, send
        )
        if self.assistant_enabled:
            self._attach_assistant()

        events = client.events
        events.on("login", self._on_login)
        events.on("spawn", self._on_spawn)
        events.on("kicked", self._on_kicked)
        events.on("end", self._on_end)
        events.on("error", self._on_error)
        events.on("message", self._on_message)
        return client

    def _sender_for(self, client: GameClient) -> Callable[[str], bool]:
        """Send hook for components bound to ``client``; drops lines once it is superseded."""

        def send(line: str) -> bool:
            if client is not self.client:
                self.log.warning("command_dropped_stale_connection", command=line)
                return False
            return self.send_command(line)

        return send

    async def _connect(self, client: GameClient) -> None:
        try:
            await client.connect()
        except (ConnectionError, ClientError) as e:
            self.log.warning("connect_failed", error=str(e))
            self._on_end(f"connect failed: {e}")

    async def _reconnect(self) -> None:
        if self._stopping:
            return
        client = self._build_connection()
        await self._connect(client)

    def _disposers(self) -> list[Disposer]:
        disposers: list[Disposer] = []
        if self.sell_engine is not None:
            disposers.append(("sell_engine", self.sell_engine.dispose))
        if self.menu_driver is not None:
            disposers.append(("menu_driver", self.menu_driver.dispose))
        if self.assistant is not None:
            disposers.append(("assistant", self.assistant.dispose))
        disposers.append(("join_timers", self.join.cancel_pending))
        if self.client is not None:
            disposers.append(("client_events", self.client.events.clear))
        return disposers

    def _teardown(self) -> None:
        for name, dispose in self._disposers():
            try:
                dispose()
            except Exception:
                self.log.exception("dispose_failed", component=name)
        self.sell_engine = None
        self.menu_driver = None
        self.assistant = None

    # -- client events -----------------------------------------------------

    def _on_login(self) -> None:
        self.log.info("logged_in")
        self.state.session_continued = False
        self.reconnect.on_login()

    def _on_spawn(self) -> None:
        self.log.info("spawned", zone=self.state.zone.value)

    def _on_kicked(self, reason: object, logged_in: bool) -> None:
        self.log.warning("kicked", reason=str(reason), logged_in=logged_in)

    def _on_error(self, error: BaseException) -> None:
        self.log.error("client_error", error=str(error))

    def _on_end(self, reason: str) -> None:
        if self._stopping:
            return
        self.log.warning("disconnected", reason=reason, zone=self.state.zone.value)
        disposers = self._disposers()
        self.sell_engine = None
        self.menu_driver = None
        self.assistant = None
        self.reconnect.handle_disconnect(reason, disposers)

    def _on_message(self, line: ChatLine) -> None:
        self.handle_chat_text(line.text)

    # -- zones -------------------------------------------------------------

    def handle_chat_text(self, text: str) -> None:
        detection = self.detector.classify(text)
        if detection.session_continued:
            self._on_session_continued()
        if detection.zone is None:
            return
        if detection.zone == self.state.zone:
            self.log.debug("zone_redetected", zone=detection.zone.value)
            return
        self._on_zone_change(detection.zone)

    def _on_session_continued(self) -> None:
        self.state.session_continued = True
        self.log.info("session_continued", zone=self.state.zone.value)
        if self.state.zone == Zone.LOBBY:
            self.join.on_session_continued()

    def _on_zone_change(self, zone: Zone) -> None:
        previous = self.state.zone
        self.state.zone = zone
        self.log.info("zone_changed", previous=previous.value, zone=zone.value)

        if self.sell_engine is not None:
            self.sell_engine.handle_zone_change(zone)

        if zone == Zone.SURVIVAL:
            self.join.reset_backoff()
            self.send_command(self.account.home_command)
        elif zone == Zone.LOBBY:
            self.join.on_lobby_entered()

    # -- assistant ---------------------------------------------------------

    def enable_assistant(self, reason: str = "manual") -> bool:
        """Turn the chat assistant on. Returns True if it is now attached."""
        if not self.account.allow_assistant:
            self.log.info("assistant_not_allowed", reason=reason)
            return False
        if self.assistant_enabled and self.assistant is not None:
            return True
        self.assistant_enabled = True
        self.log.info("assistant_enabled", reason=reason)
        self._attach_assistant()
        return self.assistant is not None

    def disable_assistant(self, reason: str = "manual") -> None:
        if not self.assistant_enabled:
            return
        self.assistant_enabled = False
        self.log.info("assistant_disabled", reason=reason)
        if self.assistant is not None:
            self.assistant.dispose()
            self.assistant = None

    def _attach_assistant(self) -> None:
        if self.client is None or self.assistant is not None:
            return
        if self._provider is None:
            try:
                self._provider = self._provider_factory(self.config.assistant.llm)
            except LLMError as e:
                self.log.warning("assistant_unavailable", error=str(e))
                return
        self.assistant = ChatAssistant(
            self.client, self._provider, self.config.assistant, self._sender_for(self.client)
        )
