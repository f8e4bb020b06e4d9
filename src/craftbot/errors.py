# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Exception hierarchy for craftbot."""


class CraftbotError(Exception):
    """Base exception for craftbot."""

    pass


class ConfigError(CraftbotError):
    """Configuration file missing or invalid."""

    pass


class ClientError(CraftbotError):
    """Game client operation failed."""

    pass


class NotConnectedError(ClientError):
    """Game client is not connected."""

    pass


class BridgeError(ClientError):
    """The protocol bridge rejected or failed a request."""

    pass
