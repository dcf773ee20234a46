# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: getall
"""
Handler capabilities for notifications and events.

Implementations subclass the parameterized handler, e.g.
``class SendReceipt(NotificationHandler[OrderPlaced])``, and are discovered
by the resolver through that closed generic base.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

TNotification = TypeVar("TNotification")
TEvent = TypeVar("TEvent")


class NotificationHandler(ABC, Generic[TNotification]):
    """Handles one notification type."""

    @abstractmethod
    async def handle(self, notification: TNotification) -> None:
        """Handle the notification."""


class EventHandler(ABC, Generic[TEvent]):
    """Handles one event type."""

    @abstractmethod
    async def handle(self, event: TEvent) -> None:
        """Handle the event."""
