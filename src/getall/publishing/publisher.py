# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: getall
"""
Publishers that fan a message out to every handler discovered for its type.

Handlers are built and run one at a time, in discovery order. A handler
that cannot be built, or that raises while handling, is logged and the
remaining handlers still run.
"""

from __future__ import annotations

from typing import Any, ClassVar

from getall.logging.protocols import LoggerProtocol
from getall.publishing.handlers import EventHandler, NotificationHandler
from getall.resolver import Resolver
from getall.type_utils import type_name


class HandlerPublisher:
    """Base publisher; subclasses name the generic handler capability."""

    handler_type: ClassVar[Any]

    def __init__(self, resolver: Resolver, logger: LoggerProtocol) -> None:
        self._resolver = resolver
        self._logger = logger

    def capability_for(self, message: Any) -> Any:
        """The handler capability for a message, e.g. ``NotificationHandler[OrderPlaced]``."""
        return self.handler_type[type(message)]

    async def publish(self, message: Any) -> int:
        """
        Send ``message`` to every handler of its type.

        Args:
            message: The notification or event to publish

        Returns:
            The number of handlers that completed without raising
        """
        capability = self.capability_for(message)
        completed = 0
        for handler_type in self._resolver.discover_types(capability):
            try:
                handler = await self._resolver.get_as(capability, handler_type)
                await handler.handle(message)
            except Exception as exc:
                self._logger.error(
                    "Error in handler",
                    handler=type_name(handler_type),
                    message_type=type_name(type(message)),
                    exc_info=exc,
                )
            else:
                completed += 1
        return completed


class NotificationPublisher(HandlerPublisher):
    """Publishes notifications to ``NotificationHandler[T]`` implementations."""

    handler_type = NotificationHandler


class EventPublisher(HandlerPublisher):
    """Publishes events to ``EventHandler[T]`` implementations."""

    handler_type = EventHandler
