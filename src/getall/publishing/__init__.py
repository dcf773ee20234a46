# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: getall

"""
Notification and event publishing built on capability resolution.
"""

from __future__ import annotations

from getall.publishing.handlers import EventHandler, NotificationHandler
from getall.publishing.publisher import (
    EventPublisher,
    HandlerPublisher,
    NotificationPublisher,
)

__all__ = [
    "EventHandler",
    "EventPublisher",
    "HandlerPublisher",
    "NotificationHandler",
    "NotificationPublisher",
]
