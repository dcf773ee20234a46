# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: getall

"""
Public API for the getall logging system.

Structured logging on top of the standard library, configured from
``GETALL_LOGGING_*`` environment variables.
"""

from __future__ import annotations

from getall.logging.config import LoggingSettings, LogLevel
from getall.logging.di import register_logging
from getall.logging.logger import GetAllLogger, StructuredFormatter, get_logger
from getall.logging.protocols import LoggerProtocol

__all__ = [
    "GetAllLogger",
    "LogLevel",
    "LoggerProtocol",
    "LoggingSettings",
    "StructuredFormatter",
    "get_logger",
    "register_logging",
]
