# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: getall
"""
Logger implementation for getall.

This module provides the default logger implementation based on Python's
standard logging module, enhanced with structured logging capabilities.
"""

from __future__ import annotations

import contextlib
import datetime
import enum
import json
import logging
import sys
import uuid
from contextvars import ContextVar
from logging import StreamHandler
from typing import TYPE_CHECKING, Any

from getall.logging.config import LoggingSettings, LogLevel
from getall.type_utils import type_name

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Generator

    from getall.logging.protocols import LoggerProtocol

# Context variable for storing log context data
_log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})

# Attribute used to carry structured context on a LogRecord
CONTEXT_ATTR = "getall_context"


class GetAllJsonEncoder(json.JSONEncoder):
    """JSON encoder with string fallbacks for unserializable objects."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, (datetime.datetime, datetime.date)):
            return obj.isoformat()
        if isinstance(obj, uuid.UUID):
            return str(obj)
        if isinstance(obj, enum.Enum):
            return obj.value
        if isinstance(obj, type):
            return type_name(obj)
        if hasattr(obj, "model_dump"):  # Pydantic v2 models
            return obj.model_dump()
        if isinstance(obj, BaseException):
            to_dict = getattr(obj, "to_dict", None)
            if callable(to_dict):
                return to_dict()
            return str(obj)
        return str(obj)


class StructuredFormatter(logging.Formatter):
    """Formatter that supports structured logging with context data."""

    def __init__(
        self,
        json_format: bool = False,
        include_timestamp: bool = True,
        include_level: bool = True,
    ) -> None:
        """Initialize a structured formatter.

        Args:
            json_format: Whether to format logs as JSON
            include_timestamp: Whether to include timestamps in logs
            include_level: Whether to include log level in logs
        """
        self.json_format = json_format
        self.include_timestamp = include_timestamp
        self.include_level = include_level

        fmt = "%(message)s"
        if include_timestamp:
            fmt = "%(asctime)s " + fmt
        if include_level and not json_format:
            fmt = fmt + " [%(levelname)s]"

        super().__init__(fmt=fmt, datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record with structured data.

        Args:
            record: The log record to format

        Returns:
            Formatted log string
        """
        extra: dict[str, Any] = dict(_log_context.get())
        extra.update(getattr(record, CONTEXT_ATTR, None) or {})

        if self.json_format:
            return self._format_json(record, extra)
        message = super().format(record)
        return self._format_text(message, extra)

    def _format_json(self, record: logging.LogRecord, extra: dict[str, Any]) -> str:
        log_data: dict[str, Any] = {
            "message": record.getMessage(),
            "name": record.name,
            **extra,
        }
        if self.include_level:
            log_data["level"] = record.levelname
        if self.include_timestamp:
            log_data["timestamp"] = self.formatTime(record, self.datefmt)
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
            log_data["error"] = str(record.exc_info[1])

        return json.dumps(log_data, cls=GetAllJsonEncoder, ensure_ascii=False)

    def _format_text(self, message: str, extra: dict[str, Any]) -> str:
        if not extra:
            return message

        ctx_str = " ".join(f"{k}={self._format_value(v)}" for k, v in extra.items())
        return f"{message} {ctx_str}"

    def _format_value(self, value: Any) -> str:
        """Format a value for text output."""
        if isinstance(value, str):
            # Quote strings that contain spaces
            if " " in value:
                return f'"{value}"'
            return value
        if isinstance(value, datetime.datetime | datetime.date):
            return value.isoformat()
        if isinstance(value, uuid.UUID):
            return str(value)
        if isinstance(value, enum.Enum):
            return value.name
        if isinstance(value, type):
            return type_name(value)
        try:
            return json.dumps(value, cls=GetAllJsonEncoder)
        except (TypeError, ValueError):
            return str(value)


class GetAllLogger:
    """Default logger implementation for getall.

    Wraps a standard library logger; keyword arguments become structured
    context rendered by ``StructuredFormatter``.
    """

    def __init__(
        self,
        name: str,
        level: str | None = None,
        settings: LoggingSettings | None = None,
    ) -> None:
        """
        Initialize a new logger.

        Args:
            name: Logger name
            level: Log level override, defaults to the settings level
            settings: Optional logger settings (loads from environment if None)
        """
        self.name = name
        self._settings = settings or LoggingSettings()
        self._logger = logging.getLogger(name)
        self._configure(level or self._settings.level)

        # Bound context values for this logger instance
        self._bound_context: dict[str, Any] = {}
        self._context: dict[str, Any] = {}

    def _configure(self, level: str) -> None:
        self._logger.setLevel(LogLevel.from_string(level).to_stdlib_level())

        for handler in list(self._logger.handlers):
            self._logger.removeHandler(handler)

        formatter = StructuredFormatter(
            json_format=self._settings.json_format,
            include_timestamp=self._settings.include_timestamp,
            include_level=self._settings.include_level,
        )

        if self._settings.console_enabled:
            console = StreamHandler(sys.stdout)
            console.setFormatter(formatter)
            self._logger.addHandler(console)

        if self._settings.file_path:
            file_handler = logging.FileHandler(self._settings.file_path)
            file_handler.setFormatter(formatter)
            self._logger.addHandler(file_handler)

        # Keep records from being emitted twice through the root logger
        self._logger.propagate = not self._logger.handlers

    def _log(self, level: int, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log a message with the given level and context.

        Args:
            level: Standard library log level
            msg: Message to log
            *args: %-style message arguments
            **kwargs: Additional context values; ``exc_info`` and
                ``stack_info`` are passed through to the standard logger
        """
        exc_info = kwargs.pop("exc_info", None)
        stack_info = kwargs.pop("stack_info", False)

        combined_context = {**self._bound_context, **self._context, **kwargs}

        self._logger.log(
            level,
            msg,
            *args,
            exc_info=exc_info,
            stack_info=stack_info,
            stacklevel=3,
            extra={CONTEXT_ATTR: combined_context},
        )

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.ERROR, msg, *args, **kwargs)

    def critical(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.CRITICAL, msg, *args, **kwargs)

    def exception(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log an error message with the active exception's traceback."""
        kwargs.setdefault("exc_info", True)
        self._log(logging.ERROR, msg, *args, **kwargs)

    def set_level(self, level: LogLevel) -> None:
        """Set the logger's level."""
        self._logger.setLevel(level.to_stdlib_level())

    def is_enabled_for(self, level: LogLevel) -> bool:
        return self._logger.isEnabledFor(level.to_stdlib_level())

    @contextlib.contextmanager
    def context(self, **kwargs: Any) -> Generator[None]:
        """
        Context manager for adding contextual information to log messages.

        Args:
            **kwargs: Context key-value pairs to add to log messages
        """
        original_context = self._context.copy()
        self._context.update(kwargs)
        try:
            yield
        finally:
            self._context = original_context

    @contextlib.asynccontextmanager
    async def async_context(self, **kwargs: Any) -> AsyncGenerator[None]:
        """Add context information to all logs within this async context.

        The context lives in a context variable, so it is visible to every
        logger used by the current task and isolated from other tasks.

        Args:
            **kwargs: Context key-value pairs
        """
        token = _log_context.set({**_log_context.get(), **kwargs})
        try:
            yield
        finally:
            _log_context.reset(token)

    def bind(self, **kwargs: Any) -> GetAllLogger:
        """Create a new logger with bound context values.

        Args:
            **kwargs: Context values to bind

        Returns:
            New logger instance with bound context
        """
        logger = GetAllLogger.__new__(GetAllLogger)
        logger.name = self.name
        logger._settings = self._settings
        logger._logger = self._logger
        logger._bound_context = {**self._bound_context, **kwargs}
        logger._context = {}
        return logger


def get_logger(
    name: str,
    level: LogLevel | None = None,
    settings: LoggingSettings | None = None,
) -> LoggerProtocol:
    """Get a logger for the specified name.

    Args:
        name: Logger name (typically __name__)
        level: Optional log level override
        settings: Optional settings, loaded from the environment if omitted

    Returns:
        Configured logger instance
    """
    return GetAllLogger(
        name,
        level=level.value if level is not None else None,
        settings=settings,
    )
