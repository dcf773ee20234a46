# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: getall
"""
Configuration for the getall logging system.

Settings are loaded from ``GETALL_LOGGING_*`` environment variables. File
output is enabled by setting ``GETALL_LOGGING_FILE_PATH``.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogLevel(str, Enum):
    """Levels accepted by ``GETALL_LOGGING_LEVEL``."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    def to_stdlib_level(self) -> int:
        return logging.getLevelNamesMapping()[self.value]

    @classmethod
    def from_string(cls, value: str) -> LogLevel:
        """Parse a level name case-insensitively; ValueError if unknown."""
        try:
            return cls(value.upper())
        except ValueError:
            raise ValueError(f"Invalid log level: {value}") from None


class LoggingSettings(BaseSettings):
    """Settings for ``GetAllLogger`` and ``register_logging``."""

    model_config = SettingsConfigDict(
        env_prefix="GETALL_LOGGING_",
        extra="ignore",
        case_sensitive=False,
    )

    level: LogLevel = Field(default=LogLevel.INFO, description="Log level")
    json_format: bool = Field(default=False, description="Render records as JSON")
    include_timestamp: bool = Field(default=True, description="Prefix a timestamp")
    include_level: bool = Field(default=True, description="Include the level name")
    console_enabled: bool = Field(default=True, description="Write to stdout")
    file_path: str | None = Field(default=None, description="Also write to this file")

    @field_validator("level", mode="before")
    @classmethod
    def parse_level(cls, v: Any) -> Any:
        if isinstance(v, str) and not isinstance(v, LogLevel):
            return LogLevel.from_string(v)
        return v
