# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: getall
"""
Settings for capability discovery.

Loads from ``GETALL_*`` environment variables, e.g.
``GETALL_MODULES='["myapp.handlers", "myapp.plugins"]'``.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GetAllSettings(BaseSettings):
    """Which modules to scan for implementations."""

    model_config = SettingsConfigDict(
        env_prefix="GETALL_",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
    )

    modules: list[str] = Field(
        default_factory=list, description="Dotted names of the modules to scan"
    )
    include_submodules: bool = Field(
        default=True, description="Walk the submodules of packages"
    )

    @field_validator("modules", mode="before")
    @classmethod
    def split_modules(cls, v: Any) -> Any:
        """Accept a comma separated string as well as a list."""
        if isinstance(v, str):
            return [part for part in v.split(",")]
        return v

    @field_validator("modules")
    @classmethod
    def validate_modules(cls, v: list[str]) -> list[str]:
        """Reject blank module names."""
        cleaned = [name.strip() for name in v]
        if any(not name for name in cleaned):
            raise ValueError("Module names must not be blank")
        return cleaned

    @classmethod
    def load(cls) -> GetAllSettings:
        """Load settings from environment variables or defaults."""
        return cls()
