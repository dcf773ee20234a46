"""Top-level pytest configuration for getall."""

from __future__ import annotations

import os
from typing import Any

import pytest
import pytest_asyncio

# Import for side effects so the error registry is populated
import getall.di.errors  # noqa: F401
from getall.di import Container
from getall.logging import LoggerProtocol
from getall.resolver import register_resolver

# Configure asyncio to be less verbose
os.environ["PYTHONASYNCIODEBUG"] = "0"

pytest_plugins = [
    "pytest_asyncio",
]


class RecordingLogger:
    """Logger that keeps every record in memory for assertions."""

    def __init__(self) -> None:
        self.records: list[tuple[str, str, dict[str, Any]]] = []

    def _record(self, level: str, msg: str, *args: Any, **kwargs: Any) -> None:
        self.records.append((level, msg % args if args else msg, kwargs))

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._record("debug", msg, *args, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._record("info", msg, *args, **kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._record("warning", msg, *args, **kwargs)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._record("error", msg, *args, **kwargs)

    def critical(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._record("critical", msg, *args, **kwargs)

    def exception(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._record("error", msg, *args, **kwargs)

    def messages(self, level: str | None = None) -> list[str]:
        return [m for lvl, m, _ in self.records if level is None or lvl == level]

    def clear(self) -> None:
        self.records.clear()


@pytest.fixture
def recording_logger() -> RecordingLogger:
    return RecordingLogger()


@pytest_asyncio.fixture
async def container(recording_logger: RecordingLogger):
    """A container with the recording logger registered as ``LoggerProtocol``."""
    c = Container()
    await c.register_instance(LoggerProtocol, recording_logger)
    yield c
    await c.dispose()


@pytest_asyncio.fixture
async def resolver(container: Container):
    """A resolver scanning the ``sample_app`` test package."""
    return await register_resolver(container, ["sample_app"])
