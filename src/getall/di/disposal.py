"""
Service disposal implementation for the getall DI system.
"""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from getall.di.resolution import _Scope


class DisposalError(Exception):
    """Raised when the container fails to dispose its services."""


class _DisposalManager:
    """Manages service disposal for the container."""

    async def dispose_service(self, service: Any) -> None:
        """Dispose a service if it supports disposal (sync or async ``dispose``)."""
        dispose = getattr(service, "dispose", None)
        if not callable(dispose):
            return
        result = dispose()
        if inspect.isawaitable(result):
            await result

    async def dispose_scopes(self, scopes: list[_Scope], root: _Scope) -> None:
        """Dispose every scope, innermost first, then the root scope."""
        try:
            for scope in reversed(scopes):
                await scope.dispose()
            await root.dispose()
        except Exception as e:
            raise DisposalError(f"Failed to dispose container: {e}") from e
