"""
Service lifetimes and the policies that enforce them.

Each policy decides where an instance is cached: the root scope for
singletons, the active scope for scoped services, nowhere for transients.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from enum import Enum
from typing import TYPE_CHECKING, Any, Final

from getall.di.errors import ScopeError

if TYPE_CHECKING:
    from getall.di.resolution import _Scope

ServiceBuilder = Callable[[], Awaitable[Any]]


class ServiceLifetime(str, Enum):
    """Lifetime of a registered service."""

    SINGLETON = "singleton"
    SCOPED = "scoped"
    TRANSIENT = "transient"


class SingletonPolicy:
    """One instance per container, cached in the root scope."""

    async def get_instance(
        self, root: _Scope, scope: _Scope | None, key: Any, factory: ServiceBuilder
    ) -> Any:
        if key in root._services:
            return root._services[key]
        instance = await factory()
        # Another task may have finished first; keep the first instance
        return root._services.setdefault(key, instance)


class ScopedPolicy:
    """One instance per scope; resolving outside a scope is an error."""

    async def get_instance(
        self, root: _Scope, scope: _Scope | None, key: Any, factory: ServiceBuilder
    ) -> Any:
        if scope is None or scope is root:
            raise ScopeError.outside_scope(key)
        if key in scope._services:
            return scope._services[key]
        instance = await factory()
        return scope._services.setdefault(key, instance)


class TransientPolicy:
    """A new instance for every resolution, never cached."""

    async def get_instance(
        self, root: _Scope, scope: _Scope | None, key: Any, factory: ServiceBuilder
    ) -> Any:
        return await factory()


LIFETIME_POLICY_MAP: Final = {
    ServiceLifetime.SINGLETON: SingletonPolicy(),
    ServiceLifetime.SCOPED: ScopedPolicy(),
    ServiceLifetime.TRANSIENT: TransientPolicy(),
}
