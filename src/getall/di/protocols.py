"""
Protocol definitions for the getall DI system.

This module contains the core protocols that define the interface for the DI container and its components.
"""

from __future__ import annotations

import contextlib
from typing import Any, Protocol, TypeVar, runtime_checkable

T = TypeVar("T")


@runtime_checkable
class ScopeProtocol(Protocol):
    """Protocol for a DI scope."""

    @property
    def id(self) -> str:
        """Get the unique ID of this scope."""
        ...

    @property
    def parent(self) -> ScopeProtocol | None:
        """Get the parent scope, or None if this is the root scope."""
        ...

    async def resolve(self, interface: type[T]) -> T:
        """Resolve a service within this scope."""
        ...

    async def dispose(self) -> None:
        """Dispose of the scope and its services."""
        ...

    async def get_service_keys(self) -> list[str]:
        """Get the service keys cached in this scope."""
        ...


@runtime_checkable
class ContainerProtocol(Protocol):
    """Protocol for dependency injection containers.

    This is the object-graph builder consumed by the resolver: anything that
    can build an instance of an arbitrary concrete type, resolving that
    type's own constructor dependencies, satisfies it.
    """

    async def register_singleton(
        self,
        interface: Any,
        implementation: Any,
        replace: bool = False,
    ) -> None:
        """Register a service with singleton lifetime."""
        ...

    async def register_scoped(
        self,
        interface: Any,
        implementation: Any,
        replace: bool = False,
    ) -> None:
        """Register a service with scoped lifetime."""
        ...

    async def register_transient(
        self,
        interface: Any,
        implementation: Any,
        replace: bool = False,
    ) -> None:
        """Register a service with transient lifetime."""
        ...

    async def register_instance(
        self, interface: Any, instance: Any, replace: bool = False
    ) -> None:
        """Register an already constructed instance as a singleton."""
        ...

    async def has_registration(self, interface: Any) -> bool:
        """Check if a service is registered."""
        ...

    async def resolve(self, interface: type[T]) -> T:
        """Resolve a registered service by type."""
        ...

    async def resolve_optional(self, interface: type[T]) -> T | None:
        """Resolve a registered service, or None if it is not registered."""
        ...

    async def create_instance(self, implementation: type[T], /, **explicit: Any) -> T:
        """Build an instance of a concrete type, injecting its constructor dependencies."""
        ...

    async def get_registration_keys(self) -> list[str]:
        """Get all registered service keys."""
        ...

    def create_scope(self) -> contextlib.AbstractAsyncContextManager[ScopeProtocol]:
        """Create a new scope for scoped services."""
        ...

    async def dispose_services(self, services: list[Any]) -> None:
        """Dispose of a list of services."""
        ...

    async def dispose(self) -> None:
        """Dispose the container and all its services."""
        ...
