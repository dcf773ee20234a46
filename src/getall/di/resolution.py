"""
Scope implementation for the getall DI system.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Any, TypeVar

from getall.di.errors import ScopeError
from getall.type_utils import type_name

if TYPE_CHECKING:
    from types import TracebackType

    from getall.di.container import Container

T = TypeVar("T")


class _Scope:
    """Internal scope implementation for service lifetime management.

    The root scope holds singletons; child scopes hold scoped services.
    """

    def __init__(self, container: Container, parent: _Scope | None = None) -> None:
        self.container = container
        self._parent = parent
        self._id = uuid.uuid4().hex
        self._services: dict[Any, object] = {}
        self._scopes: list[_Scope] = []
        self._disposed = False

    @classmethod
    def singleton(cls, container: Container) -> _Scope:
        """Create a singleton (root) scope with no parent."""
        return cls(container)

    @property
    def id(self) -> str:
        return self._id

    @property
    def parent(self) -> _Scope | None:
        return self._parent

    @property
    def disposed(self) -> bool:
        return self._disposed

    async def __aenter__(self) -> _Scope:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.dispose()

    async def dispose(self) -> None:
        """Dispose of all services in this scope and its children (idempotent)."""
        if self._disposed:
            return
        self._disposed = True
        for scope in list(reversed(self._scopes)):
            await scope.dispose()
        services = list(self._services.values())
        self._services.clear()
        await self.container.dispose_services(services)
        if self._parent is not None and self in self._parent._scopes:
            self._parent._scopes.remove(self)

    def _check_not_disposed(self, operation: str) -> None:
        if self._disposed:
            raise ScopeError.disposed(operation, self._id)

    async def resolve(self, interface: type[T]) -> T:
        """Resolve a service as seen from this scope."""
        self._check_not_disposed("resolve")
        return await self.container._resolve(interface, self)

    def create_scope(self) -> _Scope:
        """Create a nested scope."""
        self._check_not_disposed("create_scope")
        scope = type(self)(self.container, parent=self)
        self._scopes.append(scope)
        return scope

    async def get_service_keys(self) -> list[str]:
        """Get the names of the services cached in this scope."""
        self._check_not_disposed("get_service_keys")
        return [type_name(t) for t in self._services]
