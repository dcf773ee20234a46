"""
DI container implementation for getall.

This module implements the container that registers services, resolves them
according to their lifetime, and builds arbitrary concrete types through
constructor injection.
"""

from __future__ import annotations

import contextlib
import contextvars
import inspect
import logging
from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Any, TypeVar, cast, get_origin

from getall.di.disposal import _DisposalManager
from getall.di.errors import (
    ContainerDisposedError,
    DICircularDependencyError,
    DIError,
    DIServiceCreationError,
    DIServiceNotFoundError,
    DuplicateRegistrationError,
)
from getall.di.lifetime_policies import ServiceLifetime
from getall.di.parameter_resolution import resolve_constructor_arguments
from getall.di.protocols import ContainerProtocol
from getall.di.registration import ServiceRegistration
from getall.di.resolution import _Scope
from getall.type_utils import is_concrete_type, type_name

T = TypeVar("T")

# Dependency chain tracking (per task / async context).
# Entries are (kind, key) so resolving an interface and constructing its
# implementation are tracked separately.
_DI_DEPENDENCY_CHAIN: contextvars.ContextVar[tuple[tuple[str, Any], ...]] = (
    contextvars.ContextVar("_DI_DEPENDENCY_CHAIN", default=())
)


class Container:
    """Dependency Injection container for managing service lifetimes.

    This container supports three service lifetimes:
    - Singleton: One instance per container
    - Scoped: One instance per scope
    - Transient: New instance per resolution

    Any concrete class can also be built with ``create_instance`` without
    being registered; its constructor parameters are resolved from the
    registrations by type hint.

    Attributes:
        _singleton_scope: _Scope
            The root scope that holds all singleton services.
        _registrations: dict[Any, ServiceRegistration]
            Dictionary mapping service interfaces to their registrations.
        _scopes: list[_Scope]
            Child scopes created by this container that are still open.
    """

    def __init__(self) -> None:
        """Initialize a new DI container."""
        self._singleton_scope: _Scope = _Scope.singleton(self)
        self._current_scope: contextvars.ContextVar[_Scope | None] = (
            contextvars.ContextVar(f"getall_scope_{id(self)}", default=None)
        )
        self._registrations: dict[Any, ServiceRegistration[Any]] = {}
        self._scopes: list[_Scope] = []
        self._disposal_manager = _DisposalManager()
        self._disposed: bool = False
        self._logger = logging.getLogger(__name__)

    @classmethod
    async def create(
        cls, configurator: Callable[[Container], Awaitable[None]]
    ) -> Container:
        """Create and configure a new container.

        Args:
            configurator: An async function that receives the new container and
                         registers all required services.

        Returns:
            A fully configured Container instance ready for use.

        Example:
            ```python
            async def configure(c: Container) -> None:
                await register_logging(c)
                await register_resolver(c, ["myapp.handlers"])

            container = await Container.create(configure)
            ```
        """
        container = cls()
        try:
            await configurator(container)
        except BaseException:
            await container.dispose()
            raise
        return container

    @contextlib.asynccontextmanager
    async def use(self) -> AsyncGenerator[Container]:
        """Context manager that disposes the container on exit.

        Example:
            ```python
            async with Container().use() as container:
                await container.register_singleton(Clock, SystemClock)
                clock = await container.resolve(Clock)
            ```
        """
        try:
            yield self
        finally:
            await self.dispose()

    async def _check_not_disposed(self, operation: str) -> None:
        """Check if the container is disposed and raise an error if it is."""
        if self._disposed:
            raise await ContainerDisposedError.async_init(operation=operation)

    def provides_self(self, interface: Any) -> bool:
        """True if ``interface`` asks for the container itself."""
        return interface is ContainerProtocol or interface is type(self)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    async def register_singleton(
        self, interface: Any, implementation: Any = None, replace: bool = False
    ) -> None:
        await self._register(
            interface, implementation, ServiceLifetime.SINGLETON, replace
        )

    async def register_scoped(
        self, interface: Any, implementation: Any = None, replace: bool = False
    ) -> None:
        await self._register(interface, implementation, ServiceLifetime.SCOPED, replace)

    async def register_transient(
        self, interface: Any, implementation: Any = None, replace: bool = False
    ) -> None:
        await self._register(
            interface, implementation, ServiceLifetime.TRANSIENT, replace
        )

    async def register_instance(
        self, interface: Any, instance: Any, replace: bool = False
    ) -> None:
        """Register an already constructed instance as a singleton."""
        await self._register(interface, instance, ServiceLifetime.SINGLETON, replace)
        self._singleton_scope._services[interface] = instance

    async def _register(
        self,
        interface: Any,
        implementation: Any,
        lifetime: ServiceLifetime,
        replace: bool = False,
    ) -> None:
        await self._check_not_disposed("register")
        if implementation is None:
            # Self-registration: the interface is its own implementation
            implementation = interface
        if interface in self._registrations:
            if not replace:
                raise DuplicateRegistrationError(interface)
            self._singleton_scope._services.pop(interface, None)
            for scope in self._scopes:
                scope._services.pop(interface, None)
        self._registrations[interface] = ServiceRegistration(
            interface, implementation, lifetime
        )
        self._logger.debug(
            "Registered %s as %s (%s)",
            type_name(interface),
            type_name(implementation)
            if inspect.isclass(implementation)
            else type(implementation).__name__,
            lifetime.value,
        )

    async def has_registration(self, interface: Any) -> bool:
        """Check if a service is registered.

        Args:
            interface: The service type to check

        Returns:
            True if the service is registered, False otherwise
        """
        try:
            return interface in self._registrations
        except TypeError:
            # Unhashable annotations can never be registration keys
            return False

    async def get_registration_keys(self) -> list[str]:
        """Get the names of all registered services."""
        await self._check_not_disposed("get_registration_keys")
        return [type_name(t) for t in self._registrations]

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    async def resolve(self, interface: type[T]) -> T:
        """Resolve a service instance.

        Args:
            interface: The interface type of the service to resolve

        Returns:
            An instance of the requested service

        Raises:
            ScopeError: If trying to resolve a scoped service outside of a scope
            DIServiceNotFoundError: If the service is not registered
            DICircularDependencyError: If a circular dependency is detected
        """
        await self._check_not_disposed("resolve")
        return await self._resolve(interface, self._current_scope.get())

    async def resolve_optional(self, interface: type[T]) -> T | None:
        """Resolve a service instance or return None if not registered."""
        await self._check_not_disposed("resolve_optional")
        if not await self.has_registration(interface):
            return None
        return await self.resolve(interface)

    async def _resolve(self, interface: type[T], scope: _Scope | None) -> T:
        if self.provides_self(interface):
            return cast("T", self)

        registration = self._registrations.get(interface)
        if registration is None:
            raise await DIServiceNotFoundError.async_init(
                service_type=interface,
                container=self,
                dependency_chain=self._chain_names(),
            )

        token = await self._enter_chain("resolve", interface)
        scope_token = self._current_scope.set(scope) if scope is not None else None
        try:

            async def factory() -> Any:
                return await self.create_service(interface, registration.implementation)

            instance = await registration.lifetime_policy.get_instance(
                self._singleton_scope, scope, interface, factory
            )
            return cast("T", instance)
        finally:
            if scope_token is not None:
                self._current_scope.reset(scope_token)
            _DI_DEPENDENCY_CHAIN.reset(token)

    async def create_service(self, interface: Any, implementation: Any) -> Any:
        """Create a service instance for a registration.

        Classes are built with ``create_instance``; factories are called with
        the container (and awaited if they return an awaitable); anything else
        is returned as-is.
        """
        if inspect.isclass(implementation) or inspect.isclass(
            get_origin(implementation)
        ):
            return await self.create_instance(implementation)
        if callable(implementation):
            try:
                result = implementation(self)
                if inspect.isawaitable(result):
                    result = await result
            except DIError:
                raise
            except Exception as exc:
                raise await DIServiceCreationError.async_init(
                    service_type=interface,
                    original_error=exc,
                    container=self,
                    dependency_chain=self._chain_names(),
                ) from exc
            return result
        return implementation

    async def create_instance(self, implementation: type[T], /, **explicit: Any) -> T:
        """Build an instance of a concrete type, injecting its dependencies.

        The type does not need to be registered. Each constructor parameter is
        resolved from the container by its type hint; parameters with a
        default keep it when nothing is registered, and ``Optional``
        parameters fall back to ``None``.

        Args:
            implementation: A concrete class or a parameterized generic class
            **explicit: Constructor arguments that bypass resolution

        Returns:
            A new instance of ``implementation``

        Raises:
            DIServiceNotFoundError: If a constructor dependency cannot be satisfied
            DIServiceCreationError: If the type is not concrete or its constructor fails
            DICircularDependencyError: If the type depends on itself
        """
        await self._check_not_disposed("create_instance")

        target = get_origin(implementation) or implementation
        if not is_concrete_type(target):
            raise await DIServiceCreationError.async_init(
                service_type=implementation,
                original_error=TypeError(
                    f"{type_name(implementation)} is not a concrete class"
                ),
                container=self,
            )

        token = await self._enter_chain("create", implementation)
        try:
            args, kwargs = await resolve_constructor_arguments(
                self, target, explicit, self._chain_names()
            )
            try:
                # Calling a parameterized alias also records __orig_class__
                return cast("T", implementation(*args, **kwargs))
            except DIError:
                raise
            except Exception as exc:
                raise await DIServiceCreationError.async_init(
                    service_type=implementation,
                    original_error=exc,
                    container=self,
                    dependency_chain=self._chain_names(),
                ) from exc
        finally:
            _DI_DEPENDENCY_CHAIN.reset(token)

    async def _enter_chain(self, kind: str, key: Any) -> contextvars.Token[Any]:
        chain = _DI_DEPENDENCY_CHAIN.get()
        if (kind, key) in chain:
            raise await DICircularDependencyError.async_init(
                container=self,
                dependency_chain=[*self._chain_names(), type_name(key)],
            )
        return _DI_DEPENDENCY_CHAIN.set((*chain, (kind, key)))

    @staticmethod
    def _chain_names() -> list[str]:
        names: list[str] = []
        for _, key in _DI_DEPENDENCY_CHAIN.get():
            name = type_name(key)
            # resolve(X) followed by create(X) shows up once
            if not names or names[-1] != name:
                names.append(name)
        return names

    # ------------------------------------------------------------------
    # Scopes and disposal
    # ------------------------------------------------------------------

    @contextlib.asynccontextmanager
    async def create_scope(self) -> AsyncGenerator[_Scope]:
        """Create a new scope for scoped services.

        The scope is nested in the currently active scope, if any, and is
        disposed when the context exits.

        Example:
            ```python
            async with container.create_scope() as scope:
                session = await scope.resolve(Session)
            ```
        """
        await self._check_not_disposed("create_scope")

        parent = self._current_scope.get() or self._singleton_scope
        scope = parent.create_scope()
        self._scopes.append(scope)
        token = self._current_scope.set(scope)
        try:
            yield scope
        finally:
            self._current_scope.reset(token)
            if scope in self._scopes:
                self._scopes.remove(scope)
            await scope.dispose()

    async def get_scopes(self) -> list[_Scope]:
        """Get the open child scopes managed by this container."""
        await self._check_not_disposed("get_scopes")
        return list(self._scopes)

    async def dispose_services(self, services: list[Any]) -> None:
        """Dispose multiple services, last created first."""
        for service in reversed(services):
            if service is self:
                continue
            await self._disposal_manager.dispose_service(service)

    async def dispose(self) -> None:
        """Dispose the container and all its services.

        After disposal the container raises ``ContainerDisposedError`` for any
        registration or resolution.
        """
        if self._disposed:
            return

        # Mark as disposed first to prevent new registrations during disposal
        self._disposed = True
        scopes = list(self._scopes)
        self._scopes.clear()
        await self._disposal_manager.dispose_scopes(scopes, self._singleton_scope)
