# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: getall
"""
Capability resolution.

``Resolver`` turns types into live objects through the DI container:

- ``get(SomeType)`` builds one instance of a type known at the call site;
- ``get_as(Capability, implementation)`` builds a type chosen at runtime
  and hands it back as the capability;
- ``get_all(Capability)`` discovers every implementation of a capability and
  builds them one at a time as the caller iterates.

Example:
    ```python
    container = Container()
    await register_logging(container)
    resolver = await register_resolver(container, ["myapp.handlers"])

    async for handler in resolver.get_all(NotificationHandler[OrderPlaced]):
        await handler.handle(order_placed)
    ```
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterable
from types import ModuleType
from typing import Any, TypeVar, cast

from getall.config import GetAllSettings
from getall.di.errors import TypeMismatchError
from getall.di.protocols import ContainerProtocol
from getall.logging.logger import get_logger
from getall.logging.protocols import LoggerProtocol
from getall.scanner import CapabilityScanner, DiscoveryMemory, ModuleSet
from getall.type_utils import satisfies

T = TypeVar("T")


class Resolver:
    """Builds single services and whole capability sets through the container.

    The resolver caches nothing itself: every call builds fresh objects
    unless the container hands out a cached lifetime (e.g. a singleton
    dependency).
    """

    def __init__(self, container: ContainerProtocol, scanner: CapabilityScanner) -> None:
        self._container = container
        self._scanner = scanner

    @property
    def scanner(self) -> CapabilityScanner:
        return self._scanner

    async def get(self, service_type: type[T]) -> T:
        """Build an instance of ``service_type``.

        The type does not need to be registered; its constructor dependencies
        are resolved from the container, recursively.

        Raises:
            DIServiceNotFoundError: If a dependency cannot be satisfied
            DIServiceCreationError: If the type cannot be constructed
        """
        return await self._container.create_instance(service_type)

    async def get_as(self, capability: type[T], implementation: type[Any]) -> T:
        """Build ``implementation`` and return it as ``capability``.

        Used when the concrete type is only known at runtime, e.g. from
        ``discover_types`` or a caller's own dispatch table.

        Raises:
            TypeMismatchError: If ``implementation`` does not satisfy ``capability``;
                nothing is built in that case
            DIServiceNotFoundError: If a dependency cannot be satisfied
            DIServiceCreationError: If the type cannot be constructed
        """
        if not satisfies(capability, implementation):
            raise TypeMismatchError(capability, implementation)
        return cast("T", await self._container.create_instance(implementation))

    def get_all(self, capability: type[T]) -> AsyncIterator[T]:
        """Build every implementation of ``capability``, lazily and in discovery order.

        Discovery happens now (and is cached); each instance is built only
        when the iterator is advanced to it. The iterator is single-pass:
        call ``get_all`` again to get fresh instances. A build failure is
        raised from the step that would have produced that instance.

        Args:
            capability: A class, ABC, protocol or parameterized generic

        Returns:
            An async iterator of instances
        """
        return self._build_each(self._scanner.discover_types(capability))

    async def _build_each(self, types: tuple[type[Any], ...]) -> AsyncIterator[Any]:
        for implementation in types:
            yield await self._container.create_instance(implementation)

    def discover_types(self, capability: Any) -> tuple[type[Any], ...]:
        """The implementing classes of ``capability``, without building them."""
        return self._scanner.discover_types(capability)


async def register_resolver(
    container: ContainerProtocol,
    modules: Iterable[str | ModuleType],
    *,
    include_submodules: bool = True,
) -> Resolver:
    """
    Register capability resolution with the container.

    The module set and the discovery cache are created here, once, and
    registered as a ``DiscoveryMemory`` singleton. ``CapabilityScanner`` and
    ``Resolver`` are registered as singletons so any constructor can ask for
    a ``Resolver``.

    Args:
        container: The dependency injection container
        modules: Modules (or dotted names) to scan for implementations
        include_submodules: Walk the submodules of packages

    Returns:
        The registered resolver
    """
    logger = await container.resolve_optional(LoggerProtocol) or get_logger(__name__)
    memory = DiscoveryMemory(
        ModuleSet(modules, include_submodules=include_submodules, logger=logger)
    )

    await container.register_instance(DiscoveryMemory, memory)
    await container.register_singleton(CapabilityScanner, CapabilityScanner)
    await container.register_singleton(Resolver, Resolver)

    logger.info(
        "Registered capability resolver",
        modules=memory.modules.names,
    )
    return await container.resolve(Resolver)


async def register_resolver_from_settings(
    container: ContainerProtocol, settings: GetAllSettings | None = None
) -> Resolver:
    """Register capability resolution using ``GetAllSettings`` (loaded from the environment if omitted)."""
    if settings is None:
        settings = GetAllSettings.load()
    return await register_resolver(
        container,
        settings.modules,
        include_submodules=settings.include_submodules,
    )
