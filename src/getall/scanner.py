# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: getall
"""
Capability discovery.

A ``ModuleSet`` is the fixed list of modules to search. ``CapabilityScanner``
answers "which concrete classes in those modules satisfy this capability?"
once per capability and memoizes the answer in a ``DiscoveryCache``.
"""

from __future__ import annotations

import importlib
import inspect
import pkgutil
from collections.abc import Iterable, Iterator
from types import MappingProxyType, ModuleType
from typing import TYPE_CHECKING, Any

from getall.logging.logger import get_logger
from getall.logging.protocols import LoggerProtocol
from getall.type_utils import is_concrete_type, satisfies, type_name

if TYPE_CHECKING:
    from getall.config import GetAllSettings


class ModuleSet:
    """
    An immutable, ordered set of modules to scan.

    Modules may be given as module objects or dotted names. Packages are
    expanded to include their submodules (recursively, in ``pkgutil`` order)
    unless ``include_submodules`` is False. A module listed twice is kept at
    its first position.
    """

    def __init__(
        self,
        modules: Iterable[str | ModuleType],
        include_submodules: bool = True,
        logger: LoggerProtocol | None = None,
    ) -> None:
        self._logger = logger or get_logger(__name__)
        collected: dict[str, ModuleType] = {}
        for module in modules:
            if isinstance(module, str):
                module = importlib.import_module(module)
            collected.setdefault(module.__name__, module)
            if include_submodules:
                for submodule in self._walk_package(module):
                    collected.setdefault(submodule.__name__, submodule)
        self._modules: tuple[ModuleType, ...] = tuple(collected.values())

    @classmethod
    def from_settings(
        cls, settings: GetAllSettings, logger: LoggerProtocol | None = None
    ) -> ModuleSet:
        return cls(
            settings.modules,
            include_submodules=settings.include_submodules,
            logger=logger,
        )

    def _walk_package(self, package: ModuleType) -> Iterator[ModuleType]:
        package_path = getattr(package, "__path__", None)
        if not package_path:
            return

        for _, name, is_pkg in pkgutil.iter_modules(package_path):
            full_name = f"{package.__name__}.{name}"
            try:
                module = importlib.import_module(full_name)
            except ImportError as e:
                self._logger.warning(
                    "Error importing module during discovery",
                    module=full_name,
                    error=str(e),
                )
                continue
            yield module
            if is_pkg:
                yield from self._walk_package(module)

    @property
    def modules(self) -> tuple[ModuleType, ...]:
        return self._modules

    @property
    def names(self) -> list[str]:
        return [module.__name__ for module in self._modules]

    def __iter__(self) -> Iterator[ModuleType]:
        return iter(self._modules)

    def __len__(self) -> int:
        return len(self._modules)

    def __repr__(self) -> str:
        return f"ModuleSet({self.names!r})"

    def iter_types(self) -> Iterator[type[Any]]:
        """
        Enumerate every class defined in the module set.

        Modules are visited in order; inside a module classes come in
        namespace order, each followed by its nested classes. A class is
        only reported by the module that defines it, and only once.
        """
        seen: set[type[Any]] = set()
        for module in self._modules:
            for cls in _defined_classes(module):
                if cls not in seen:
                    seen.add(cls)
                    yield cls


def _defined_classes(module: ModuleType) -> Iterator[type[Any]]:
    for value in list(vars(module).values()):
        if (
            inspect.isclass(value)
            and value.__module__ == module.__name__
            and "<locals>" not in value.__qualname__
        ):
            yield value
            yield from _nested_classes(value)


def _nested_classes(cls: type[Any]) -> Iterator[type[Any]]:
    for name, value in list(vars(cls).items()):
        if inspect.isclass(value) and value.__qualname__ == f"{cls.__qualname__}.{name}":
            yield value
            yield from _nested_classes(value)


class DiscoveryCache:
    """
    Capability -> implementing classes, filled on first lookup.

    Entries are only ever added. ``add`` keeps the first value stored for a
    capability, so concurrent first lookups may compute twice but always
    agree on what is returned.
    """

    def __init__(self) -> None:
        self._types_per_capability: dict[Any, tuple[type[Any], ...]] = {}

    def get(self, capability: Any) -> tuple[type[Any], ...] | None:
        return self._types_per_capability.get(capability)

    def add(
        self, capability: Any, types: Iterable[type[Any]]
    ) -> tuple[type[Any], ...]:
        """Store ``types`` for ``capability`` unless already present; return the stored value."""
        return self._types_per_capability.setdefault(capability, tuple(types))

    def keys(self) -> list[Any]:
        return list(self._types_per_capability)

    def snapshot(self) -> MappingProxyType[Any, tuple[type[Any], ...]]:
        """A read-only copy of the current entries."""
        return MappingProxyType(dict(self._types_per_capability))

    def __contains__(self, capability: object) -> bool:
        return capability in self._types_per_capability

    def __len__(self) -> int:
        return len(self._types_per_capability)


class DiscoveryMemory:
    """
    The process-wide discovery state: the modules to scan and the cache.

    Created once when the resolver is registered and shared through the
    container as a singleton instance.
    """

    def __init__(self, modules: ModuleSet, cache: DiscoveryCache | None = None) -> None:
        self.modules = modules
        self.cache = cache if cache is not None else DiscoveryCache()

    def __repr__(self) -> str:
        return f"DiscoveryMemory(modules={self.modules.names!r}, cached={len(self.cache)})"


class CapabilityScanner:
    """Finds the concrete classes that satisfy a capability, with memoization."""

    def __init__(
        self, memory: DiscoveryMemory, logger: LoggerProtocol | None = None
    ) -> None:
        self._memory = memory
        self._logger = logger or get_logger(__name__)

    @property
    def memory(self) -> DiscoveryMemory:
        return self._memory

    def discover_types(self, capability: Any) -> tuple[type[Any], ...]:
        """
        Return the concrete classes in the module set that satisfy ``capability``.

        The first call for a capability scans the modules and caches the
        result, including an empty one; later calls return the cached tuple.

        Args:
            capability: A class, ABC, protocol or parameterized generic

        Returns:
            The implementing classes in discovery order
        """
        cache = self._memory.cache
        cached = cache.get(capability)
        if cached is not None:
            return cached

        types = [
            cls
            for cls in self._memory.modules.iter_types()
            if is_concrete_type(cls) and satisfies(capability, cls)
        ]
        stored = cache.add(capability, types)
        self._logger.debug(
            "Discovered implementations",
            capability=type_name(capability),
            count=len(stored),
            implementations=[type_name(t) for t in stored],
        )
        return stored
