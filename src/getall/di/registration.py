"""
Service registration module for the getall DI container.

This module defines the ServiceRegistration class used to track service registrations
in the DI container.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from getall.di.lifetime_policies import LIFETIME_POLICY_MAP, ServiceLifetime

T = TypeVar("T")


class ServiceRegistration(Generic[T]):
    """Represents a service registration in the DI container.

    A registration contains the interface type, its implementation, factory
    or instance, and the lifetime of the service.
    """

    def __init__(
        self,
        interface: Any,
        implementation: Any,
        lifetime: ServiceLifetime,
    ) -> None:
        """Initialize a service registration.

        Args:
            interface: The interface type that will be used to resolve the service
            implementation: A concrete type, a factory function, or an instance
            lifetime: The lifetime of the service
        """
        self.interface = interface
        self.implementation = implementation
        self.lifetime = lifetime
        self.lifetime_policy = LIFETIME_POLICY_MAP[lifetime]

    def __repr__(self) -> str:
        return (
            f"ServiceRegistration({self.interface!r}, {self.implementation!r}, "
            f"{self.lifetime.value})"
        )
