"""
Error classes for the getall DI system.

This module contains specialized error classes for the dependency injection system,
providing detailed error messages and context for DI-related failures.
"""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any, Final

from getall.errors.base import (
    INTERNAL,
    ErrorCategory,
    ErrorCode,
    ErrorSeverity,
    GetAllError,
)
from getall.type_utils import type_name

if TYPE_CHECKING:
    from getall.di.protocols import ContainerProtocol

# Prefix for all DI error codes
ERROR_CODE_PREFIX: Final[str] = "DI"

DI: Final = ErrorCategory.get_or_create("DI", INTERNAL)


def di_error_code(code: str | None) -> ErrorCode:
    """Return the registered ``DI_<code>`` error code."""
    name = f"{ERROR_CODE_PREFIX}_{code}" if code else f"{ERROR_CODE_PREFIX}_ERROR"
    return ErrorCode.get_or_create(name, DI)


class DIError(GetAllError):
    """Base class for all DI-related errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        **context: Any,
    ) -> None:
        """Initialize a DI error.

        Args:
            message: Human-readable error message
            code: Error code without prefix (will be prefixed with DI_)
            severity: How severe this error is
            **context: Additional context information
        """
        super().__init__(
            message=message,
            code=di_error_code(code),
            severity=severity,
            context=context,
        )


# =============================================================================
# Container-aware errors
# =============================================================================


class ContainerError(DIError):
    """Base class for errors that capture container state (async-only).

    This error class is used when a container instance is available and should
    be able to capture relevant container state for diagnostics. Only async
    initialization and state capture is supported.
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        raise TypeError(
            "ContainerError and subclasses must be constructed using the async_init() classmethod (async-only)."
        )

    @classmethod
    async def async_init(
        cls,
        message: str,
        container: ContainerProtocol | None = None,
        capture_container_state: bool = True,
        code: str | None = None,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        **context: Any,
    ) -> ContainerError:
        """Async factory for ContainerError and subclasses. Captures container state asynchronously."""
        instance = Exception.__new__(cls)
        DIError.__init__(
            instance,
            message,
            code=code or "CONTAINER_ERROR",
            severity=severity,
            **context,
        )

        if capture_container_state and container is not None:
            await instance._capture_container_state_async(container)
        return instance

    async def _capture_container_state_async(
        self, container: ContainerProtocol
    ) -> None:
        """Capture the state of the container. Override in subclasses if needed."""
        try:
            self.add_context(
                "container_registrations", await container.get_registration_keys()
            )
        except DIError as e:
            # A disposed container cannot report its registrations
            self.add_context("container_state_capture_error", str(e))


# =============================================================================
class DIServiceCreationError(ContainerError):
    """Raised when the container cannot create a service instance.

    Captures container state, dependency chain, constructor signature, and error metadata for debugging.
    """

    @classmethod
    async def async_init(
        cls,
        service_type: Any,
        original_error: BaseException,
        container: ContainerProtocol | None = None,
        dependency_chain: list[str] | None = None,
        code: str | None = None,
        **context: Any,
    ) -> DIServiceCreationError:
        """Async factory for creating service creation errors.

        Args:
            service_type: The type of service that could not be created
            original_error: The original error that occurred during creation
            container: The DI container to capture state from
            dependency_chain: The chain of dependencies being resolved
            code: The error code
            **context: Additional context to include

        Returns:
            An initialized DIServiceCreationError instance
        """
        service_type_name = type_name(service_type)
        context["service_type_name"] = service_type_name
        context["error_type"] = type(original_error).__name__
        if container is not None:
            context["container_id"] = id(container)
        if dependency_chain is not None:
            context["dependency_chain"] = dependency_chain
        if inspect.isclass(service_type):
            try:
                context["constructor_parameters"] = str(inspect.signature(service_type))
            except (TypeError, ValueError):
                pass
        message = f"Failed to create service {service_type_name}: {original_error}"
        instance = await super().async_init(
            message=message,
            container=container,
            code=code or "SERVICE_CREATION",
            severity=ErrorSeverity.ERROR,
            **context,
        )
        instance.__cause__ = original_error
        return instance


# =============================================================================
class DIServiceNotFoundError(ContainerError):
    """Raised when a requested service is not registered or a constructor
    dependency cannot be satisfied.
    """

    @classmethod
    async def async_init(
        cls,
        service_type: Any,
        container: ContainerProtocol | None = None,
        requested_by: Any | None = None,
        parameter: str | None = None,
        code: str | None = None,
        dependency_chain: list[str] | None = None,
        **context: Any,
    ) -> DIServiceNotFoundError:
        """Async factory for DIServiceNotFoundError with full context propagation.

        Args:
            service_type: The type of service that was requested
            container: The DI container to capture state from
            requested_by: The type whose constructor needed the service
            parameter: The constructor parameter that needed the service
            code: The error code
            dependency_chain: The chain of dependencies being resolved
            **context: Additional context to include

        Returns:
            An initialized DIServiceNotFoundError instance
        """
        service_type_name = type_name(service_type)
        context["service_type_name"] = service_type_name
        if container is not None:
            context["container_id"] = id(container)
        if dependency_chain is not None:
            context["dependency_chain"] = dependency_chain
        if getattr(service_type, "_is_protocol", False):
            context["is_protocol"] = True

        message = f"Service not found: {service_type_name}"
        if requested_by is not None:
            requested_by_name = type_name(requested_by)
            context["requested_by"] = requested_by_name
            context["parameter"] = parameter
            message = (
                f"Unable to resolve service {service_type_name} for parameter "
                f"'{parameter}' while constructing {requested_by_name}"
            )
        return await super().async_init(
            message=message,
            container=container,
            code=code or "SERVICE_NOT_FOUND",
            severity=ErrorSeverity.ERROR,
            **context,
        )


class DICircularDependencyError(ContainerError):
    """Error raised when a circular dependency is detected.

    This error is raised when the container detects a circular dependency
    during service resolution. It captures the dependency chain and container state.
    """

    @classmethod
    async def async_init(
        cls,
        message: str | None = None,
        container: ContainerProtocol | None = None,
        capture_container_state: bool = True,
        code: str | None = None,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        dependency_chain: list[str] | None = None,
        **context: Any,
    ) -> DICircularDependencyError:
        """Async factory for creating circular dependency errors.

        Args:
            message: Custom error message (generated from dependency_chain if not provided)
            container: The DI container to capture state from
            capture_container_state: Whether to capture container state
            code: The error code
            severity: The error severity
            dependency_chain: The chain of dependencies that formed the circle
            **context: Additional context to include

        Returns:
            An initialized DICircularDependencyError instance
        """
        if not dependency_chain:
            raise ValueError(
                "dependency_chain is required for DICircularDependencyError"
            )

        # The last entry closes the cycle; find where it first appeared
        circle_start_index = 0
        for i, service in enumerate(dependency_chain[:-1]):
            if service == dependency_chain[-1]:
                circle_start_index = i
                break
        circle = dependency_chain[circle_start_index:]

        if message is None:
            message = f"Circular dependency detected: {' -> '.join(circle)}"

        context["dependency_chain"] = dependency_chain
        context["circular_dependency"] = circle

        return await super().async_init(
            message=message,
            container=container,
            capture_container_state=capture_container_state,
            code=code or "CIRCULAR_DEPENDENCY",
            severity=severity,
            **context,
        )


class ContainerDisposedError(ContainerError):
    """Error raised when trying to use a disposed container."""

    @classmethod
    async def async_init(
        cls,
        message: str | None = None,
        container: ContainerProtocol | None = None,
        capture_container_state: bool = False,
        code: str | None = None,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        operation: str | None = None,
        **context: Any,
    ) -> ContainerDisposedError:
        """Async factory for creating container disposed errors.

        Args:
            message: Optional custom error message
            container: The DI container
            capture_container_state: Whether to capture container state
            code: The error code
            severity: The error severity
            operation: The operation that was attempted
            **context: Additional context to include

        Returns:
            An initialized ContainerDisposedError instance
        """
        if message:
            pass
        elif operation:
            message = f"Container has been disposed and cannot perform: {operation}"
            context["operation"] = operation
        else:
            message = "Container has been disposed and cannot be used"

        return await super().async_init(
            message=message,
            container=container,
            capture_container_state=capture_container_state,
            code=code or "CONTAINER_DISPOSED",
            severity=severity,
            **context,
        )


# =============================================================================
class TypeMismatchError(DIError):
    """Raised when a type doesn't satisfy the interface it is requested as."""

    def __init__(self, interface: Any, actual_type: Any, **context: Any) -> None:
        """Initialize a type mismatch error.

        Args:
            interface: The expected interface type
            actual_type: The actual type provided
            **context: Additional context information
        """
        expected = type_name(interface)
        actual = type_name(actual_type)
        super().__init__(
            f"Expected {expected}, got {actual}",
            code="TYPE_MISMATCH",
            expected_type=expected,
            actual_type=actual,
            **context,
        )


class DuplicateRegistrationError(DIError):
    """Raised when trying to register a service that is already registered."""

    def __init__(self, interface: Any, **context: Any) -> None:
        name = type_name(interface)
        super().__init__(
            f"Service {name} is already registered",
            code="DUPLICATE_REGISTRATION",
            interface_name=name,
            **context,
        )


class ScopeError(DIError):
    """Error raised when there is an issue with the scope of a dependency."""

    def __init__(self, message: str, code: str = "SCOPE_ERROR", **context: Any) -> None:
        super().__init__(message, code=code, **context)

    @classmethod
    def outside_scope(cls, interface: Any) -> ScopeError:
        """Create an error for when a scoped dependency is accessed outside a scope.

        Args:
            interface: The interface that was requested outside its scope

        Returns:
            ScopeError: The error instance
        """
        name = type_name(interface)
        return cls(
            f"Dependency for {name} was accessed outside its defined scope",
            interface_name=name,
        )

    @classmethod
    def disposed(cls, operation: str, scope_id: str) -> ScopeError:
        """Create an error for an operation attempted on a disposed scope."""
        return cls(
            f"Operation '{operation}' attempted on disposed scope",
            code="SCOPE_DISPOSED",
            operation=operation,
            scope_id=scope_id,
        )
