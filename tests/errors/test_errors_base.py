"""Tests for the getall error handling system.

This module contains tests for the error foundation components,
including GetAllError, error codes, categories and the registry.
"""

from __future__ import annotations

from typing import Any

import pytest

from getall.di.errors import DI, DIError, TypeMismatchError
from getall.errors import (
    INTERNAL,
    INTERNAL_ERROR,
    ErrorCategory,
    ErrorCode,
    ErrorSeverity,
    GetAllError,
    registry,
)

STORAGE = ErrorCategory.get_or_create("STORAGE", INTERNAL)
STORAGE_FULL = ErrorCode.get_or_create("STORAGE_FULL", STORAGE)


class StorageError(GetAllError):
    """Test error for the base class behaviour."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(message, code=STORAGE_FULL, **kwargs)


class TestGetAllErrorBase:
    """Tests for the base GetAllError class."""

    def test_cannot_instantiate_base_class(self) -> None:
        with pytest.raises(TypeError):
            GetAllError("direct", code=INTERNAL_ERROR)

    def test_basic_error_creation(self) -> None:
        error = StorageError("Disk is full")

        assert str(error) == "STORAGE_FULL: Disk is full"
        assert error.message == "Disk is full"
        assert error.code == STORAGE_FULL
        assert error.category == STORAGE
        assert error.severity == ErrorSeverity.ERROR
        assert error.context == {}

    def test_error_with_context(self) -> None:
        error = StorageError(
            "Disk is full",
            severity=ErrorSeverity.CRITICAL,
            context={"volume": "/data"},
            free_bytes=0,
        )

        assert error.severity == ErrorSeverity.CRITICAL
        assert error.context == {"volume": "/data", "free_bytes": 0}

    def test_code_must_be_error_code(self) -> None:
        class BadError(GetAllError):
            pass

        with pytest.raises(TypeError):
            BadError("bad", code="STORAGE_FULL")  # type: ignore[arg-type]

    def test_add_context(self) -> None:
        error = StorageError("Disk is full")
        error.add_context("host", "db.example.com").add_context("port", 5432)

        assert error.context["host"] == "db.example.com"
        assert error.context["port"] == 5432

    def test_to_dict(self) -> None:
        error = StorageError("Disk is full", volume="/data")
        data = error.to_dict()

        assert data["code"] == "STORAGE_FULL"
        assert data["message"] == "Disk is full"
        assert data["category"] == "STORAGE"
        assert data["severity"] == "ERROR"
        assert data["context"] == {"volume": "/data"}
        assert "timestamp" in data


class TestErrorRegistry:
    """Categories and codes."""

    def test_category_hierarchy(self) -> None:
        assert STORAGE.parent is INTERNAL
        assert DI.parent is INTERNAL
        assert INTERNAL.parent is None

    def test_get_or_create_is_idempotent(self) -> None:
        assert ErrorCategory.get_or_create("STORAGE") is STORAGE
        assert ErrorCode.get_or_create("STORAGE_FULL", STORAGE) is STORAGE_FULL

    def test_registry_is_singleton(self) -> None:
        from getall.errors import ErrorRegistry

        assert ErrorRegistry() is registry


class TestDIErrors:
    def test_di_codes_are_prefixed(self) -> None:
        error = TypeMismatchError(int, str)

        assert isinstance(error, DIError)
        assert error.code == "DI_TYPE_MISMATCH"
        assert error.category == DI
        assert error.context == {"expected_type": "int", "actual_type": "str"}
        assert str(error) == "DI_TYPE_MISMATCH: Expected int, got str"

    def test_container_errors_require_async_init(self) -> None:
        from getall.di.errors import DIServiceNotFoundError

        with pytest.raises(TypeError):
            DIServiceNotFoundError("sync construction")

    @pytest.mark.asyncio
    async def test_async_init_captures_container_state(self) -> None:
        from getall.di import Container
        from getall.di.errors import DIServiceNotFoundError

        container = Container()
        await container.register_singleton(StorageError, lambda c: None)

        error = await DIServiceNotFoundError.async_init(int, container=container)

        assert error.context["container_registrations"] == [
            f"{__name__}.StorageError"
        ]
        assert error.message == "Service not found: int"

    @pytest.mark.asyncio
    async def test_circular_error_requires_chain(self) -> None:
        from getall.di.errors import DICircularDependencyError

        with pytest.raises(ValueError):
            await DICircularDependencyError.async_init()

        error = await DICircularDependencyError.async_init(
            dependency_chain=["Root", "A", "B", "A"]
        )
        assert error.context["circular_dependency"] == ["A", "B", "A"]
        assert error.message == "Circular dependency detected: A -> B -> A"
