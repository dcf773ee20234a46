"""
Parameter resolution utilities for getall DI.

This module resolves constructor parameters during dependency injection from
their type hints: registered services are resolved, defaults are kept, and
optional parameters fall back to ``None``.
"""

from __future__ import annotations

import inspect
import types
from typing import TYPE_CHECKING, Any, Union, get_args, get_origin

from getall.di.errors import DIServiceNotFoundError
from getall.type_utils import get_constructor_type_hints_safe

if TYPE_CHECKING:
    from getall.di.container import Container

_SKIPPED_KINDS = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


def optional_inner_type(annotation: Any) -> Any | None:
    """Return ``X`` for ``Optional[X]`` / ``X | None``, otherwise None."""
    origin = get_origin(annotation)
    if origin is not Union and origin is not types.UnionType:
        return None
    args = [a for a in get_args(annotation) if a is not type(None)]
    if len(args) != len(get_args(annotation)) - 1 or len(args) != 1:
        return None
    return args[0]


def constructor_parameters(impl: type[Any]) -> list[tuple[inspect.Parameter, Any]]:
    """
    List the injectable constructor parameters of ``impl`` with their types.

    Args:
        impl: The class to inspect

    Returns:
        ``(parameter, annotation)`` pairs in declaration order; the
        annotation is ``inspect.Parameter.empty`` when there is none
    """
    try:
        signature = inspect.signature(impl)
    except (TypeError, ValueError):
        return []
    hints = get_constructor_type_hints_safe(impl)
    return [
        (param, hints.get(name, param.annotation))
        for name, param in signature.parameters.items()
        if param.kind not in _SKIPPED_KINDS
    ]


async def resolve_constructor_arguments(
    container: Container,
    impl: type[Any],
    explicit: dict[str, Any],
    dependency_chain: list[str],
) -> tuple[list[Any], dict[str, Any]]:
    """
    Resolve the arguments needed to call ``impl``.

    Args:
        container: The container used to resolve dependencies
        impl: The class being constructed
        explicit: Arguments supplied by the caller, used as-is
        dependency_chain: The current resolution chain, for error context

    Returns:
        Positional-only arguments and keyword arguments for the constructor

    Raises:
        DIServiceNotFoundError: If a required parameter cannot be satisfied
    """
    args: list[Any] = []
    kwargs: dict[str, Any] = {}

    for param, annotation in constructor_parameters(impl):
        name = param.name
        has_default = param.default is not inspect.Parameter.empty

        if name in explicit:
            value = explicit[name]
        else:
            value = await _resolve_parameter(container, annotation)
            if value is _UNRESOLVED:
                if has_default:
                    if param.kind is not inspect.Parameter.POSITIONAL_ONLY:
                        continue
                    # Later positional-only arguments must keep their slots
                    value = param.default
                elif optional_inner_type(annotation) is not None:
                    value = None
                else:
                    raise await DIServiceNotFoundError.async_init(
                        service_type=annotation
                        if annotation is not inspect.Parameter.empty
                        else name,
                        container=container,
                        requested_by=impl,
                        parameter=name,
                        dependency_chain=dependency_chain,
                    )

        if param.kind is inspect.Parameter.POSITIONAL_ONLY:
            args.append(value)
        else:
            kwargs[name] = value

    return args, kwargs


class _Unresolved:
    def __repr__(self) -> str:
        return "<unresolved>"


_UNRESOLVED = _Unresolved()


async def _resolve_parameter(container: Container, annotation: Any) -> Any:
    if annotation is inspect.Parameter.empty or annotation is Any:
        return _UNRESOLVED
    if isinstance(annotation, str):
        # Forward reference that could not be evaluated
        return _UNRESOLVED
    if container.provides_self(annotation):
        return container

    if await container.has_registration(annotation):
        return await container.resolve(annotation)

    inner = optional_inner_type(annotation)
    if inner is not None and await container.has_registration(inner):
        return await container.resolve(inner)

    return _UNRESOLVED
