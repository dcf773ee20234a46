# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: getall
"""
Type utility functions for getall.

This module decides which classes count as concrete and whether a class
satisfies a capability: a plain class, an ABC, a ``Protocol`` subclass, or a
parameterized generic such as ``NotificationHandler[OrderPlaced]``.
"""

from __future__ import annotations

import inspect
from abc import ABC
from collections.abc import Iterator
from typing import Any, Generic, Protocol, TypeVar, get_args, get_origin, get_type_hints


def type_name(value: Any) -> str:
    """Return a readable, fully qualified name for a type or type alias."""
    qualname = getattr(value, "__qualname__", None)
    if qualname is None or get_origin(value) is not None:
        # typing aliases such as Handler[A] render best through repr
        return repr(value)
    module = getattr(value, "__module__", None)
    if module in (None, "builtins"):
        return qualname
    return f"{module}.{qualname}"


def is_protocol(t: Any) -> bool:
    """Check if a class is a ``typing.Protocol`` definition."""
    return bool(getattr(t, "_is_protocol", False))


def is_abstract_or_protocol(t: type[Any]) -> bool:
    """
    Check if a type is abstract or a protocol.

    A class that lists ``ABC`` directly among its bases declares itself
    abstract even when it has no abstract methods.

    Args:
        t: The type to check

    Returns:
        True if the type is abstract or a protocol, False otherwise
    """
    if inspect.isabstract(t):
        return True

    if ABC in t.__bases__:
        return True

    return is_protocol(t)


def is_concrete_type(t: Any) -> bool:
    """
    Check if a type is concrete (a class that is not abstract or a protocol).

    A class that names ``ABC`` directly in its bases is never concrete, even
    when it implements every abstract method and could be instantiated; see
    ``is_abstract_or_protocol``. Such classes are skipped by discovery and
    refused by ``Container.create_instance``.

    Args:
        t: The type to check

    Returns:
        True if the type is concrete, False otherwise
    """
    if not inspect.isclass(t):
        return False

    if t.__module__ == "typing":
        return False

    return not is_abstract_or_protocol(t)


def _substitute(arg: Any, substitutions: dict[Any, Any]) -> Any:
    if isinstance(arg, TypeVar):
        return substitutions.get(arg, arg)
    params = getattr(arg, "__parameters__", ())
    if params and all(p in substitutions for p in params):
        return arg[tuple(substitutions[p] for p in params)]
    return arg


def closed_generic_bases(cls: type[Any]) -> Iterator[tuple[type[Any], tuple[Any, ...]]]:
    """
    Yield ``(origin, args)`` for every parameterized generic base of ``cls``.

    Type variables of intermediate generic classes are substituted, so for
    ``class Base(Handler[T])`` and ``class Impl(Base[int])`` this yields
    ``(Base, (int,))`` and then ``(Handler, (int,))``.
    """
    seen: set[tuple[Any, ...]] = set()

    def walk(
        klass: type[Any], substitutions: dict[Any, Any]
    ) -> Iterator[tuple[type[Any], tuple[Any, ...]]]:
        bases = klass.__dict__.get("__orig_bases__", klass.__bases__)
        for base in bases:
            origin = get_origin(base)
            if origin is None:
                if inspect.isclass(base) and base is not object:
                    yield from walk(base, {})
                continue
            if origin is Generic or origin is Protocol or not inspect.isclass(origin):
                continue

            args = tuple(_substitute(a, substitutions) for a in get_args(base))
            key = (origin, args)
            if key in seen:
                continue
            seen.add(key)
            yield origin, args

            params = getattr(origin, "__parameters__", ())
            yield from walk(origin, dict(zip(params, args)))

    yield from walk(cls, {})


def satisfies(capability: Any, cls: type[Any]) -> bool:
    """
    Check whether ``cls`` can be used where ``capability`` is expected.

    - plain classes and ABCs use ``issubclass`` (multi-level inheritance and
      ``ABC.register`` virtual subclasses included);
    - protocols match nominally: the protocol must be in ``cls.__mro__``;
    - a parameterized generic ``G[A]`` matches when ``G[A]`` is among the
      closed generic bases of ``cls``.

    Args:
        capability: The capability to check against
        cls: The candidate class

    Returns:
        True if ``cls`` satisfies ``capability``
    """
    if not inspect.isclass(cls):
        return False

    origin = get_origin(capability)
    if origin is None:
        if not inspect.isclass(capability):
            return False
        if is_protocol(capability):
            return capability in cls.__mro__
        try:
            return issubclass(cls, capability)
        except TypeError:
            return False

    args = get_args(capability)
    return any(
        base_origin is origin and base_args == args
        for base_origin, base_args in closed_generic_bases(cls)
    )


def get_constructor_type_hints_safe(impl: type[Any]) -> dict[str, Any]:
    """
    Safely get type hints for a class constructor.

    Args:
        impl: The class to get type hints for

    Returns:
        Dictionary of parameter names to types, empty if they cannot be evaluated
    """
    init = impl.__init__
    if init is object.__init__:
        return {}
    localns = dict(vars(impl))
    try:
        return get_type_hints(init, localns=localns)
    except (NameError, TypeError, AttributeError):
        pass

    # Fall back to evaluating annotations one by one, skipping the broken ones
    hints: dict[str, Any] = {}
    globalns = getattr(init, "__globals__", {})
    for name, annotation in getattr(init, "__annotations__", {}).items():
        if isinstance(annotation, str):
            try:
                annotation = eval(annotation, globalns, localns)
            except (NameError, TypeError, AttributeError, SyntaxError):
                continue
        hints[name] = annotation
    return hints
