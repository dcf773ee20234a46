# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: getall

"""
Public API for the getall DI system.
"""

from __future__ import annotations

from getall.di.container import Container
from getall.di.errors import (
    ContainerDisposedError,
    ContainerError,
    DICircularDependencyError,
    DIError,
    DIServiceCreationError,
    DIServiceNotFoundError,
    DuplicateRegistrationError,
    ScopeError,
    TypeMismatchError,
)
from getall.di.lifetime_policies import ServiceLifetime
from getall.di.protocols import (
    ContainerProtocol,
    ScopeProtocol,
)
from getall.di.registration import ServiceRegistration

__all__ = [
    "Container",
    "ContainerDisposedError",
    "ContainerError",
    "ContainerProtocol",
    "DICircularDependencyError",
    "DIError",
    "DIServiceCreationError",
    "DIServiceNotFoundError",
    "DuplicateRegistrationError",
    "ScopeError",
    "ScopeProtocol",
    "ServiceLifetime",
    "ServiceRegistration",
    "TypeMismatchError",
]
