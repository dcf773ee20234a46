# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: getall

"""
getall: discover every implementation of a capability and build them through
dependency injection.
"""

from __future__ import annotations

from getall.config import GetAllSettings
from getall.di import Container, ContainerProtocol
from getall.resolver import Resolver, register_resolver, register_resolver_from_settings
from getall.scanner import CapabilityScanner, DiscoveryCache, DiscoveryMemory, ModuleSet

__all__ = [
    "CapabilityScanner",
    "Container",
    "ContainerProtocol",
    "DiscoveryCache",
    "DiscoveryMemory",
    "GetAllSettings",
    "ModuleSet",
    "Resolver",
    "register_resolver",
    "register_resolver_from_settings",
]
