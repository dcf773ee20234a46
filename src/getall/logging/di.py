"""
Dependency injection registration for the getall logging system.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from getall.logging.config import LoggingSettings
from getall.logging.logger import get_logger
from getall.logging.protocols import LoggerProtocol

if TYPE_CHECKING:
    from getall.di.protocols import ContainerProtocol


async def register_logging(
    container: ContainerProtocol,
    settings: LoggingSettings | None = None,
    name: str = "getall",
    replace: bool = False,
) -> LoggerProtocol:
    """
    Register the logging components with the container.

    ``LoggingSettings`` and a ``LoggerProtocol`` singleton become available
    to every constructor that asks for them.

    Args:
        container: The dependency injection container.
        settings: Optional logging settings, loaded from the environment if omitted.
        name: Name of the registered logger.
        replace: Replace existing registrations instead of failing.

    Returns:
        The registered logger instance.
    """
    if settings is None:
        settings = LoggingSettings()

    logger = get_logger(name, settings=settings)
    await container.register_instance(LoggingSettings, settings, replace=replace)
    await container.register_instance(LoggerProtocol, logger, replace=replace)
    return logger
