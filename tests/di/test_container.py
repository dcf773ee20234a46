"""Tests for registration and lifetime handling in the DI container."""

from typing import Protocol

import pytest

from getall.di import (
    Container,
    ContainerDisposedError,
    ContainerProtocol,
    DIServiceCreationError,
    DIServiceNotFoundError,
    DuplicateRegistrationError,
    ScopeError,
    ScopeProtocol,
)


class ILogger(Protocol):
    def log(self, message: str) -> None: ...


class ConsoleLogger:
    def log(self, message: str) -> None:
        pass  # Mock implementation


class IRepository(Protocol):
    def get_by_id(self, id: int) -> dict: ...


class MemoryRepository:
    def get_by_id(self, id: int) -> dict:
        return {"id": id}


class OtherRepository(MemoryRepository):
    pass


class Settings:
    def __init__(self, dsn: str) -> None:
        self.dsn = dsn


class NeedsContainer:
    def __init__(self, container: ContainerProtocol) -> None:
        self.container = container


@pytest.mark.asyncio
async def test_singleton_returns_same_instance() -> None:
    container = Container()
    await container.register_singleton(ILogger, ConsoleLogger)

    first = await container.resolve(ILogger)
    second = await container.resolve(ILogger)

    assert isinstance(first, ConsoleLogger)
    assert first is second


@pytest.mark.asyncio
async def test_transient_returns_new_instances() -> None:
    container = Container()
    await container.register_transient(ILogger, ConsoleLogger)

    assert await container.resolve(ILogger) is not await container.resolve(ILogger)


@pytest.mark.asyncio
async def test_scoped_instance_per_scope() -> None:
    container = Container()
    await container.register_scoped(IRepository, MemoryRepository)

    async with container.create_scope() as scope:
        repo = await scope.resolve(IRepository)
        assert await scope.resolve(IRepository) is repo
        # The active scope is used by container.resolve as well
        assert await container.resolve(IRepository) is repo

    async with container.create_scope() as other_scope:
        assert await other_scope.resolve(IRepository) is not repo


@pytest.mark.asyncio
async def test_scoped_outside_scope_raises() -> None:
    container = Container()
    await container.register_scoped(IRepository, MemoryRepository)

    with pytest.raises(ScopeError):
        await container.resolve(IRepository)


@pytest.mark.asyncio
async def test_nested_scopes() -> None:
    container = Container()
    await container.register_scoped(IRepository, MemoryRepository)

    async with container.create_scope() as parent_scope:
        repo = await parent_scope.resolve(IRepository)

        async with parent_scope.create_scope() as nested_scope:
            nested_repo = await nested_scope.resolve(IRepository)

        assert repo is not nested_repo
        assert nested_scope.parent is parent_scope
        assert isinstance(nested_scope, ScopeProtocol)
        assert nested_scope.disposed

    # Verify parent scope is disposed
    with pytest.raises(ScopeError):
        await parent_scope.resolve(IRepository)


@pytest.mark.asyncio
async def test_self_registration() -> None:
    container = Container()
    await container.register_singleton(ConsoleLogger)

    assert isinstance(await container.resolve(ConsoleLogger), ConsoleLogger)


@pytest.mark.asyncio
async def test_register_instance() -> None:
    container = Container()
    settings = Settings("sqlite://")
    await container.register_instance(Settings, settings)

    assert await container.resolve(Settings) is settings


@pytest.mark.asyncio
async def test_sync_and_async_factories() -> None:
    container = Container()

    async def make_repository(c: Container) -> MemoryRepository:
        return MemoryRepository()

    await container.register_singleton(Settings, lambda c: Settings("postgres://"))
    await container.register_transient(IRepository, make_repository)

    assert (await container.resolve(Settings)).dsn == "postgres://"
    assert isinstance(await container.resolve(IRepository), MemoryRepository)


@pytest.mark.asyncio
async def test_failing_factory_is_wrapped() -> None:
    container = Container()

    def broken(c: Container) -> Settings:
        raise ValueError("no dsn configured")

    await container.register_singleton(Settings, broken)

    with pytest.raises(DIServiceCreationError) as exc_info:
        await container.resolve(Settings)
    assert isinstance(exc_info.value.__cause__, ValueError)
    assert exc_info.value.code == "DI_SERVICE_CREATION"


@pytest.mark.asyncio
async def test_resolve_unregistered() -> None:
    container = Container()

    with pytest.raises(DIServiceNotFoundError) as exc_info:
        await container.resolve(ILogger)
    assert exc_info.value.context["is_protocol"] is True
    assert await container.resolve_optional(ILogger) is None


@pytest.mark.asyncio
async def test_duplicate_registration() -> None:
    container = Container()
    await container.register_singleton(IRepository, MemoryRepository)

    with pytest.raises(DuplicateRegistrationError):
        await container.register_transient(IRepository, OtherRepository)


@pytest.mark.asyncio
async def test_replace_registration_drops_cached_instance() -> None:
    container = Container()
    await container.register_singleton(IRepository, MemoryRepository)
    original = await container.resolve(IRepository)

    await container.register_singleton(IRepository, OtherRepository, replace=True)
    replacement = await container.resolve(IRepository)

    assert isinstance(replacement, OtherRepository)
    assert replacement is not original


@pytest.mark.asyncio
async def test_registration_queries() -> None:
    container = Container()
    await container.register_singleton(ILogger, ConsoleLogger)

    assert await container.has_registration(ILogger)
    assert not await container.has_registration(IRepository)
    assert not await container.has_registration([ILogger])
    assert await container.get_registration_keys() == [f"{__name__}.ILogger"]


@pytest.mark.asyncio
async def test_container_provides_itself() -> None:
    container = Container()

    assert await container.resolve(ContainerProtocol) is container
    assert await container.resolve(Container) is container
    built = await container.create_instance(NeedsContainer)
    assert built.container is container


@pytest.mark.asyncio
async def test_create_with_configurator() -> None:
    async def configure(container: Container) -> None:
        await container.register_singleton(ILogger, ConsoleLogger)
        await container.register_scoped(IRepository, MemoryRepository)

    container = await Container.create(configure)

    assert isinstance(await container.resolve(ILogger), ConsoleLogger)
    async with container.create_scope() as scope:
        assert isinstance(await scope.resolve(IRepository), MemoryRepository)


@pytest.mark.asyncio
async def test_create_disposes_on_configuration_error() -> None:
    created: list[Container] = []

    async def configure(container: Container) -> None:
        created.append(container)
        raise RuntimeError("bad configuration")

    with pytest.raises(RuntimeError):
        await Container.create(configure)

    with pytest.raises(ContainerDisposedError):
        await created[0].register_singleton(ILogger, ConsoleLogger)
