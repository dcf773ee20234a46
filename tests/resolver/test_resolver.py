"""Tests for Resolver.get, get_as and get_all."""

from __future__ import annotations

import pytest

from getall.di import (
    DIServiceCreationError,
    DIServiceNotFoundError,
    TypeMismatchError,
)
from getall.logging import LoggerProtocol
from getall.resolver import Resolver
from getall.scanner import DiscoveryMemory
from sample_app import jobs, tracking
from sample_app.basic import (
    HandlerA1,
    HandlerA2,
    HandlerB1,
    HandlerCxD,
    Inheriter1,
    MyBaseClass,
    MyGenericInterface,
    MyNonGenericInterface,
    NotificationA,
    NotificationB,
    NotificationC,
    NotificationD,
    Unrelated,
)
from sample_app.services import Clock, FixedClock, ReportService


async def collect(resolver: Resolver, capability):
    return [item async for item in resolver.get_all(capability)]


class TestGetAll:
    """Building every implementation of a capability."""

    @pytest.mark.asyncio
    async def test_handlers_per_notification(self, resolver: Resolver) -> None:
        handlers_a = await collect(resolver, MyGenericInterface[NotificationA])
        assert len(handlers_a) == 2
        assert {type(h) for h in handlers_a} == {HandlerA1, HandlerA2}

        handlers_b = await collect(resolver, MyGenericInterface[NotificationB])
        assert [type(h) for h in handlers_b] == [HandlerB1]

        assert await collect(resolver, MyGenericInterface[Unrelated]) == []

    @pytest.mark.asyncio
    async def test_multiple_capabilities_share_one_type(
        self, resolver: Resolver, container
    ) -> None:
        [for_c] = await collect(resolver, MyGenericInterface[NotificationC])
        [for_d] = await collect(resolver, MyGenericInterface[NotificationD])
        assert type(for_c) is HandlerCxD
        assert type(for_d) is HandlerCxD
        assert for_c is not for_d

        memory = await container.resolve(DiscoveryMemory)
        assert len(memory.cache) == 2

    @pytest.mark.asyncio
    async def test_not_implemented_results_are_cached_empty(
        self, resolver: Resolver, container
    ) -> None:
        assert await collect(resolver, MyGenericInterface[Unrelated]) == []
        assert await collect(resolver, jobs.MissingDependency) == []

        memory = await container.resolve(DiscoveryMemory)
        assert memory.cache.keys() == [
            MyGenericInterface[Unrelated],
            jobs.MissingDependency,
        ]
        assert memory.cache.get(jobs.MissingDependency) == ()

    @pytest.mark.asyncio
    async def test_instances_are_built_lazily(self, resolver: Resolver) -> None:
        tracking.constructed.clear()

        iterator = resolver.get_all(tracking.Tracked)
        assert tracking.constructed == []

        first = await anext(iterator)
        assert isinstance(first, tracking.TrackedFirst)
        assert tracking.constructed == ["first"]

        rest = [item async for item in iterator]
        assert [type(r) for r in rest] == [tracking.TrackedSecond, tracking.TrackedThird]
        assert tracking.constructed == ["first", "second", "third"]

    @pytest.mark.asyncio
    async def test_iteration_is_single_pass(self, resolver: Resolver) -> None:
        iterator = resolver.get_all(MyBaseClass)
        assert len([item async for item in iterator]) == 2
        assert [item async for item in iterator] == []

    @pytest.mark.asyncio
    async def test_each_call_builds_fresh_instances(self, resolver: Resolver) -> None:
        first = await collect(resolver, MyNonGenericInterface)
        second = await collect(resolver, MyNonGenericInterface)
        assert len(first) == len(second) == 1
        assert first[0] is not second[0]

    @pytest.mark.asyncio
    async def test_build_failure_surfaces_at_the_failing_step(
        self, resolver: Resolver
    ) -> None:
        iterator = resolver.get_all(jobs.Job)

        assert isinstance(await anext(iterator), jobs.GoodJob)
        with pytest.raises(DIServiceCreationError) as exc_info:
            await anext(iterator)
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert "boom" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_discovery_happens_before_iteration(self, resolver: Resolver) -> None:
        resolver.get_all(jobs.Job)
        assert jobs.Job in resolver.scanner.memory.cache


class TestGet:
    @pytest.mark.asyncio
    async def test_builds_unregistered_type_with_dependencies(
        self, resolver: Resolver, container, recording_logger
    ) -> None:
        await container.register_singleton(Clock, FixedClock)

        report = await resolver.get(ReportService)

        assert isinstance(report, ReportService)
        assert isinstance(report.clock, FixedClock)
        assert report.logger is recording_logger
        assert report.render() == "daily@42"

    @pytest.mark.asyncio
    async def test_each_call_builds_a_new_instance(
        self, resolver: Resolver, container
    ) -> None:
        await container.register_singleton(Clock, FixedClock)

        first = await resolver.get(ReportService)
        second = await resolver.get(ReportService)

        assert first is not second
        assert first.clock is second.clock

    @pytest.mark.asyncio
    async def test_missing_dependency(self, resolver: Resolver) -> None:
        with pytest.raises(DIServiceNotFoundError) as exc_info:
            await resolver.get(ReportService)
        assert exc_info.value.context["parameter"] == "clock"
        assert exc_info.value.context["requested_by"].endswith("ReportService")

    @pytest.mark.asyncio
    async def test_resolver_can_build_itself_into_consumers(
        self, resolver: Resolver, container
    ) -> None:
        assert await container.resolve(Resolver) is resolver
        assert await container.resolve(LoggerProtocol) is not None


class TestGetAs:
    @pytest.mark.asyncio
    async def test_builds_runtime_type(self, resolver: Resolver) -> None:
        instance = await resolver.get_as(MyBaseClass, Inheriter1)
        assert isinstance(instance, Inheriter1)

    @pytest.mark.asyncio
    async def test_discovered_types_can_be_built_one_by_one(
        self, resolver: Resolver
    ) -> None:
        capability = MyGenericInterface[NotificationA]
        built = [
            await resolver.get_as(capability, implementation)
            for implementation in resolver.discover_types(capability)
        ]
        assert [type(b) for b in built] == [HandlerA1, HandlerA2]

    @pytest.mark.asyncio
    async def test_mismatch_fails_before_building(self, resolver: Resolver) -> None:
        tracking.constructed.clear()
        with pytest.raises(TypeMismatchError) as exc_info:
            await resolver.get_as(MyBaseClass, tracking.TrackedFirst)
        assert tracking.constructed == []
        assert exc_info.value.code == "DI_TYPE_MISMATCH"

    @pytest.mark.asyncio
    async def test_unsatisfied_dependency_propagates(self, resolver: Resolver) -> None:
        with pytest.raises(DIServiceNotFoundError):
            await resolver.get_as(jobs.Job, jobs.NeedsMissing)
