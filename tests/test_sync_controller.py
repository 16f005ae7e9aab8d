from __future__ import annotations

import asyncio
from datetime import timedelta

import pytest
from _fakes import ManualClock, RecordingSleep

from pyfuel.cache import CacheDomain, TtlCacheStore
from pyfuel.connectivity import ConnectivityMonitor, QueueConnectivitySource, TransportKind
from pyfuel.exceptions import FuelApiError, FuelNetworkError
from pyfuel.models.geo import LatLng
from pyfuel.retry import RetryPolicy
from pyfuel.storage import MemoryStore
from pyfuel.sync.controller import DomainSyncController
from pyfuel.sync.state import DataOrigin, Failed, Idle, Loading, Ready, SyncState

WIFI = (TransportKind.WIFI,)
OFFLINE = (TransportKind.NONE,)
HOME = LatLng(latitude=24.7, longitude=46.6)
WORK = LatLng(latitude=24.8, longitude=46.7)


class _ScriptedSync(DomainSyncController[LatLng]):
    """Controller whose fetch pops scripted outcomes."""

    def __init__(self, outcomes: list[LatLng | Exception], **kwargs: object) -> None:
        super().__init__(**kwargs)  # type: ignore[arg-type]
        self.outcomes = outcomes
        self.fetches = 0
        self.gate: asyncio.Event | None = None

    async def _fetch(self) -> LatLng:
        self.fetches += 1
        if self.gate is not None:
            await self.gate.wait()
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def _make(
    outcomes: list[LatLng | Exception],
    *,
    cache: TtlCacheStore | None = None,
    monitor: ConnectivityMonitor | None = None,
    sleep: RecordingSleep | None = None,
    states: list[SyncState[LatLng]] | None = None,
) -> _ScriptedSync:
    return _ScriptedSync(
        outcomes,
        cache=cache,
        domain=CacheDomain.LAST_LOCATION if cache is not None else None,
        monitor=monitor,
        retry_policy=RetryPolicy(),
        on_change=states.append if states is not None else None,
        sleep=sleep or RecordingSleep(),
    )


async def _settle() -> None:
    for _ in range(20):
        await asyncio.sleep(0)


@pytest.mark.asyncio
async def test_success_writes_cache_before_ready(clock: ManualClock) -> None:
    cache = TtlCacheStore(MemoryStore(), clock=clock)
    states: list[SyncState[LatLng]] = []
    controller = _make([HOME], cache=cache, states=states)

    assert isinstance(controller.state, Idle)
    state = await controller.load()

    assert state == Ready(data=HOME, origin=DataOrigin.FRESH)
    assert [type(s) for s in states] == [Loading, Ready]
    assert await cache.get(CacheDomain.LAST_LOCATION) == HOME
    assert controller.data == HOME
    assert controller.last_attempt_failed is False


@pytest.mark.asyncio
async def test_failure_falls_back_to_expired_cache(clock: ManualClock, sleep: RecordingSleep) -> None:
    cache = TtlCacheStore(MemoryStore(), clock=clock)
    await cache.put(CacheDomain.LAST_LOCATION, HOME)
    clock.advance(timedelta(hours=3))
    controller = _make([FuelNetworkError("offline")] * 3, cache=cache, sleep=sleep)

    state = await controller.load()

    assert isinstance(state, Ready)
    assert state.origin is DataOrigin.CACHED
    assert state.data == HOME
    assert state.advisory == "Showing saved data. offline"
    assert controller.fetches == 3
    assert sleep.delays == [1.0, 2.0]
    assert controller.last_attempt_failed is True


@pytest.mark.asyncio
async def test_failure_without_cache(clock: ManualClock) -> None:
    cache = TtlCacheStore(MemoryStore(), clock=clock)
    controller = _make([FuelApiError("bad request", status_code=400)], cache=cache)

    state = await controller.load()

    assert isinstance(state, Failed)
    assert state.has_cache is False
    assert state.message == "No data available. bad request Retry when connected."
    assert controller.fetches == 1


@pytest.mark.asyncio
async def test_controller_without_cache_domain_fails_directly() -> None:
    controller = _make([FuelApiError("nope")])

    state = await controller.load()

    assert isinstance(state, Failed)
    assert controller.data is None


@pytest.mark.asyncio
async def test_concurrent_loads_share_one_fetch() -> None:
    controller = _make([HOME])
    controller.gate = asyncio.Event()

    first = asyncio.create_task(controller.load())
    second = asyncio.create_task(controller.load())
    await _settle()
    assert controller.is_loading
    controller.gate.set()

    assert await first == await second == Ready(data=HOME)
    assert controller.fetches == 1
    assert controller.is_loading is False


@pytest.mark.asyncio
async def test_restore_reloads_once_after_failure(clock: ManualClock) -> None:
    cache = TtlCacheStore(MemoryStore(), clock=clock)
    monitor = ConnectivityMonitor(QueueConnectivitySource())
    controller = _make([FuelNetworkError("down")] * 3 + [WORK], cache=cache, monitor=monitor)

    assert isinstance(await controller.load(), Failed)

    monitor.handle_report(OFFLINE)
    monitor.handle_report(WIFI)
    monitor.handle_report(WIFI)
    await _settle()

    assert controller.fetches == 4
    assert controller.state == Ready(data=WORK)


@pytest.mark.asyncio
async def test_restore_ignored_after_success() -> None:
    monitor = ConnectivityMonitor(QueueConnectivitySource())
    controller = _make([HOME], monitor=monitor)
    await controller.load()

    monitor.handle_report(OFFLINE)
    monitor.handle_report(WIFI)
    await _settle()

    assert controller.fetches == 1


@pytest.mark.asyncio
async def test_restore_ignored_while_loading() -> None:
    monitor = ConnectivityMonitor(QueueConnectivitySource())
    controller = _make([FuelApiError("first"), HOME, HOME], monitor=monitor)
    await controller.load()

    controller.gate = asyncio.Event()
    pending = asyncio.create_task(controller.load())
    await _settle()

    monitor.handle_report(OFFLINE)
    monitor.handle_report(WIFI)
    await _settle()
    controller.gate.set()
    await pending

    assert controller.fetches == 2


@pytest.mark.asyncio
async def test_aclose_releases_subscription() -> None:
    monitor = ConnectivityMonitor(QueueConnectivitySource())
    controller = _make([FuelApiError("down"), HOME], monitor=monitor)
    await controller.load()

    await controller.aclose()
    monitor.handle_report(OFFLINE)
    monitor.handle_report(WIFI)
    await _settle()

    assert controller.fetches == 1
    assert isinstance(controller.state, Failed)


@pytest.mark.asyncio
async def test_failing_listener_does_not_break_load() -> None:
    def listener(_state: SyncState[LatLng]) -> None:
        raise RuntimeError("ui bug")

    controller = _ScriptedSync([HOME], on_change=listener)

    assert await controller.load() == Ready(data=HOME)


class _UnreadableStore(MemoryStore):
    async def get(self, key: str) -> str | None:
        raise RuntimeError("storage backend crashed")

    async def contains(self, key: str) -> bool:
        return True


@pytest.mark.asyncio
async def test_broken_cache_still_ends_in_failed(clock: ManualClock) -> None:
    cache = TtlCacheStore(_UnreadableStore(), clock=clock)
    monitor = ConnectivityMonitor(QueueConnectivitySource())
    controller = _make([FuelNetworkError("down")] * 3 + [WORK], cache=cache, monitor=monitor)

    state = await controller.load()

    assert isinstance(state, Failed)
    assert state.has_cache is False
    assert isinstance(state.error, FuelNetworkError)
    assert controller.last_attempt_failed is True

    monitor.handle_report(OFFLINE)
    monitor.handle_report(WIFI)
    await _settle()

    assert controller.fetches == 4
    assert controller.state == Ready(data=WORK)


def test_subclass_must_implement_fetch() -> None:
    class _NoFetch(DomainSyncController[LatLng]):
        pass

    with pytest.raises(TypeError):
        _NoFetch()  # type: ignore[abstract]
