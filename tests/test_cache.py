from __future__ import annotations

from datetime import timedelta
from pathlib import Path

import pytest
from _fakes import ManualClock, fuel_type_row, station_row

from pyfuel.cache import CacheDomain, CacheRecord, TtlCacheStore
from pyfuel.models.fuel_type import FuelType
from pyfuel.models.geo import LatLng
from pyfuel.models.station import Station
from pyfuel.storage import JsonFileStore, MemoryStore


class _BrokenStore(MemoryStore):
    async def set(self, key: str, value: str) -> None:
        raise OSError("disk full")


def _stations() -> list[Station]:
    return [
        Station.model_validate(station_row("1", "North", 24.7, 46.6, ["Car Wash"])),
        Station.model_validate(station_row("2", "South", 24.6, 46.7)),
    ]


def test_domain_ttls() -> None:
    assert CacheDomain.LISTINGS.ttl == timedelta(hours=24)
    assert CacheDomain.PRICES.ttl == timedelta(hours=6)
    assert CacheDomain.LAST_LOCATION.ttl == timedelta(hours=1)
    assert CacheDomain.LISTINGS.value == "cached_stations"


@pytest.mark.asyncio
@pytest.mark.parametrize("domain", list(CacheDomain))
async def test_ttl_boundary(clock: ManualClock, domain: CacheDomain) -> None:
    values = {
        CacheDomain.LISTINGS: _stations(),
        CacheDomain.PRICES: [FuelType.model_validate(fuel_type_row("91", "Gasoline 91", 2.18))],
        CacheDomain.LAST_LOCATION: LatLng(latitude=24.7, longitude=46.6),
    }
    store = TtlCacheStore(MemoryStore(), clock=clock)
    await store.put(domain, values[domain])

    clock.advance(domain.ttl - timedelta(seconds=1))
    assert await store.get(domain) == values[domain]
    assert await store.is_stale(domain) is False

    clock.advance(timedelta(seconds=2))
    assert await store.get(domain) is None


@pytest.mark.asyncio
async def test_expired_record_is_still_a_record(clock: ManualClock) -> None:
    store = TtlCacheStore(MemoryStore(), clock=clock)
    await store.put(CacheDomain.LISTINGS, _stations())
    clock.advance(timedelta(hours=25))

    assert await store.get(CacheDomain.LISTINGS) is None
    assert await store.has_record(CacheDomain.LISTINGS) is True
    assert await store.is_stale(CacheDomain.LISTINGS) is True
    assert await store.get(CacheDomain.LISTINGS, include_expired=True) == _stations()


@pytest.mark.asyncio
async def test_missing_record(clock: ManualClock) -> None:
    store = TtlCacheStore(MemoryStore(), clock=clock)

    assert await store.get(CacheDomain.PRICES) is None
    assert await store.has_record(CacheDomain.PRICES) is False
    assert await store.is_stale(CacheDomain.PRICES) is True
    assert await store.written_at(CacheDomain.PRICES) is None


@pytest.mark.asyncio
async def test_put_overwrites_and_restamps(clock: ManualClock) -> None:
    store = TtlCacheStore(MemoryStore(), clock=clock)
    await store.put(CacheDomain.LAST_LOCATION, LatLng(latitude=1.0, longitude=2.0))
    clock.advance(timedelta(minutes=50))
    await store.put(CacheDomain.LAST_LOCATION, LatLng(latitude=3.0, longitude=4.0))
    clock.advance(timedelta(minutes=50))

    assert await store.get(CacheDomain.LAST_LOCATION) == LatLng(latitude=3.0, longitude=4.0)
    assert await store.written_at(CacheDomain.LAST_LOCATION) == clock.now - timedelta(minutes=50)


@pytest.mark.asyncio
async def test_corrupt_record_reads_as_miss(clock: ManualClock) -> None:
    backend = MemoryStore()
    store = TtlCacheStore(backend, clock=clock)
    await backend.set(CacheDomain.LISTINGS.value, "{not json")

    assert await store.get(CacheDomain.LISTINGS, include_expired=True) is None
    assert await store.is_stale(CacheDomain.LISTINGS) is True


@pytest.mark.asyncio
async def test_payload_of_wrong_shape_reads_as_miss(clock: ManualClock) -> None:
    backend = MemoryStore()
    store = TtlCacheStore(backend, clock=clock)
    record = CacheRecord(
        domain_key=CacheDomain.PRICES.value,
        payload='{"unexpected": true}',
        written_at=clock.now,
        ttl=CacheDomain.PRICES.ttl,
    )
    await backend.set(CacheDomain.PRICES.value, record.model_dump_json())

    assert await store.get(CacheDomain.PRICES) is None
    assert await store.has_record(CacheDomain.PRICES) is True


@pytest.mark.asyncio
async def test_put_failure_is_swallowed(clock: ManualClock) -> None:
    store = TtlCacheStore(_BrokenStore(), clock=clock)

    await store.put(CacheDomain.LISTINGS, _stations())

    assert await store.get(CacheDomain.LISTINGS) is None


@pytest.mark.asyncio
async def test_domains_are_partitioned(clock: ManualClock) -> None:
    store = TtlCacheStore(MemoryStore(), clock=clock)
    await store.put(CacheDomain.LAST_LOCATION, LatLng(latitude=1.0, longitude=2.0))

    assert await store.has_record(CacheDomain.LISTINGS) is False

    await store.clear_all()
    assert await store.has_record(CacheDomain.LAST_LOCATION) is False


@pytest.mark.asyncio
async def test_undecodable_file_reads_as_miss(clock: ManualClock, tmp_path: Path) -> None:
    (tmp_path / "cached_stations.json").write_bytes(b"\xff\xfe\x00garbage")
    store = TtlCacheStore(JsonFileStore(tmp_path), clock=clock)

    assert await store.get(CacheDomain.LISTINGS, include_expired=True) is None
    assert await store.is_stale(CacheDomain.LISTINGS) is True
    assert await store.written_at(CacheDomain.LISTINGS) is None
    assert await store.has_record(CacheDomain.LISTINGS) is True
