"""Durable per-domain cache with freshness bookkeeping.

Each data domain owns exactly one record, overwritten wholesale on every
successful fetch.  The lifetime of a record is bound to the domain (24h for
listings, 6h for prices, 1h for the last known position) and cannot be
chosen by the caller.

Caching is best-effort: a failed write is logged and swallowed, and an
unreadable record reads as a miss, so the cache can never break the
primary data flow.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, TypeAdapter

from pyfuel._constants import LAST_LOCATION_TTL, LISTINGS_TTL, PRICES_TTL
from pyfuel.exceptions import FuelCacheError
from pyfuel.models.fuel_type import FuelType
from pyfuel.models.geo import LatLng
from pyfuel.models.station import Station
from pyfuel.storage import KeyValueStore

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class CacheDomain(StrEnum):
    """Cached data domains; the value is the storage key."""

    LISTINGS = "cached_stations"
    PRICES = "cached_fuel_types"
    LAST_LOCATION = "cached_last_location"

    @property
    def ttl(self) -> timedelta:
        return _DOMAIN_TTLS[self]


_DOMAIN_TTLS: dict[CacheDomain, timedelta] = {
    CacheDomain.LISTINGS: LISTINGS_TTL,
    CacheDomain.PRICES: PRICES_TTL,
    CacheDomain.LAST_LOCATION: LAST_LOCATION_TTL,
}

_DOMAIN_ADAPTERS: dict[CacheDomain, TypeAdapter[Any]] = {
    CacheDomain.LISTINGS: TypeAdapter(list[Station]),
    CacheDomain.PRICES: TypeAdapter(list[FuelType]),
    CacheDomain.LAST_LOCATION: TypeAdapter(LatLng),
}


class CacheRecord(BaseModel):
    """One stored cache entry."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    domain_key: str
    payload: str
    written_at: datetime
    ttl: timedelta

    def is_expired(self, now: datetime) -> bool:
        return now - self.written_at >= self.ttl


class TtlCacheStore:
    """Per-domain cache over a :class:`~pyfuel.storage.KeyValueStore`.

    ``has_record`` and ``is_stale`` are independent: an expired record is
    still a record, which is what lets a controller fall back to it when the
    network is gone.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._clock = clock

    async def put(self, domain: CacheDomain, value: Any) -> None:
        """Serialize and store *value* for *domain*; never raises."""
        try:
            payload = _DOMAIN_ADAPTERS[domain].dump_json(value).decode("utf-8")
            record = CacheRecord(
                domain_key=domain.value,
                payload=payload,
                written_at=self._clock(),
                ttl=domain.ttl,
            )
            await self._store.set(domain.value, record.model_dump_json())
        except Exception as exc:
            _logger.warning("Failed to cache %s: %s", domain.name, exc, exc_info=True)

    async def _read_record(self, domain: CacheDomain) -> CacheRecord:
        try:
            raw = await self._store.get(domain.value)
        except ValueError as exc:
            raise FuelCacheError(f"Unreadable cache record for {domain.name}") from exc
        if raw is None:
            raise KeyError(domain.value)
        try:
            return CacheRecord.model_validate_json(raw)
        except ValueError as exc:
            raise FuelCacheError(f"Corrupt cache record for {domain.name}") from exc

    async def get(self, domain: CacheDomain, *, include_expired: bool = False) -> Any | None:
        """Return the cached value, or ``None`` when missing, expired or unreadable.

        ``include_expired=True`` skips the freshness gate; controllers use it
        for the offline fallback.
        """
        try:
            record = await self._read_record(domain)
            if not include_expired and record.is_expired(self._clock()):
                _logger.debug("Cache for %s expired (written %s)", domain.name, record.written_at)
                return None
            return _DOMAIN_ADAPTERS[domain].validate_json(record.payload)
        except KeyError:
            return None
        except (FuelCacheError, ValueError, OSError) as exc:
            _logger.warning("Failed to read cached %s: %s", domain.name, exc)
            return None

    async def has_record(self, domain: CacheDomain) -> bool:
        """Whether a record exists for *domain*, expired or not."""
        try:
            return await self._store.contains(domain.value)
        except OSError as exc:
            _logger.warning("Failed to query cache for %s: %s", domain.name, exc)
            return False

    async def is_stale(self, domain: CacheDomain) -> bool:
        """Whether the record has outlived its TTL.  Missing records are stale."""
        try:
            record = await self._read_record(domain)
        except KeyError:
            return True
        except (FuelCacheError, OSError) as exc:
            _logger.warning("Failed to read cached %s: %s", domain.name, exc)
            return True
        return record.is_expired(self._clock())

    async def written_at(self, domain: CacheDomain) -> datetime | None:
        """Timestamp of the stored record, if readable."""
        try:
            return (await self._read_record(domain)).written_at
        except (KeyError, FuelCacheError, OSError):
            return None

    async def clear(self, domain: CacheDomain) -> None:
        await self._store.delete(domain.value)

    async def clear_all(self) -> None:
        for domain in CacheDomain:
            await self._store.delete(domain.value)
