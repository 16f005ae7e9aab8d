"""High-level async client for fuel station data and trip costs."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import aiohttp

from pyfuel._api import listings as _listings_api
from pyfuel._api import reviews as _reviews_api
from pyfuel._transport import HttpTransport, Transport
from pyfuel.cache import TtlCacheStore
from pyfuel.config import FuelConfig
from pyfuel.connectivity import ConnectivityMonitor, ConnectivitySource, QueueConnectivitySource
from pyfuel.exceptions import FuelError
from pyfuel.models.review import Review
from pyfuel.models.station import Station
from pyfuel.retry import RetryPolicy
from pyfuel.storage import JsonFileStore, KeyValueStore, MemoryStore
from pyfuel.sync.listings import ListingsSync
from pyfuel.sync.location import LocationProvider, LocationSync
from pyfuel.sync.prices import PricesSync
from pyfuel.sync.trip import TripSync

_logger = logging.getLogger(__name__)


class FuelClient:
    """Async client for the station backend and the routing service.

    Usage::

        async with FuelClient(FuelConfig.from_env()) as client:
            await client.stations.load()
            for station in client.stations.stations:
                print(station.name)

    The client owns the HTTP session (unless one is passed in), the cache,
    the connectivity monitor and one controller per data domain.
    """

    def __init__(
        self,
        config: FuelConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
        store: KeyValueStore | None = None,
        connectivity: ConnectivitySource | None = None,
        location_provider: LocationProvider | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        config.validate()
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._custom_transport = transport
        self._transport: Transport | None = None
        self._store = store
        self._connectivity = connectivity or QueueConnectivitySource()
        self._location_provider = location_provider
        self._sleep = sleep
        self._cache: TtlCacheStore | None = None
        self._monitor: ConnectivityMonitor | None = None
        self._stations: ListingsSync | None = None
        self._prices: PricesSync | None = None
        self._trip: TripSync | None = None
        self._location: LocationSync | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> FuelClient:
        if self._custom_transport is not None:
            self._transport = self._custom_transport
        else:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = HttpTransport(self._http_session, default_timeout=self._config.request_timeout)

        store = self._store
        if store is None:
            store = JsonFileStore(self._config.cache_dir) if self._config.cache_dir else MemoryStore()
        self._cache = TtlCacheStore(store)

        self._monitor = ConnectivityMonitor(self._connectivity)
        self._monitor.start()

        policy = RetryPolicy(
            max_attempts=self._config.retry_max_attempts,
            initial_delay=self._config.retry_initial_delay,
            max_delay=self._config.retry_max_delay,
        )
        common: dict[str, Any] = {"monitor": self._monitor, "retry_policy": policy, "sleep": self._sleep}
        self._stations = ListingsSync(self._config, self._transport, cache=self._cache, **common)
        self._prices = PricesSync(self._config, self._transport, cache=self._cache, **common)
        self._trip = TripSync(self._config, self._transport, **common)
        if self._location_provider is not None:
            self._location = LocationSync(self._location_provider, cache=self._cache, sleep=self._sleep)
        _logger.debug("FuelClient ready (cache: %s)", type(store).__name__)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        for controller in (self._stations, self._prices, self._trip, self._location):
            if controller is not None:
                await controller.aclose()
        self._stations = self._prices = self._trip = None
        self._location = None
        if self._monitor is not None:
            await self._monitor.stop()
            self._monitor = None
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None
        self._cache = None

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise FuelError("Client not initialized. Use 'async with FuelClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Controllers
    # ------------------------------------------------------------------

    @property
    def stations(self) -> ListingsSync:
        if self._stations is None:
            raise FuelError("Client not initialized. Use 'async with FuelClient(...) as client:'")
        return self._stations

    @property
    def prices(self) -> PricesSync:
        if self._prices is None:
            raise FuelError("Client not initialized. Use 'async with FuelClient(...) as client:'")
        return self._prices

    @property
    def trip(self) -> TripSync:
        if self._trip is None:
            raise FuelError("Client not initialized. Use 'async with FuelClient(...) as client:'")
        return self._trip

    @property
    def location(self) -> LocationSync:
        if self._location is None:
            raise FuelError("No location provider configured")
        return self._location

    @property
    def cache(self) -> TtlCacheStore:
        if self._cache is None:
            raise FuelError("Client not initialized. Use 'async with FuelClient(...) as client:'")
        return self._cache

    @property
    def monitor(self) -> ConnectivityMonitor:
        if self._monitor is None:
            raise FuelError("Client not initialized. Use 'async with FuelClient(...) as client:'")
        return self._monitor

    # ------------------------------------------------------------------
    # Direct reads and writes
    # ------------------------------------------------------------------

    async def get_station(self, station_id: str) -> Station:
        """Fetch one station with its services, bypassing the cache."""
        return await _listings_api.fetch_station(self._config, self._require_transport(), station_id)

    async def search_stations(self, query: str) -> list[Station]:
        """Server-side case-insensitive name search.

        Unlike :meth:`ListingsSync.search` this queries the backend directly
        and neither reads nor updates the cache.
        """
        return await _listings_api.search_stations(self._config, self._require_transport(), query)

    async def search_stations_by_service(self, service_name: str) -> list[Station]:
        """Server-side search for stations offering *service_name*."""
        return await _listings_api.search_stations_by_service(self._config, self._require_transport(), service_name)

    async def get_reviews(self, station_id: str) -> list[Review]:
        """Reviews for *station_id*, newest first."""
        return await _reviews_api.fetch_reviews(self._config, self._require_transport(), station_id)

    async def get_average_rating(self, station_id: str) -> float:
        """Mean rating of *station_id*; ``0.0`` when it has no reviews."""
        return await _reviews_api.fetch_average_rating(self._config, self._require_transport(), station_id)

    async def submit_review(self, review: Review) -> None:
        """Insert *review*.  Errors propagate; nothing is retried or cached."""
        await _reviews_api.submit_review(self._config, self._require_transport(), review)
