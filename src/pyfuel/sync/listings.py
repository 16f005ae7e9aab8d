"""Station listings controller with local search, filters and map markers."""

from __future__ import annotations

from typing import Any

from pyfuel._api.listings import fetch_stations
from pyfuel._constants import MIN_POINTS_FOR_CLUSTERING
from pyfuel._transport import Transport
from pyfuel.cache import CacheDomain, TtlCacheStore
from pyfuel.config import FuelConfig
from pyfuel.geo.clustering import (
    Cluster,
    cluster_center,
    cluster_points,
    cluster_radius,
    points_in_bounds,
    should_cluster,
)
from pyfuel.models.geo import Bounds, LatLng
from pyfuel.models.station import Station
from pyfuel.sync.controller import DomainSyncController


def _station_position(station: Station) -> LatLng:
    return station.position


class ListingsSync(DomainSyncController[list[Station]]):
    """Station list for the map and list views.

    Search and service filters are applied locally to the loaded list and
    combine with each other.
    """

    def __init__(
        self,
        config: FuelConfig,
        transport: Transport,
        *,
        cache: TtlCacheStore | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(cache=cache, domain=CacheDomain.LISTINGS, **kwargs)
        self._config = config
        self._transport = transport
        self._query = ""
        self._service = ""

    async def _fetch(self) -> list[Station]:
        return await fetch_stations(self._config, self._transport)

    @property
    def search_query(self) -> str:
        return self._query

    @property
    def service_filter(self) -> str:
        return self._service

    @property
    def all_stations(self) -> list[Station]:
        return list(self.data or [])

    @property
    def stations(self) -> list[Station]:
        """Loaded stations narrowed by the active search and service filter."""
        result = self.all_stations
        if self._query:
            needle = self._query.lower()
            result = [station for station in result if needle in station.name.lower()]
        if self._service:
            result = [station for station in result if station.offers(self._service)]
        return result

    def search(self, query: str) -> list[Station]:
        self._query = query.strip()
        return self.stations

    def filter_by_service(self, service_name: str) -> list[Station]:
        self._service = service_name.strip()
        return self.stations

    def clear_filters(self) -> None:
        self._query = ""
        self._service = ""

    def station_by_id(self, station_id: str) -> Station | None:
        for station in self.all_stations:
            if station.id == station_id:
                return station
        return None

    def map_markers(self, bounds: Bounds, zoom: float) -> list[Cluster[Station]]:
        """Markers for the visible region at *zoom*.

        Zoomed out with more than ``MIN_POINTS_FOR_CLUSTERING`` stations in
        view, nearby stations are grouped; otherwise each station gets its
        own single-member marker.
        """
        visible = points_in_bounds(self.stations, bounds, key=_station_position)
        if should_cluster(zoom) and len(visible) > MIN_POINTS_FOR_CLUSTERING:
            return cluster_points(visible, cluster_radius(zoom), key=_station_position)
        return [
            Cluster(seed=station, members=(station,), center=cluster_center([station.position]))
            for station in visible
        ]
