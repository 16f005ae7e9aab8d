"""Station listing endpoints."""

from __future__ import annotations

from pyfuel._api._common import fetch_rows, ilike_pattern
from pyfuel._transport import Transport
from pyfuel.config import FuelConfig
from pyfuel.exceptions import FuelApiError
from pyfuel.models.station import Station

_STATIONS_TABLE = "stations"
_SELECT_WITH_SERVICES = "*,services(*)"


async def fetch_stations(config: FuelConfig, transport: Transport) -> list[Station]:
    """Fetch every station with its nested services."""
    rows = await fetch_rows(
        config=config,
        transport=transport,
        table=_STATIONS_TABLE,
        params={"select": _SELECT_WITH_SERVICES},
    )
    return [Station.model_validate(row) for row in rows]


async def fetch_station(config: FuelConfig, transport: Transport, station_id: str) -> Station:
    """Fetch a single station by id."""
    rows = await fetch_rows(
        config=config,
        transport=transport,
        table=_STATIONS_TABLE,
        params={"select": _SELECT_WITH_SERVICES, "id": f"eq.{station_id}"},
    )
    if not rows:
        raise FuelApiError(f"Station {station_id} not found", status_code=404, endpoint=_STATIONS_TABLE)
    return Station.model_validate(rows[0])


async def search_stations(config: FuelConfig, transport: Transport, query: str) -> list[Station]:
    """Server-side case-insensitive name search."""
    rows = await fetch_rows(
        config=config,
        transport=transport,
        table=_STATIONS_TABLE,
        params={"select": _SELECT_WITH_SERVICES, "name": ilike_pattern(query)},
    )
    return [Station.model_validate(row) for row in rows]


async def search_stations_by_service(config: FuelConfig, transport: Transport, service_name: str) -> list[Station]:
    """Server-side filter on the joined service names.

    The ``!inner`` join drops stations without a matching service.
    """
    rows = await fetch_rows(
        config=config,
        transport=transport,
        table=_STATIONS_TABLE,
        params={"select": "*,services!inner(*)", "services.name": ilike_pattern(service_name)},
    )
    return [Station.model_validate(row) for row in rows]
