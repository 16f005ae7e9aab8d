"""Fuel type / price endpoints."""

from __future__ import annotations

from pyfuel._api._common import fetch_rows
from pyfuel._transport import Transport
from pyfuel.config import FuelConfig
from pyfuel.models.fuel_type import FuelType


async def fetch_fuel_types(config: FuelConfig, transport: Transport) -> list[FuelType]:
    """Fetch all fuel types with their current prices."""
    rows = await fetch_rows(
        config=config,
        transport=transport,
        table="fuel_types",
        params={"select": "*"},
    )
    return [FuelType.model_validate(row) for row in rows]
