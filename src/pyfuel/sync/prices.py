"""Fuel price controller."""

from __future__ import annotations

from typing import Any

from pyfuel._api.prices import fetch_fuel_types
from pyfuel._transport import Transport
from pyfuel.cache import CacheDomain, TtlCacheStore
from pyfuel.config import FuelConfig
from pyfuel.models.fuel_type import FuelType
from pyfuel.sync.controller import DomainSyncController


class PricesSync(DomainSyncController[list[FuelType]]):
    def __init__(
        self,
        config: FuelConfig,
        transport: Transport,
        *,
        cache: TtlCacheStore | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(cache=cache, domain=CacheDomain.PRICES, **kwargs)
        self._config = config
        self._transport = transport

    async def _fetch(self) -> list[FuelType]:
        return await fetch_fuel_types(self._config, self._transport)

    @property
    def fuel_types(self) -> list[FuelType]:
        return list(self.data or [])

    def fuel_type_by_id(self, fuel_type_id: str) -> FuelType | None:
        for fuel_type in self.fuel_types:
            if fuel_type.id == fuel_type_id:
                return fuel_type
        return None

    def fuel_type_by_name(self, name: str) -> FuelType | None:
        """Case-insensitive exact name lookup."""
        wanted = name.strip().lower()
        for fuel_type in self.fuel_types:
            if fuel_type.name.lower() == wanted:
                return fuel_type
        return None
