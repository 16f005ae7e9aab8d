"""Trip cost controller."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from pyfuel._api.routing import fetch_route
from pyfuel._transport import Transport
from pyfuel.config import FuelConfig
from pyfuel.geo import polyline
from pyfuel.models.fuel_type import FuelType
from pyfuel.models.geo import LatLng
from pyfuel.models.trip import TripCalculation, TripRequest
from pyfuel.sync.controller import DomainSyncController
from pyfuel.sync.state import Idle, SyncState

_logger = logging.getLogger(__name__)


class TripSync(DomainSyncController[TripCalculation]):
    """Route and fuel cost for one origin/destination pair.

    Routes are never cached; without a network the controller ends in
    ``Failed`` and recalculates the stored request once connectivity
    returns.
    """

    def __init__(self, config: FuelConfig, transport: Transport, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._config = config
        self._transport = transport
        self._request: TripRequest | None = None
        self._active_request: TripRequest | None = None

    @property
    def request(self) -> TripRequest | None:
        return self._request

    async def calculate(
        self,
        origin: LatLng,
        destination: LatLng,
        fuel_type: FuelType,
        consumption_rate: float,
    ) -> SyncState[TripCalculation]:
        """Validate the inputs, remember them and run a load.

        Raises
        ------
        ValueError
            If ``consumption_rate`` is not positive.
        """
        self._request = TripRequest(
            origin=origin,
            destination=destination,
            fuel_type=fuel_type,
            consumption_rate=consumption_rate,
        )
        return await self.load()

    async def load(self) -> SyncState[TripCalculation]:
        """Run a load for the current request.

        Overlapping loads are merged only when they price the same request;
        a changed request waits for the running calculation to finish and
        then starts its own.
        """
        request = self._request
        while self.is_loading and self._active_request != request:
            inflight = self._inflight
            if inflight is not None:
                _logger.debug("Trip request changed; waiting for the previous calculation")
                await asyncio.wait({inflight})
        self._active_request = request
        return await super().load()

    async def _fetch(self) -> TripCalculation:
        request = self._active_request
        if request is None:
            raise RuntimeError("No trip request; call calculate() first")
        route = await fetch_route(self._config, self._transport, request.origin, request.destination)
        coordinates = polyline.decode(route.geometry)
        calculation = TripCalculation.from_route(request, route, coordinates)
        _logger.debug(
            "Trip %.1f km, %.2f L, %.2f %s",
            calculation.distance_km,
            calculation.fuel_needed,
            calculation.total_cost,
            calculation.currency,
        )
        return calculation

    def _can_auto_retry(self) -> bool:
        return self._request is not None

    def reset(self) -> None:
        self._request = None
        self._set_state(Idle())
