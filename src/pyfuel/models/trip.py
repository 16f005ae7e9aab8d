"""Routing and trip cost models.

:class:`TripRequest` follows the "validate, normalize, execute" flow used by
client entrypoints: invalid input fails at construction, before any network
call is made.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from pyfuel.models._base import FuelBaseModel
from pyfuel.models.fuel_type import FuelType
from pyfuel.models.geo import LatLng


class RouteResult(FuelBaseModel):
    """First route returned by the routing service.

    Parameters
    ----------
    distance : float
        Route length in metres.
    duration : float
        Expected travel time in seconds.
    geometry : str
        polyline6-encoded route geometry.
    """

    distance: float
    duration: float
    geometry: str = ""

    @property
    def distance_km(self) -> float:
        return self.distance / 1000


class TripRequest(BaseModel):
    """Inputs of a trip cost calculation."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
    )

    origin: LatLng
    destination: LatLng
    fuel_type: FuelType
    consumption_rate: float = Field(gt=0, description="Litres per 100 km")


class TripCalculation(BaseModel):
    """Result of a trip cost calculation.

    ``fuel_needed = distance_km / 100 * consumption_rate`` and
    ``total_cost = fuel_needed * fuel_type.price``.
    """

    model_config = ConfigDict(frozen=True)

    distance_km: float
    duration_s: float
    fuel_needed: float
    total_cost: float
    currency: str
    fuel_type: FuelType
    route: list[LatLng] = Field(default_factory=list)

    @classmethod
    def from_route(cls, request: TripRequest, route: RouteResult, coordinates: list[LatLng]) -> TripCalculation:
        distance_km = route.distance_km
        fuel_needed = (distance_km / 100) * request.consumption_rate
        return cls(
            distance_km=distance_km,
            duration_s=route.duration,
            fuel_needed=fuel_needed,
            total_cost=fuel_needed * request.fuel_type.price,
            currency=request.fuel_type.currency,
            fuel_type=request.fuel_type,
            route=coordinates,
        )
