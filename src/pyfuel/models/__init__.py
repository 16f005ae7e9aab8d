"""Data models for pyfuel records."""

from pyfuel.models._base import FuelBaseModel
from pyfuel.models.fuel_type import FuelType
from pyfuel.models.geo import Bounds, LatLng
from pyfuel.models.review import Review
from pyfuel.models.station import Service, Station
from pyfuel.models.trip import RouteResult, TripCalculation, TripRequest

__all__ = [
    "Bounds",
    "FuelBaseModel",
    "FuelType",
    "LatLng",
    "Review",
    "RouteResult",
    "Service",
    "Station",
    "TripCalculation",
    "TripRequest",
]
