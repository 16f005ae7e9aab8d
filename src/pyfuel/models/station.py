"""Station (facility listing) models."""

from __future__ import annotations

from pydantic import Field, field_validator

from pyfuel.models._base import FuelBaseModel
from pyfuel.models.geo import LatLng


class Service(FuelBaseModel):
    """An amenity offered by a station (car wash, shop, air...)."""

    id: str
    name: str
    icon: str = ""


class Station(FuelBaseModel):
    """A fuel station with its nested services.

    Parameters
    ----------
    id : str
        Backend identifier (UUID).
    name : str
        Display name.
    latitude, longitude : float
        Station position in decimal degrees.
    open_time, close_time : str
        Opening hours as ``HH:MM`` strings.
    services : list[Service]
        Services joined from the ``services`` table.
    average_rating : float or None
        Denormalized mean review rating, when the backend provides it.
    """

    id: str
    name: str
    latitude: float
    longitude: float
    open_time: str = ""
    close_time: str = ""
    services: list[Service] = Field(default_factory=list)
    average_rating: float | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: object) -> object:
        return str(value) if isinstance(value, int) else value

    @property
    def position(self) -> LatLng:
        return LatLng(latitude=self.latitude, longitude=self.longitude)

    @property
    def operating_hours(self) -> str:
        return f"{self.open_time} - {self.close_time}"

    def offers(self, service_query: str) -> bool:
        """Case-insensitive substring match against the station's service names."""
        needle = service_query.strip().lower()
        return any(needle in service.name.lower() for service in self.services)
