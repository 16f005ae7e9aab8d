"""Coordinate and map-bounds models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, model_validator


class LatLng(BaseModel):
    """A WGS84 coordinate in decimal degrees."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    latitude: float
    longitude: float

    @property
    def as_tuple(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)


class Bounds(BaseModel):
    """Visible map region, as reported by the map SDK.

    Parameters
    ----------
    southwest : LatLng
        South-west corner (minimum latitude and longitude).
    northeast : LatLng
        North-east corner (maximum latitude and longitude).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    southwest: LatLng
    northeast: LatLng

    @model_validator(mode="after")
    def _check_corners(self) -> Bounds:
        if self.southwest.latitude > self.northeast.latitude:
            raise ValueError("southwest latitude must not exceed northeast latitude")
        return self

    def contains(self, point: LatLng) -> bool:
        """Whether *point* lies inside the bounds (edges inclusive)."""
        return (
            self.southwest.latitude <= point.latitude <= self.northeast.latitude
            and self.southwest.longitude <= point.longitude <= self.northeast.longitude
        )
