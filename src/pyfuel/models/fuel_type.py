"""Fuel type (priced commodity) model."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import field_validator

from pyfuel.models._base import FuelBaseModel


class FuelType(FuelBaseModel):
    """A fuel grade with its current price.

    ``price`` is per litre in ``currency``.
    """

    id: str
    name: str
    price: float
    currency: str
    last_updated: datetime

    @field_validator("last_updated")
    @classmethod
    def _ensure_tz_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value
