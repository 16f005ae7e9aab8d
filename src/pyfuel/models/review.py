"""Station review model."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import Field, field_validator

from pyfuel.models._base import FuelBaseModel


class Review(FuelBaseModel):
    """A user rating of a station.

    ``rating`` must be an integer from 1 to 5.
    """

    id: str
    station_id: str
    user_id: str
    rating: int = Field(ge=1, le=5)
    comment: str = ""
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("created_at")
    @classmethod
    def _ensure_tz_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value
