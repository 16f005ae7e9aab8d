"""Review endpoints.

Submission is fire-and-retry-never: the caller gets the error and decides
whether to ask the user to try again.
"""

from __future__ import annotations

from pyfuel._api._common import fetch_rows, insert_row, safe_float
from pyfuel._transport import Transport
from pyfuel.config import FuelConfig
from pyfuel.models.review import Review

_REVIEWS_TABLE = "reviews"


async def fetch_reviews(config: FuelConfig, transport: Transport, station_id: str) -> list[Review]:
    """Reviews of a station, newest first."""
    rows = await fetch_rows(
        config=config,
        transport=transport,
        table=_REVIEWS_TABLE,
        params={
            "select": "*",
            "station_id": f"eq.{station_id}",
            "order": "created_at.desc",
        },
    )
    return [Review.model_validate(row) for row in rows]


async def fetch_average_rating(config: FuelConfig, transport: Transport, station_id: str) -> float:
    """Mean rating of a station; ``0.0`` when it has no reviews."""
    rows = await fetch_rows(
        config=config,
        transport=transport,
        table=_REVIEWS_TABLE,
        params={"select": "rating", "station_id": f"eq.{station_id}"},
    )
    ratings = [value for value in (safe_float(row.get("rating")) for row in rows) if value is not None]
    if not ratings:
        return 0.0
    return sum(ratings) / len(ratings)


async def submit_review(config: FuelConfig, transport: Transport, review: Review) -> None:
    """Insert a review row."""
    await insert_row(
        config=config,
        transport=transport,
        table=_REVIEWS_TABLE,
        row=review.model_dump(mode="json"),
    )
