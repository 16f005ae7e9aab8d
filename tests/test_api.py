from __future__ import annotations

from datetime import UTC, datetime

import pytest
from _fakes import FakeTransport, station_row

from pyfuel._api import listings as listings_api
from pyfuel._api import reviews as reviews_api
from pyfuel._api._common import ilike_pattern, safe_float
from pyfuel._api.routing import build_route_params, parse_route_response
from pyfuel.config import FuelConfig
from pyfuel.exceptions import FuelApiError, FuelRoutingError
from pyfuel.models.review import Review


def test_safe_float() -> None:
    assert safe_float("4") == 4.0
    assert safe_float(3) == 3.0
    assert safe_float(None) is None
    assert safe_float("") is None
    assert safe_float("n/a") is None
    assert safe_float(float("nan")) is None


def test_ilike_pattern() -> None:
    assert ilike_pattern(" wash ") == "ilike.*wash*"
    assert ilike_pattern("a*b,c") == "ilike.*ab c*"


@pytest.mark.asyncio
async def test_fetch_station_by_id(config: FuelConfig, transport: FakeTransport) -> None:
    transport.on("/rest/v1/stations", [station_row("42", "Aldrees", 24.7, 46.6, ["Air"])])

    station = await listings_api.fetch_station(config, transport, "42")

    assert station.id == "42"
    assert station.services[0].name == "Air"
    assert station.operating_hours == "06:00 - 22:00"
    assert transport.calls[0]["params"]["id"] == "eq.42"


@pytest.mark.asyncio
async def test_fetch_missing_station(config: FuelConfig, transport: FakeTransport) -> None:
    transport.on("/rest/v1/stations", [])

    with pytest.raises(FuelApiError) as excinfo:
        await listings_api.fetch_station(config, transport, "404")

    assert excinfo.value.status_code == 404


@pytest.mark.asyncio
async def test_server_side_search_params(config: FuelConfig, transport: FakeTransport) -> None:
    transport.on("/rest/v1/stations", [])

    await listings_api.search_stations(config, transport, "olaya")
    await listings_api.search_stations_by_service(config, transport, "Car Wash")

    assert transport.calls[0]["params"] == {"select": "*,services(*)", "name": "ilike.*olaya*"}
    assert transport.calls[1]["params"] == {
        "select": "*,services!inner(*)",
        "services.name": "ilike.*Car Wash*",
    }


@pytest.mark.asyncio
async def test_non_list_response_is_rejected(config: FuelConfig, transport: FakeTransport) -> None:
    transport.on("/rest/v1/stations", {"message": "permission denied"})

    with pytest.raises(FuelApiError):
        await listings_api.fetch_stations(config, transport)


@pytest.mark.asyncio
async def test_reviews_newest_first(config: FuelConfig, transport: FakeTransport) -> None:
    transport.on(
        "/rest/v1/reviews",
        [
            {
                "id": "r2",
                "station_id": "42",
                "user_id": "u1",
                "rating": 5,
                "comment": None,
                "created_at": "2024-05-02T10:00:00+00:00",
            },
            {
                "id": "r1",
                "station_id": "42",
                "user_id": "u2",
                "rating": 3,
                "comment": "slow service",
                "created_at": "2024-05-01T10:00:00",
            },
        ],
    )

    reviews = await reviews_api.fetch_reviews(config, transport, "42")

    assert [r.id for r in reviews] == ["r2", "r1"]
    assert reviews[0].comment == ""
    assert reviews[1].created_at.tzinfo is not None
    assert transport.calls[0]["params"]["order"] == "created_at.desc"
    assert transport.calls[0]["params"]["station_id"] == "eq.42"


@pytest.mark.asyncio
async def test_average_rating(config: FuelConfig, transport: FakeTransport) -> None:
    transport.on("/rest/v1/reviews", [{"rating": 5}, {"rating": 4}, {"rating": None}])

    assert await reviews_api.fetch_average_rating(config, transport, "42") == 4.5


@pytest.mark.asyncio
async def test_average_rating_without_reviews(config: FuelConfig, transport: FakeTransport) -> None:
    transport.on("/rest/v1/reviews", [])

    assert await reviews_api.fetch_average_rating(config, transport, "42") == 0.0


@pytest.mark.asyncio
async def test_submit_review_posts_row(config: FuelConfig, transport: FakeTransport) -> None:
    transport.on("/rest/v1/reviews", None)
    review = Review(
        id="r9",
        station_id="42",
        user_id="u1",
        rating=4,
        comment="clean",
        created_at=datetime(2024, 5, 1, tzinfo=UTC),
    )

    await reviews_api.submit_review(config, transport, review)

    call = transport.calls[0]
    assert call["method"] == "POST"
    assert call["headers"]["prefer"] == "return=minimal"
    assert call["json_body"]["rating"] == 4
    assert call["json_body"]["created_at"].startswith("2024-05-01T00:00:00")


@pytest.mark.parametrize("rating", [0, 6])
def test_review_rating_bounds(rating: int) -> None:
    with pytest.raises(ValueError):
        Review(id="r", station_id="s", user_id="u", rating=rating)


def test_route_params_follow_config(config: FuelConfig) -> None:
    assert build_route_params(config) == {"overview": "full", "geometries": "polyline6"}

    custom = FuelConfig(supabase_url="x", supabase_key="y", osrm_alternatives=True, osrm_steps=True)
    assert build_route_params(custom)["alternatives"] == "true"
    assert build_route_params(custom)["steps"] == "true"


def test_parse_route_takes_first_route() -> None:
    route = parse_route_response(
        {
            "code": "Ok",
            "routes": [
                {"distance": 1200.5, "duration": 180.0, "geometry": "??"},
                {"distance": 9999.0, "duration": 999.0, "geometry": "??"},
            ],
        }
    )

    assert route.distance_km == pytest.approx(1.2005)
    assert route.duration == 180.0


@pytest.mark.parametrize(
    ("payload", "code"),
    [
        ({"code": "NoRoute", "message": "Impossible route"}, "NoRoute"),
        ({"code": "InvalidQuery"}, "InvalidQuery"),
        ({"code": "Ok", "routes": []}, "Ok"),
        ([], ""),
    ],
)
def test_parse_route_errors(payload: object, code: str) -> None:
    with pytest.raises(FuelRoutingError) as excinfo:
        parse_route_response(payload, endpoint="route")

    assert excinfo.value.code == code
    assert excinfo.value.endpoint == "route"
