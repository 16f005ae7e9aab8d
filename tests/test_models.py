"""Tests for pyfuel record models."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from pyfuel.models import (
    Bounds,
    FuelType,
    LatLng,
    RouteResult,
    Station,
    TripCalculation,
    TripRequest,
)


class TestStation:
    ROW = {
        "id": 17,
        "name": "  Aldrees Olaya ",
        "latitude": 24.7,
        "longitude": 46.68,
        "open_time": "05:00",
        "close_time": None,
        "services": [{"id": "s1", "name": "Car Wash", "icon": "wash"}, {"id": "s2", "name": "ATM"}],
        "created_at": "2024-01-01T00:00:00Z",
    }

    def test_basic_parsing(self) -> None:
        station = Station.model_validate(self.ROW)

        assert station.id == "17"
        assert station.name == "Aldrees Olaya"
        assert station.close_time == ""
        assert station.position == LatLng(latitude=24.7, longitude=46.68)
        assert station.average_rating is None

    def test_offers_is_case_insensitive_substring(self) -> None:
        station = Station.model_validate(self.ROW)

        assert station.offers("wash")
        assert station.offers("atm")
        assert not station.offers("air")

    def test_frozen(self) -> None:
        station = Station.model_validate(self.ROW)

        with pytest.raises(ValidationError):
            station.name = "other"  # type: ignore[misc]

    def test_missing_coordinates_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Station.model_validate({"id": "1", "name": "x"})


class TestFuelType:
    def test_naive_timestamp_becomes_utc(self) -> None:
        fuel_type = FuelType.model_validate(
            {"id": "91", "name": "Gasoline 91", "price": "2.18", "currency": "SAR", "last_updated": "2024-05-01T08:00:00"}
        )

        assert fuel_type.price == 2.18
        assert fuel_type.last_updated == datetime(2024, 5, 1, 8, tzinfo=UTC)


class TestBounds:
    def test_inverted_latitudes_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Bounds(southwest=LatLng(latitude=25, longitude=46), northeast=LatLng(latitude=24, longitude=47))

    def test_contains(self) -> None:
        bounds = Bounds(southwest=LatLng(latitude=24, longitude=46), northeast=LatLng(latitude=25, longitude=47))

        assert bounds.contains(LatLng(latitude=24.5, longitude=46.5))
        assert not bounds.contains(LatLng(latitude=24.5, longitude=47.5))


class TestTripCalculation:
    FUEL = FuelType(id="d", name="Diesel", price=1.66, currency="SAR", last_updated=datetime(2024, 5, 1, tzinfo=UTC))

    def test_from_route(self) -> None:
        request = TripRequest(
            origin=LatLng(latitude=24.7, longitude=46.6),
            destination=LatLng(latitude=21.5, longitude=39.2),
            fuel_type=self.FUEL,
            consumption_rate=10.0,
        )
        route = RouteResult(distance=950_000.0, duration=32_400.0, geometry="")

        result = TripCalculation.from_route(request, route, [])

        assert result.distance_km == pytest.approx(950.0)
        assert result.fuel_needed == pytest.approx(95.0)
        assert result.total_cost == pytest.approx(157.7)
        assert result.currency == "SAR"
        assert result.route == []

    def test_request_rejects_unknown_fields(self) -> None:
        with pytest.raises(ValidationError):
            TripRequest(
                origin=LatLng(latitude=0, longitude=0),
                destination=LatLng(latitude=1, longitude=1),
                fuel_type=self.FUEL,
                consumption_rate=5.0,
                round_trip=True,  # type: ignore[call-arg]
            )
