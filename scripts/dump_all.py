#!/usr/bin/env python3
"""Dump everything the pyfuel library can fetch.

Loads the station listings and fuel prices through the sync controllers
(so the cache fallback is exercised exactly as an app would see it) and
optionally prices a trip between two coordinates.

Usage
-----
Set environment variables and run::

    export SUPABASE_URL="https://<project>.supabase.co"
    export SUPABASE_ANON_KEY="<anon key>"
    python scripts/dump_all.py

Options::

    --trip LAT,LNG LAT,LNG  Also calculate a trip between two points
    --fuel NAME             Fuel type name for the trip (default: first)
    --consumption L100KM    Consumption for the trip (default: 8.0)
    --station ID            Also dump reviews for this station
    --json                  Output as machine-readable JSON
    --output FILE           Write output to FILE instead of stdout
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyfuel import Failed, FuelClient, FuelConfig, LatLng, Ready  # noqa: E402

# ── helpers ──────────────────────────────────────────────────


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _parse_point(text: str) -> LatLng:
    try:
        lat, lng = (float(part) for part in text.split(","))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected LAT,LNG, got {text!r}") from exc
    return LatLng(latitude=lat, longitude=lng)


def _describe_state(state: Any) -> str:
    if isinstance(state, Ready):
        suffix = f" - {state.advisory}" if state.advisory else ""
        return f"ready ({state.origin}){suffix}"
    if isinstance(state, Failed):
        return f"failed: {state.message}"
    return type(state).__name__.lower()


# ── main ─────────────────────────────────────────────────────


async def main() -> None:
    parser = argparse.ArgumentParser(
        description="Dump all data pyfuel can fetch for debugging / development.",
    )
    parser.add_argument("--trip", nargs=2, metavar="LAT,LNG", type=_parse_point, help="Origin and destination")
    parser.add_argument("--fuel", help="Fuel type name for the trip (default: first fuel type)")
    parser.add_argument("--consumption", type=float, default=8.0, help="Litres per 100 km")
    parser.add_argument("--station", help="Dump reviews for this station id")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--output", "-o", help="Write output to FILE instead of stdout")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    config = FuelConfig.from_env()
    result: dict[str, Any] = {
        "timestamp": datetime.now(UTC).isoformat(),
        "rest_url": config.rest_url,
        "route_url": config.route_url,
    }

    out: list[str] = [_section("pyfuel dump_all")]
    out.append(f"  time      : {result['timestamp']}")
    out.append(f"  rest      : {config.rest_url}")
    out.append(f"  routing   : {config.route_url}")
    out.append(f"  cache dir : {config.cache_dir or '(memory)'}")

    async with FuelClient(config) as client:
        # ── Stations ──
        stations_state = await client.stations.load()
        out.append(_section(f"STATIONS - {_describe_state(stations_state)}"))
        for station in client.stations.all_stations:
            services = ", ".join(service.name for service in station.services) or "-"
            out.append(
                f"  {station.id:>6}  {station.name:<30} "
                f"({station.latitude:.5f}, {station.longitude:.5f})  "
                f"{station.operating_hours}  [{services}]"
            )
        result["stations"] = [station.model_dump(mode="json") for station in client.stations.all_stations]

        # ── Prices ──
        prices_state = await client.prices.load()
        out.append(_section(f"FUEL PRICES - {_describe_state(prices_state)}"))
        for fuel_type in client.prices.fuel_types:
            out.append(
                f"  {fuel_type.name:<20} {fuel_type.price:>8.2f} {fuel_type.currency}"
                f"  (updated {fuel_type.last_updated:%Y-%m-%d %H:%M})"
            )
        result["fuel_types"] = [fuel_type.model_dump(mode="json") for fuel_type in client.prices.fuel_types]

        # ── Reviews ──
        if args.station:
            reviews = await client.get_reviews(args.station)
            average = await client.get_average_rating(args.station)
            out.append(_section(f"REVIEWS station={args.station} - average {average:.1f}"))
            for review in reviews:
                out.append(f"  {review.created_at:%Y-%m-%d}  {'*' * review.rating:<5}  {review.comment}")
            result["reviews"] = {
                "average": average,
                "items": [review.model_dump(mode="json") for review in reviews],
            }

        # ── Trip ──
        if args.trip:
            fuel_types = client.prices.fuel_types
            fuel_type = client.prices.fuel_type_by_name(args.fuel) if args.fuel else None
            if fuel_type is None and fuel_types:
                fuel_type = fuel_types[0]
            if fuel_type is None:
                out.append(_section("TRIP - skipped, no fuel types available"))
            else:
                origin, destination = args.trip
                trip_state = await client.trip.calculate(origin, destination, fuel_type, args.consumption)
                out.append(_section(f"TRIP - {_describe_state(trip_state)}"))
                if isinstance(trip_state, Ready):
                    trip = trip_state.data
                    out.append(f"  distance  : {trip.distance_km:.1f} km")
                    out.append(f"  duration  : {trip.duration_s / 60:.0f} min")
                    out.append(f"  fuel      : {trip.fuel_needed:.2f} L of {trip.fuel_type.name}")
                    out.append(f"  cost      : {trip.total_cost:.2f} {trip.currency}")
                    out.append(f"  points    : {len(trip.route)}")
                    result["trip"] = trip.model_dump(mode="json")

    # ── Output ──
    if args.json_mode:
        payload = json.dumps(result, indent=2, default=str, ensure_ascii=False)
        if args.output:
            Path(args.output).write_text(payload, encoding="utf-8")
            print(f"JSON written to {args.output}", file=sys.stderr)
        else:
            print(payload)
    else:
        print("\n".join(out))
        if args.output:
            Path(args.output).write_text(
                json.dumps(result, indent=2, default=str, ensure_ascii=False),
                encoding="utf-8",
            )
            print(f"JSON written to {args.output}")


if __name__ == "__main__":
    asyncio.run(main())
