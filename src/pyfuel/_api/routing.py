"""OSRM routing endpoint."""

from __future__ import annotations

import logging
from typing import Any

from pyfuel._transport import Transport
from pyfuel.config import FuelConfig
from pyfuel.exceptions import FuelRoutingError
from pyfuel.models.geo import LatLng
from pyfuel.models.trip import RouteResult

_logger = logging.getLogger(__name__)


def build_route_url(config: FuelConfig, origin: LatLng, destination: LatLng) -> str:
    """Route URL for *origin* → *destination*.

    OSRM takes ``longitude,latitude`` pairs, the reverse of the map order.
    """
    coordinates = f"{origin.longitude},{origin.latitude};{destination.longitude},{destination.latitude}"
    return f"{config.route_url}/{coordinates}"


def build_route_params(config: FuelConfig) -> dict[str, str]:
    params = {"overview": "full", "geometries": "polyline6"}
    if config.osrm_alternatives:
        params["alternatives"] = "true"
    if config.osrm_steps:
        params["steps"] = "true"
    return params


def parse_route_response(payload: Any, *, endpoint: str = "") -> RouteResult:
    """Extract the first route, raising :class:`FuelRoutingError` otherwise."""
    if not isinstance(payload, dict):
        raise FuelRoutingError("Routing response is not an object", endpoint=endpoint)

    code = str(payload.get("code", ""))
    if code != "Ok":
        message = payload.get("message") or "unknown error"
        raise FuelRoutingError(f"Route calculation failed: {message}", code=code, endpoint=endpoint)

    routes = payload.get("routes")
    if not isinstance(routes, list) or not routes:
        raise FuelRoutingError("No route found", code=code, endpoint=endpoint)

    return RouteResult.model_validate(routes[0])


async def fetch_route(
    config: FuelConfig,
    transport: Transport,
    origin: LatLng,
    destination: LatLng,
) -> RouteResult:
    """Ask the routing service for a driving route."""
    url = build_route_url(config, origin, destination)
    payload = await transport.request_json(
        "GET",
        url,
        params=build_route_params(config),
        timeout=config.routing_timeout,
        raise_for_status=False,
    )
    route = parse_route_response(payload, endpoint=url)
    _logger.debug("Route %s: %.0f m, %.0f s", url, route.distance, route.duration)
    return route
