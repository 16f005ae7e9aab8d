"""Custom exception hierarchy for pyfuel."""

from __future__ import annotations


class FuelError(Exception):
    """Base exception for all pyfuel errors."""


class FuelConfigError(FuelError):
    """Invalid or missing configuration."""


class FuelNetworkError(FuelError):
    """No connectivity to the remote service (connection refused, DNS, reset).

    Network errors are transient and retried by the default retry classifier.
    """

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)


class FuelTimeoutError(FuelNetworkError):
    """Request exceeded its transport timeout."""


class FuelApiError(FuelError):
    """Remote service rejected the request (validation/query failure).

    Covers HTTP error statuses and unparseable response bodies.  API errors
    are never retried.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class FuelRoutingError(FuelApiError):
    """Routing service returned a non-OK code or no route."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "",
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.code = code
        super().__init__(message, status_code=status_code, endpoint=endpoint)


class FuelCacheError(FuelError):
    """Cache serialization or storage failure.

    Raised by the storage backends and by :class:`pyfuel.cache.TtlCacheStore`,
    which downgrades it to a cache miss.
    """


class PolylineDecodeError(FuelError, ValueError):
    """Encoded route geometry is malformed or truncated."""


class LocationError(FuelError):
    """Base class for device location failures."""


class LocationPermissionError(LocationError):
    """Location permission is denied (or denied permanently)."""


class LocationServiceError(LocationError):
    """Location services are disabled or the position request failed."""
