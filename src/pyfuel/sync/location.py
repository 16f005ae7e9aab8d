"""Device position controller."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from typing import Any, Protocol

from pyfuel.cache import CacheDomain, TtlCacheStore
from pyfuel.models.geo import LatLng
from pyfuel.retry import NO_RETRY
from pyfuel.sync.controller import DomainSyncController
from pyfuel.sync.state import DataOrigin, Ready

_logger = logging.getLogger(__name__)


class LocationProvider(Protocol):
    """Platform positioning API.

    Implementations raise :class:`~pyfuel.exceptions.LocationPermissionError`
    when access is denied and :class:`~pyfuel.exceptions.LocationServiceError`
    when positioning is disabled or unavailable.
    """

    async def current_position(self) -> LatLng: ...

    def position_stream(self) -> AsyncIterator[LatLng]: ...


class FixedLocationProvider:
    """Provider that always reports the same position."""

    def __init__(self, position: LatLng) -> None:
        self.position = position

    async def current_position(self) -> LatLng:
        return self.position

    async def position_stream(self) -> AsyncIterator[LatLng]:
        yield self.position


class LocationSync(DomainSyncController[LatLng]):
    """Current device position with a cached last-known fallback.

    Positioning errors are not transient, so a fix is attempted once.  The
    controller does not follow connectivity; callers reload it themselves.
    """

    def __init__(
        self,
        provider: LocationProvider,
        *,
        cache: TtlCacheStore | None = None,
        **kwargs: Any,
    ) -> None:
        kwargs.setdefault("retry_policy", NO_RETRY)
        super().__init__(cache=cache, domain=CacheDomain.LAST_LOCATION, **kwargs)
        self._provider = provider

    async def _fetch(self) -> LatLng:
        return await self._provider.current_position()

    async def watch(self) -> AsyncIterator[LatLng]:
        """Yield continuous position updates, caching each fix."""
        async for position in self._provider.position_stream():
            if self._cache is not None:
                await self._cache.put(CacheDomain.LAST_LOCATION, position)
            self._set_state(Ready(data=position, origin=DataOrigin.FRESH))
            yield position
        _logger.debug("Position stream ended")
