"""Generic fetch-with-cache-fallback controller.

One controller exists per data domain.  ``load()`` runs the remote fetch
through the retry engine; on success the result is cached and published as
``Ready(FRESH)``.  When every attempt fails the controller falls back to
the cached record, even an expired one, and publishes ``Ready(CACHED)``; with
no record it publishes ``Failed``.

After a failed attempt the controller reloads itself once the connectivity
monitor reports that the network is back.
"""

from __future__ import annotations

import abc
import asyncio
import logging
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from pyfuel.cache import CacheDomain, TtlCacheStore
from pyfuel.connectivity import ConnectivityMonitor, Subscription
from pyfuel.retry import RetryPolicy
from pyfuel.sync.state import (
    DataOrigin,
    Failed,
    Idle,
    Loading,
    Ready,
    SyncState,
    cached_advisory,
    last_attempt_failed,
)

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class DomainSyncController(abc.ABC, Generic[T]):
    """Base class for domain controllers.

    Subclasses implement :meth:`_fetch`.  A controller without a cache
    (``cache`` or ``domain`` is ``None``) goes straight to ``Failed`` when
    the fetch fails.

    Parameters
    ----------
    cache : TtlCacheStore, optional
        Shared cache store.
    domain : CacheDomain, optional
        Cache partition owned by this controller.
    monitor : ConnectivityMonitor, optional
        When given, the controller subscribes to its restore edge.
    retry_policy : RetryPolicy, optional
        Retry parameters for the remote fetch.
    on_change : callable, optional
        Called with the new state on every transition.
    sleep : callable, optional
        Backoff wait passed to the retry engine.
    """

    def __init__(
        self,
        *,
        cache: TtlCacheStore | None = None,
        domain: CacheDomain | None = None,
        monitor: ConnectivityMonitor | None = None,
        retry_policy: RetryPolicy | None = None,
        on_change: Callable[[SyncState[T]], Any] | None = None,
        sleep: Callable[[float], Any] = asyncio.sleep,
    ) -> None:
        self._cache = cache
        self._domain = domain
        self._retry_policy = retry_policy or RetryPolicy()
        self._on_change = on_change
        self._sleep = sleep
        self._state: SyncState[T] = Idle()
        self._inflight: asyncio.Task[SyncState[T]] | None = None
        self._background: set[asyncio.Task[Any]] = set()
        self._subscription: Subscription | None = None
        if monitor is not None:
            self._subscription = monitor.on_restored(self._on_restored)

    @property
    def name(self) -> str:
        return type(self).__name__

    @property
    def state(self) -> SyncState[T]:
        return self._state

    @property
    def data(self) -> T | None:
        """Value of the current ``Ready`` state, if any."""
        state = self._state
        return state.data if isinstance(state, Ready) else None

    @property
    def is_loading(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    @property
    def last_attempt_failed(self) -> bool:
        return last_attempt_failed(self._state)

    def _set_state(self, state: SyncState[T]) -> None:
        self._state = state
        if self._on_change is None:
            return
        try:
            self._on_change(state)
        except Exception:
            _logger.debug("%s state listener failed", self.name, exc_info=True)

    @abc.abstractmethod
    async def _fetch(self) -> T:
        """Fetch the domain data from the remote source."""

    async def load(self) -> SyncState[T]:
        """Fetch, cache and publish the domain data.

        Concurrent callers share a single in-flight load and all receive
        its final state.
        """
        task = self._inflight
        if task is None or task.done():
            task = asyncio.get_running_loop().create_task(self._run_load(), name=f"pyfuel-{self.name}-load")
            self._inflight = task
            task.add_done_callback(self._clear_inflight)
        return await asyncio.shield(task)

    def _clear_inflight(self, task: asyncio.Task[Any]) -> None:
        if self._inflight is task:
            self._inflight = None

    async def _run_load(self) -> SyncState[T]:
        self._set_state(Loading())
        try:
            data = await self._retry_policy.run(self._fetch, sleep=self._sleep)
        except Exception as exc:
            _logger.debug("%s fetch failed: %s", self.name, exc)
            try:
                state = await self._fallback(exc)
            except Exception as cache_exc:
                _logger.warning("%s cache fallback failed: %s", self.name, cache_exc, exc_info=True)
                state = Failed(error=exc, has_cache=False)
        else:
            if self._cache is not None and self._domain is not None:
                await self._cache.put(self._domain, data)
            state = Ready(data=data, origin=DataOrigin.FRESH)
        self._set_state(state)
        return state

    async def _fallback(self, error: Exception) -> SyncState[T]:
        if self._cache is None or self._domain is None:
            return Failed(error=error, has_cache=False)
        cached = await self._cache.get(self._domain, include_expired=True)
        if cached is not None:
            _logger.info("%s serving cached data after fetch failure", self.name)
            return Ready(data=cached, origin=DataOrigin.CACHED, advisory=cached_advisory(error))
        return Failed(error=error, has_cache=await self._cache.has_record(self._domain))

    def _can_auto_retry(self) -> bool:
        return True

    def _on_restored(self) -> None:
        if not self.last_attempt_failed or self.is_loading or not self._can_auto_retry():
            return
        _logger.debug("%s reloading after connectivity restored", self.name)
        task = asyncio.get_running_loop().create_task(self.load(), name=f"pyfuel-{self.name}-auto-retry")
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def aclose(self) -> None:
        """Release the connectivity subscription and cancel pending reloads."""
        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None
        tasks = list(self._background)
        if self._inflight is not None:
            tasks.append(self._inflight)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._background.clear()
