"""Edge-triggered network connectivity monitor.

The platform reports raw transport lists (``[wifi]``, ``[mobile, vpn]``,
``[none]``...).  The monitor reduces each report to connected/disconnected
and notifies listeners only on transitions: "restored" on
disconnected → connected and "lost" on connected → disconnected.  Reports
with the same polarity as the previous one are silent.  Rapid flapping is
not debounced.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator, Callable, Sequence
from enum import StrEnum
from typing import Any, Protocol

_logger = logging.getLogger(__name__)


class TransportKind(StrEnum):
    WIFI = "wifi"
    MOBILE = "mobile"
    ETHERNET = "ethernet"
    VPN = "vpn"
    BLUETOOTH = "bluetooth"
    OTHER = "other"
    NONE = "none"


USABLE_TRANSPORTS: frozenset[TransportKind] = frozenset(
    {TransportKind.WIFI, TransportKind.MOBILE, TransportKind.ETHERNET}
)


def is_usable(transports: Sequence[TransportKind]) -> bool:
    """True if any reported transport can carry traffic."""
    return any(transport in USABLE_TRANSPORTS for transport in transports)


class ConnectivitySource(Protocol):
    """Platform connectivity API."""

    def changes(self) -> AsyncIterator[Sequence[TransportKind]]:
        """Stream of raw transport reports."""
        ...

    async def check(self) -> Sequence[TransportKind]:
        """One-shot query of the current transports."""
        ...


class QueueConnectivitySource:
    """In-process source fed by :meth:`push`.

    Platform bridges (or tests) push each raw report; the monitor consumes
    them in order.
    """

    def __init__(self, initial: Sequence[TransportKind] = (TransportKind.WIFI,)) -> None:
        self._current: tuple[TransportKind, ...] = tuple(initial)
        self._queue: asyncio.Queue[tuple[TransportKind, ...]] = asyncio.Queue()

    def push(self, transports: Sequence[TransportKind]) -> None:
        self._current = tuple(transports)
        self._queue.put_nowait(self._current)

    async def check(self) -> Sequence[TransportKind]:
        return self._current

    async def changes(self) -> AsyncIterator[Sequence[TransportKind]]:
        while True:
            yield await self._queue.get()

    async def drain(self) -> None:
        """Wait until every pushed report has been handed to the consumer."""
        while not self._queue.empty():
            await asyncio.sleep(0)


Callback = Callable[[], Any]


class Subscription:
    """Handle for one callback registration.

    Closing it removes exactly that registration; closing twice is a no-op.
    Usable as a context manager.
    """

    def __init__(self, callbacks: list[Callback], callback: Callback) -> None:
        self._callbacks = callbacks
        self._callback = callback
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        # Identity match; a duplicate registration of the same callable stays.
        for index, registered in enumerate(self._callbacks):
            if registered is self._callback:
                del self._callbacks[index]
                break

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()


class ConnectivityMonitor:
    """Observe a :class:`ConnectivitySource` and fire transition callbacks.

    Usage::

        monitor = ConnectivityMonitor(source)
        monitor.start()
        handle = monitor.on_restored(lambda: print("back online"))
        ...
        handle.close()
        await monitor.stop()
    """

    def __init__(self, source: ConnectivitySource) -> None:
        self._source = source
        self._was_connected = True
        self._on_restored: list[Callback] = []
        self._on_lost: list[Callback] = []
        self._task: asyncio.Task[None] | None = None

    @property
    def was_connected(self) -> bool:
        return self._was_connected

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Subscribe to the source once; repeated calls are ignored."""
        if self.is_running:
            return
        self._task = asyncio.get_running_loop().create_task(self._consume(), name="pyfuel-connectivity")

    async def stop(self) -> None:
        task = self._task
        self._task = None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _consume(self) -> None:
        async for transports in self._source.changes():
            self.handle_report(transports)

    def handle_report(self, transports: Sequence[TransportKind]) -> None:
        """Apply one raw report and fire callbacks on a polarity change."""
        connected = is_usable(transports)
        was_connected = self._was_connected
        self._was_connected = connected

        if not was_connected and connected:
            _logger.info("Network connectivity restored (%s)", ",".join(transports))
            self._fire(self._on_restored, "restored")
        elif was_connected and not connected:
            _logger.info("Network connectivity lost")
            self._fire(self._on_lost, "lost")

    def _fire(self, callbacks: list[Callback], edge: str) -> None:
        # Iterate over a snapshot so callbacks may close their own handle.
        for callback in list(callbacks):
            try:
                callback()
            except Exception:
                _logger.debug("Connectivity %s callback failed", edge, exc_info=True)

    def on_restored(self, callback: Callback) -> Subscription:
        self._on_restored.append(callback)
        return Subscription(self._on_restored, callback)

    def on_lost(self, callback: Callback) -> Subscription:
        self._on_lost.append(callback)
        return Subscription(self._on_lost, callback)

    def clear_callbacks(self) -> None:
        self._on_restored.clear()
        self._on_lost.clear()

    async def is_connected_now(self) -> bool:
        """One-shot query, independent of the subscription."""
        return is_usable(await self._source.check())
