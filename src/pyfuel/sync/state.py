"""Sync state machine values.

A controller is always in exactly one of :class:`Idle`, :class:`Loading`,
:class:`Ready` or :class:`Failed`.  States are immutable; every transition
replaces the controller's state object.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, TypeVar

T = TypeVar("T")


class DataOrigin(StrEnum):
    FRESH = "fresh"
    CACHED = "cached"


@dataclass(frozen=True)
class Idle:
    """No load has been attempted yet."""


@dataclass(frozen=True)
class Loading:
    """A load is in flight."""


@dataclass(frozen=True)
class Ready(Generic[T]):
    """Data is available.

    ``origin`` is :attr:`DataOrigin.CACHED` when the remote fetch failed and
    the value was served from the cache; ``advisory`` then carries the
    user-visible explanation.
    """

    data: T
    origin: DataOrigin = DataOrigin.FRESH
    advisory: str | None = None

    @property
    def is_fresh(self) -> bool:
        return self.origin is DataOrigin.FRESH


@dataclass(frozen=True)
class Failed:
    """The remote fetch failed and no cached value could be served."""

    error: BaseException
    has_cache: bool = False

    @property
    def message(self) -> str:
        return f"No data available. {self.error} Retry when connected."


SyncState = Idle | Loading | Ready[T] | Failed


def cached_advisory(error: BaseException) -> str:
    return f"Showing saved data. {error}"


def last_attempt_failed(state: SyncState[object]) -> bool:
    """True after a failed fetch, whether or not the cache covered for it."""
    if isinstance(state, Failed):
        return True
    return isinstance(state, Ready) and state.origin is DataOrigin.CACHED
