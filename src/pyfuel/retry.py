"""Bounded exponential-backoff retry.

Only transient failures are retried: :class:`~pyfuel.exceptions.FuelNetworkError`
(which includes :class:`~pyfuel.exceptions.FuelTimeoutError`) and the builtin
``TimeoutError``.  Anything else, API errors in particular, aborts on the
first occurrence regardless of the remaining attempts.

There is no delay before the first attempt; ``initial_delay`` is the wait
before the second one, doubling up to ``max_delay``.  The wait is a plain
``await``, so cancelling the calling task also cancels the backoff.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from pyfuel._constants import RETRY_INITIAL_DELAY, RETRY_MAX_ATTEMPTS, RETRY_MAX_DELAY
from pyfuel.exceptions import FuelNetworkError

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryDecision(enum.Enum):
    RETRY = "retry"
    ABORT = "abort"


def default_classifier(error: BaseException) -> RetryDecision:
    if isinstance(error, (FuelNetworkError, TimeoutError)):
        return RetryDecision.RETRY
    return RetryDecision.ABORT


@dataclass(slots=True)
class RetryContext:
    """Bookkeeping for one :func:`execute` call."""

    attempt: int
    current_delay: float


async def execute(
    operation: Callable[[], Awaitable[T]],
    *,
    max_attempts: int = RETRY_MAX_ATTEMPTS,
    initial_delay: float = RETRY_INITIAL_DELAY,
    max_delay: float = RETRY_MAX_DELAY,
    classify: Callable[[BaseException], RetryDecision] = default_classifier,
    sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
) -> T:
    """Run *operation* until it succeeds, fails fatally, or attempts run out.

    Parameters
    ----------
    operation
        Zero-argument coroutine factory; called once per attempt.
    max_attempts
        Total attempts including the first.
    initial_delay, max_delay
        Backoff bounds in seconds.
    classify
        Maps an error to :class:`RetryDecision`.
    sleep
        Awaitable used for the backoff wait (injectable for tests).

    Returns
    -------
    T
        The first successful result.

    Raises
    ------
    Exception
        The last error raised by *operation*.
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
    if initial_delay < 0 or max_delay < 0:
        raise ValueError("retry delays must be non-negative")

    ctx = RetryContext(attempt=1, current_delay=initial_delay)
    while True:
        try:
            return await operation()
        except Exception as exc:
            if ctx.attempt >= max_attempts or classify(exc) is RetryDecision.ABORT:
                raise
            _logger.debug(
                "Attempt %d/%d failed (%s); retrying in %.1fs",
                ctx.attempt,
                max_attempts,
                exc,
                ctx.current_delay,
            )
        await sleep(ctx.current_delay)
        ctx.current_delay = min(ctx.current_delay * 2, max_delay)
        ctx.attempt += 1


@dataclass(frozen=True)
class RetryPolicy:
    """Retry parameters bound to a controller."""

    max_attempts: int = RETRY_MAX_ATTEMPTS
    initial_delay: float = RETRY_INITIAL_DELAY
    max_delay: float = RETRY_MAX_DELAY
    classify: Callable[[BaseException], RetryDecision] = default_classifier

    async def run(
        self,
        operation: Callable[[], Awaitable[T]],
        *,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> T:
        return await execute(
            operation,
            max_attempts=self.max_attempts,
            initial_delay=self.initial_delay,
            max_delay=self.max_delay,
            classify=self.classify,
            sleep=sleep,
        )


NO_RETRY = RetryPolicy(max_attempts=1)
