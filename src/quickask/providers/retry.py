"""Bounded retry loop with exponential backoff and jitter."""

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass
from typing import TypeVar

from quickask.errors import CanceledError, QuickAskError, RetriesExhaustedError

logger = logging.getLogger(__name__)

T = TypeVar("T")

JITTER_RATIO = 0.1


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    max_attempts: int = 10
    initial_delay: float = 1.0
    max_delay: float = 60.0
    jitter_ratio: float = JITTER_RATIO

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.initial_delay <= 0:
            raise ValueError("initial_delay must be > 0")
        if self.max_delay < self.initial_delay:
            raise ValueError("max_delay must be >= initial_delay")
        if not 0 <= self.jitter_ratio <= JITTER_RATIO:
            raise ValueError(f"jitter_ratio must be within [0, {JITTER_RATIO}]")


def next_delay(current: float, maximum: float) -> float:
    return min(maximum, current * 2)


def backoff_delays(initial: float, maximum: float) -> Iterator[float]:
    """Yield the pre-jitter delay sequence d0, min(2*d0, max), min(4*d0, max), ..."""
    delay = min(initial, maximum)
    while True:
        yield delay
        delay = next_delay(delay, maximum)


def compute_jitter(delay: float, rng: random.Random, ratio: float = JITTER_RATIO) -> float:
    return rng.uniform(0.0, ratio * delay)


async def _await_or_cancel(awaitable: Awaitable[T], cancel_event: asyncio.Event | None) -> T:
    if cancel_event is None:
        return await awaitable
    task = asyncio.ensure_future(awaitable)
    if cancel_event.is_set():
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        raise CanceledError("call canceled")
    waiter = asyncio.ensure_future(cancel_event.wait())
    try:
        await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        task.cancel()
        waiter.cancel()
        await asyncio.gather(task, waiter, return_exceptions=True)
        raise
    if task.done():
        waiter.cancel()
        return task.result()
    task.cancel()
    await asyncio.gather(task, return_exceptions=True)
    raise CanceledError("call canceled")


async def retry_call(
    call: Callable[[], Awaitable[T]],
    policy: RetryPolicy | None = None,
    *,
    sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    rng: random.Random | None = None,
    cancel_event: asyncio.Event | None = None,
) -> T:
    """Run ``call`` until it succeeds or the attempt budget is spent.

    Only QuickAskError instances flagged ``retryable`` are retried. Anything
    else, including CanceledError, propagates on the spot. When the budget is
    exhausted RetriesExhaustedError is raised, chained from the last failure.

    The delay is doubled before every sleep, so the first backoff is already
    ``2 * initial_delay`` (capped at ``max_delay``).
    """
    policy = policy or RetryPolicy()
    rng = rng or random.Random()
    delays = backoff_delays(policy.initial_delay, policy.max_delay)
    next(delays)
    attempt = 0

    while True:
        attempt += 1
        try:
            return await _await_or_cancel(call(), cancel_event)
        except QuickAskError as exc:
            if not exc.retryable:
                raise
            logger.warning("Attempt %d failed: %s", attempt, exc)
            if attempt >= policy.max_attempts:
                raise RetriesExhaustedError(attempt, exc) from exc

        delay = next(delays)
        sleep_time = delay + compute_jitter(delay, rng, policy.jitter_ratio)
        logger.info("Retrying in %.2f seconds...", sleep_time)
        await _await_or_cancel(sleep(sleep_time), cancel_event)
