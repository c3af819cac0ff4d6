from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

T = TypeVar("T")

RATE_LIMIT_STATUS = 429

logger = logging.getLogger(__name__)


def is_rate_limited(exc: BaseException) -> bool:
    """
    True if the failure carries an HTTP 429 signal.

    openai.RateLimitError and TransportError both expose status_code.
    """
    return getattr(exc, "status_code", None) == RATE_LIMIT_STATUS


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    initial_delay_ms: int = 1000,
    *,
    sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
) -> T:
    """
    Run `operation`, retrying only on rate limits with exponential backoff.

    Delay starts at `initial_delay_ms` and doubles after every retry. There is
    no jitter and no upper bound on the delay. Any other failure, or a rate
    limit once `max_retries` retries have been spent, is re-raised unchanged.

    Args:
        operation: Zero-argument callable returning an awaitable.
        max_retries: Retries allowed after the first attempt.
        initial_delay_ms: Wait before the first retry, in milliseconds.
        sleep: Awaitable sleep taking seconds (injectable for tests).

    Returns:
        Whatever the operation returns on its first successful attempt.
    """
    if max_retries < 0:
        raise ValueError("max_retries must be >= 0")
    if initial_delay_ms < 0:
        raise ValueError("initial_delay_ms must be >= 0")

    retries = 0
    delay = initial_delay_ms

    while True:
        try:
            return await operation()
        except Exception as exc:
            if not is_rate_limited(exc) or retries >= max_retries:
                raise
            logger.warning(
                "Rate limited. Retrying in %sms... (Attempt %d/%d)",
                delay,
                retries + 1,
                max_retries,
            )
            await sleep(delay / 1000)
            retries += 1
            delay *= 2


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    max_retries: int = 3
    initial_delay_ms: int = 1000

    async def run(self, operation: Callable[[], Awaitable[T]]) -> T:
        return await retry_with_backoff(
            operation,
            max_retries=self.max_retries,
            initial_delay_ms=self.initial_delay_ms,
        )
