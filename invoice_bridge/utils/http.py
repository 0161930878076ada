"""Retry/backoff helper for callers that choose to retry rate-limited calls."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from invoice_bridge.clients.freshbooks import FreshBooksRateLimitError

T = TypeVar("T")

logger = logging.getLogger(__name__)


class RetryConfig:
    def __init__(self, *, attempts: int = 3, backoff_seconds: float = 1.0) -> None:
        self.attempts = attempts
        self.backoff_seconds = backoff_seconds


async def call_with_rate_limit_retry(
    operation: Callable[[], Awaitable[T]],
    *,
    retry_config: RetryConfig | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """
    Await ``operation`` and retry it while FreshBooks answers 429.

    Waits the server-provided ``retry_after`` or, when that is zero, an
    exponential backoff. Any other error is raised immediately.
    """
    config = retry_config or RetryConfig()
    last_error: FreshBooksRateLimitError | None = None

    for attempt in range(config.attempts):
        try:
            return await operation()
        except FreshBooksRateLimitError as exc:
            last_error = exc
            if attempt + 1 >= config.attempts:
                break
            wait = exc.retry_after or config.backoff_seconds * (2**attempt)
            logger.info("Rate limited. Waiting %s seconds...", wait)
            await sleep(wait)

    if last_error is not None:
        raise last_error
    raise RuntimeError("Retry loop finished without running the operation")


__all__ = ["RetryConfig", "call_with_rate_limit_retry"]
