# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""Retry utilities (async) with linear backoff.

After failed attempt ``n`` the wrapper waits ``base_delay_ms * n``
milliseconds before attempt ``n + 1``. The wrapper keeps no state between
calls.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from tradebook_api.infrastructure.logging.logger import get_json_logger

T = TypeVar("T")

_LOGGER = get_json_logger(__name__)

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BASE_DELAY_MS = 1000


@dataclass(frozen=True)
class RetryPolicy:
    """Configuration for retry attempts."""

    max_attempts: int = DEFAULT_MAX_ATTEMPTS  # total attempts, including the first
    base_delay_ms: int = DEFAULT_BASE_DELAY_MS  # delay unit; multiplied by attempt number

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.base_delay_ms < 0:
            raise ValueError("base_delay_ms must be >= 0")

    def delay_s(self, attempt: int) -> float:
        """Return the pause in seconds after failed ``attempt`` (1-based)."""
        return self.base_delay_ms * attempt / 1000.0


async def with_retry(
    call: Callable[[], Awaitable[T]],
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    base_delay_ms: int = DEFAULT_BASE_DELAY_MS,
    retry_on: Callable[[Exception], bool] | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Call ``call`` until it succeeds or runs out of attempts.

    Args:
        call: Zero-arg async function to execute.
        max_attempts: Total number of attempts (>= 1).
        base_delay_ms: Linear backoff unit in milliseconds.
        retry_on: Optional predicate; when it returns False for an error the
            error is raised immediately without further attempts.
        sleep: Awaitable sleep used between attempts (injectable for tests).

    Returns:
        The return value of ``call`` on the first successful attempt.

    Raises:
        ValueError: If the policy arguments are invalid.
        Exception: The error from the final attempt once retries are exhausted.
    """
    policy = RetryPolicy(max_attempts=max_attempts, base_delay_ms=base_delay_ms)
    attempt = 1
    while True:
        try:
            return await call()
        except Exception as exc:  # noqa: BLE001
            if attempt >= policy.max_attempts or (retry_on is not None and not retry_on(exc)):
                raise
            delay = policy.delay_s(attempt)
            _LOGGER.debug(
                "retry_scheduled",
                extra={"attempt": attempt, "delay_s": delay, "error": type(exc).__name__},
            )
            await sleep(delay)
            attempt += 1
