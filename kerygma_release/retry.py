"""Exponential backoff retry for channel HTTP calls.

Only transient failures are retried: connection errors and 5xx
responses. A 4xx means the request itself is wrong and fails at once.
"""

from __future__ import annotations

import random
import time
from dataclasses import dataclass
from typing import Any, Callable, TypeVar

from kerygma_release.http import HttpError

T = TypeVar("T")


def is_transient(exc: Exception) -> bool:
    if isinstance(exc, HttpError):
        return exc.status is None or exc.status >= 500
    return isinstance(exc, (ConnectionError, TimeoutError))


@dataclass
class RetryConfig:
    max_attempts: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0
    multiplier: float = 2.0
    jitter: bool = True
    retry_if: Callable[[Exception], bool] = is_transient


NO_RETRY = RetryConfig(max_attempts=1)


class RetryError(Exception):
    """Raised when all retry attempts are exhausted."""

    def __init__(self, attempts: int, last_error: Exception) -> None:
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Failed after {attempts} attempts: {last_error}")


def retry(
    func: Callable[..., T],
    config: RetryConfig | None = None,
    sleep_func: Callable[[float], None] | None = None,
    *args: Any,
    **kwargs: Any,
) -> T:
    """Call func, retrying transient failures with exponential backoff.

    Non-transient exceptions propagate unchanged on the first attempt.

    Raises:
        RetryError: If every attempt failed with a transient error.
    """
    cfg = config or RetryConfig()
    do_sleep = sleep_func or time.sleep
    last_exc: Exception | None = None

    for attempt in range(1, cfg.max_attempts + 1):
        try:
            return func(*args, **kwargs)
        except Exception as exc:
            if not cfg.retry_if(exc):
                raise
            last_exc = exc
            if attempt == cfg.max_attempts:
                break

        delay = min(cfg.base_delay * (cfg.multiplier ** (attempt - 1)), cfg.max_delay)
        if cfg.jitter:
            delay = delay * (0.5 + random.random() * 0.5)
        do_sleep(delay)

    raise RetryError(cfg.max_attempts, last_exc)  # type: ignore[arg-type]
