"""
Request pacing helpers: strictly increasing nonces and a minimum-interval throttle.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Dict

from exchanges.base_client import ExchangeCredentials

logger = logging.getLogger(__name__)

_GENERATORS_LOCK = threading.Lock()
_GENERATORS: Dict[str, "NonceGenerator"] = {}


def unix_timestamp_ms() -> int:
    return time.time_ns() // 1_000_000


class NonceGenerator:
    """
    Issue strictly increasing integer nonces.

    Values come from the microsecond wall clock; when the clock has not moved
    past the last issued value (fast successive calls, clock step back) the
    previous value plus one is returned instead.
    """

    def __init__(self, clock_us: Callable[[], int] | None = None) -> None:
        self._clock_us = clock_us or (lambda: time.time_ns() // 1_000)
        self._last = 0
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            candidate = self._clock_us()
            if candidate <= self._last:
                candidate = self._last + 1
            self._last = candidate
            return candidate

    @property
    def last(self) -> int:
        return self._last


def nonce_generator_for(credentials: ExchangeCredentials) -> NonceGenerator:
    """Return the generator shared by every client that signs with these credentials."""
    with _GENERATORS_LOCK:
        generator = _GENERATORS.get(credentials.api_key)
        if generator is None:
            generator = NonceGenerator()
            _GENERATORS[credentials.api_key] = generator
        return generator


class RateLimiter:
    """
    Enforce a minimum interval between consecutive requests of one client.

    The limiter holds no state of its own; the caller passes the timestamp of
    its previous request.
    """

    def __init__(
        self,
        min_interval_ms: int,
        *,
        clock_ms: Callable[[], int] = unix_timestamp_ms,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if min_interval_ms < 0:
            raise ValueError("min_interval_ms must not be negative")
        self.min_interval_ms = min_interval_ms
        self._clock_ms = clock_ms
        self._sleep = sleep

    def throttle(self, last_request_ms: int) -> float:
        """Block until `min_interval_ms` has elapsed since `last_request_ms`; return seconds waited."""
        elapsed = self._clock_ms() - last_request_ms
        # A clock stepping backwards never extends the wait past one interval.
        remaining = min(self.min_interval_ms - elapsed, self.min_interval_ms)
        if remaining <= 0:
            return 0.0
        wait = remaining / 1000.0
        logger.debug("Rate limit: waiting %.3fs before next request", wait)
        self._sleep(wait)
        return wait
