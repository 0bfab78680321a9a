"""In-memory rate limiter with per-identifier windows and lazy expiry.

Each identifier gets its own window, starting at its first accepted call and
lasting ``window_ms``. Expired records are swept on every check; there is no
background task, so a store that stops receiving traffic keeps its last
entries until the next check.

Notes:
- Per-process only: running multiple workers or instances multiplies the
  effective limit.
- State lives in an explicit RateLimitStore, never in a module global.
"""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Iterator

from studio_api.adapters.rate_limit.base import AbstractRateLimiter, RateLimitDecision

MS_PER_MINUTE = 60_000


def epoch_ms() -> int:
    """Current UNIX time in whole milliseconds."""
    return int(time.time() * 1000)


@dataclass
class CounterRecord:
    count: int
    reset_time: int


class RateLimitStore:
    """Mapping of identifier to CounterRecord for one identifier space."""

    def __init__(self) -> None:
        self._records: dict[str, CounterRecord] = {}

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._records

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def get(self, identifier: str) -> CounterRecord | None:
        return self._records.get(identifier)

    def start_window(self, identifier: str, now_ms: int, window_ms: int) -> CounterRecord:
        """Open a fresh window for identifier with its first call counted."""
        record = CounterRecord(count=1, reset_time=now_ms + window_ms)
        self._records[identifier] = record
        return record

    def sweep(self, now_ms: int) -> int:
        """Remove every record whose window has ended.

        Args:
            now_ms: Current time in epoch milliseconds.

        Returns:
            Number of records removed.
        """
        expired = [key for key, record in self._records.items() if now_ms > record.reset_time]
        for key in expired:
            del self._records[key]
        return len(expired)


def check_rate_limit(
    identifier: str,
    store: RateLimitStore,
    limit: int,
    window_ms: int,
    *,
    now_ms: int | None = None,
) -> RateLimitDecision:
    """Admit or deny one call for identifier, mutating store in place.

    Inputs are not validated here; callers guarantee a non-empty identifier
    and positive limit/window_ms.

    Args:
        identifier: Normalized key within the store's identifier space.
        store: Store shared by all checks of this identifier space.
        limit: Maximum calls allowed per window.
        window_ms: Window length in milliseconds.
        now_ms: Current time in epoch milliseconds (defaults to wall clock).

    Returns:
        RateLimitDecision. Denials carry ``reset_in`` in whole minutes.
    """
    now = epoch_ms() if now_ms is None else now_ms
    store.sweep(now)

    record = store.get(identifier)
    if record is None or now > record.reset_time:
        store.start_window(identifier, now, window_ms)
        return RateLimitDecision(allowed=True, remaining=limit - 1)

    if record.count >= limit:
        reset_in = math.ceil((record.reset_time - now) / MS_PER_MINUTE)
        return RateLimitDecision(allowed=False, remaining=0, reset_in=reset_in)

    record.count += 1
    return RateLimitDecision(allowed=True, remaining=limit - record.count)


class InMemoryWindowRateLimiter(AbstractRateLimiter):
    """Rate limiter binding one store to a fixed (limit, window) pair.

    Important:
        This limiter is per-process only. If the API runs with multiple
        workers, each worker enforces its own independent limits.
    """

    def __init__(
        self,
        *,
        limit: int,
        window_ms: int,
        store: RateLimitStore | None = None,
        clock: Callable[[], int] = epoch_ms,
    ) -> None:
        """Initialize the in-memory rate limiter.

        Args:
            limit: Maximum number of allowed calls per window.
            window_ms: Window length in milliseconds.
            store: Existing store to use; a fresh empty one by default.
            clock: Time source returning epoch milliseconds.

        Raises:
            ValueError: If limit or window_ms are invalid.
        """
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_ms < 1:
            raise ValueError("window_ms must be >= 1")

        self._limit = limit
        self._window_ms = window_ms
        self._clock = clock
        self._lock = threading.RLock()
        self.store = store if store is not None else RateLimitStore()

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def window_ms(self) -> int:
        return self._window_ms

    def check(self, identifier: str) -> RateLimitDecision:
        """Check and record one call for identifier.

        Raises:
            ValueError: If identifier is empty.
        """
        if not identifier:
            raise ValueError("identifier must be a non-empty string")

        with self._lock:
            return check_rate_limit(
                identifier,
                self.store,
                self._limit,
                self._window_ms,
                now_ms=self._clock(),
            )
