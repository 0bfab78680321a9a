"""Rate limiter interfaces.

The policy layer depends on this abstraction (not the concrete implementation)
so the storage backend can be swapped later (e.g., Redis) with minimal changes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of a single rate limit check.

    Attributes:
        allowed: Whether the call may proceed.
        remaining: Calls still allowed in the current window (0 when denied).
        reset_in: Whole minutes until the window resets; only set when denied.
    """

    allowed: bool
    remaining: int
    reset_in: int | None = None


class AbstractRateLimiter(ABC):
    """Interface for rate limiters bound to one identifier space."""

    @abstractmethod
    def check(self, identifier: str) -> RateLimitDecision:
        """Decide whether one more call is allowed and record it if so.

        Args:
            identifier: Normalized key (lower-cased email, client IP).

        Returns:
            RateLimitDecision for this call.
        """
        raise NotImplementedError
