"""Rate limiting adapters.

This package provides a small abstraction layer so the service can start with
an in-memory limiter and later migrate to Redis or another shared store
without changing the policy or API layer.
"""

from studio_api.adapters.rate_limit.base import AbstractRateLimiter, RateLimitDecision
from studio_api.adapters.rate_limit.in_memory import (
    CounterRecord,
    InMemoryWindowRateLimiter,
    RateLimitStore,
    check_rate_limit,
)

__all__ = [
    "AbstractRateLimiter",
    "CounterRecord",
    "InMemoryWindowRateLimiter",
    "RateLimitDecision",
    "RateLimitStore",
    "check_rate_limit",
]
