"""Rate limiting policy for the portrait endpoint.

This module wires the rate limiting adapters into the HTTP layer.

Policy:
- Whitelisted emails bypass every check and are never recorded.
- The email space is checked first; a denied email short-circuits so it never
  consumes IP quota.
- The client IP space is checked second.

Limiter state is owned by the RateLimitPolicy instance that the app factory
stores on ``app.state``; routes receive it through ``get_rate_limit_policy``.
"""

from __future__ import annotations

import hashlib
import logging
from typing import Iterable

from fastapi import Request

from studio_api.adapters.rate_limit.base import AbstractRateLimiter
from studio_api.adapters.rate_limit.in_memory import InMemoryWindowRateLimiter
from studio_api.core.config import RateLimitSettings
from studio_api.core.errors import RateLimitAppError

logger = logging.getLogger(__name__)


def hash_identifier(identifier: str) -> str:
    """Hash a rate limit identifier for logging without exposing PII."""
    return hashlib.sha256(identifier.encode()).hexdigest()[:16]


def normalize_email(email: str) -> str:
    return email.strip().lower()


def resolve_client_ip(request: Request) -> str:
    """Best-effort client address, honoring proxy headers.

    Order: first X-Forwarded-For entry, X-Real-IP, socket peer, "unknown".
    """
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first

    real_ip = request.headers.get("x-real-ip")
    if real_ip and real_ip.strip():
        return real_ip.strip()

    if request.client and request.client.host:
        return request.client.host
    return "unknown"


class RateLimitPolicy:
    """Composes the email and IP limiters with the whitelist.

    Attributes:
        email_limiter: Limiter for the normalized email space.
        ip_limiter: Limiter for the client IP space.
        whitelist: Lower-cased emails exempt from limiting.
        enabled: When False, enforce() admits every call.
    """

    def __init__(
        self,
        *,
        email_limiter: AbstractRateLimiter,
        ip_limiter: AbstractRateLimiter,
        whitelist: Iterable[str] = (),
        enabled: bool = True,
    ) -> None:
        self.email_limiter = email_limiter
        self.ip_limiter = ip_limiter
        self.whitelist = frozenset(normalize_email(email) for email in whitelist)
        self.enabled = enabled

    @classmethod
    def from_settings(cls, rate_limit: RateLimitSettings) -> "RateLimitPolicy":
        """Build a policy with fresh, empty in-memory stores."""
        return cls(
            email_limiter=InMemoryWindowRateLimiter(
                limit=rate_limit.email_limit,
                window_ms=rate_limit.email_window_ms,
            ),
            ip_limiter=InMemoryWindowRateLimiter(
                limit=rate_limit.ip_limit,
                window_ms=rate_limit.ip_window_ms,
            ),
            whitelist=rate_limit.whitelisted_emails,
            enabled=rate_limit.enabled,
        )

    def is_whitelisted(self, email: str) -> bool:
        return normalize_email(email) in self.whitelist

    def enforce(self, *, email: str, client_ip: str) -> None:
        """Admit one portrait generation or raise.

        Args:
            email: Requester email (normalized here).
            client_ip: Resolved client address.

        Raises:
            RateLimitAppError: When the email or IP window is exhausted.
        """
        if not self.enabled:
            return

        email_key = normalize_email(email)
        if self.is_whitelisted(email_key):
            logger.info(
                "rate_limit.whitelisted",
                extra={"email_hash": hash_identifier(email_key)},
            )
            return

        email_decision = self.email_limiter.check(email_key)
        if not email_decision.allowed:
            reset_in = email_decision.reset_in or 0
            logger.warning(
                "rate_limit.exceeded",
                extra={
                    "scope": "email",
                    "email_hash": hash_identifier(email_key),
                    "reset_in_minutes": reset_in,
                },
            )
            raise RateLimitAppError(
                code="rate_limit_exceeded",
                message=(
                    f"Rate limit exceeded. You can generate {email_decision.remaining} "
                    f"more portraits. Try again in {reset_in} minutes."
                ),
                details={
                    "scope": "email",
                    "remaining": email_decision.remaining,
                    "reset_in_minutes": reset_in,
                },
            )

        ip_key = client_ip or "unknown"
        ip_decision = self.ip_limiter.check(ip_key)
        if not ip_decision.allowed:
            reset_in = ip_decision.reset_in or 0
            logger.warning(
                "rate_limit.exceeded",
                extra={
                    "scope": "ip",
                    "ip_hash": hash_identifier(ip_key),
                    "reset_in_minutes": reset_in,
                },
            )
            raise RateLimitAppError(
                code="rate_limit_exceeded",
                message=f"Too many requests from your location. Try again in {reset_in} minutes.",
                details={
                    "scope": "ip",
                    "remaining": ip_decision.remaining,
                    "reset_in_minutes": reset_in,
                },
            )

        logger.info(
            "rate_limit.allowed",
            extra={
                "email_hash": hash_identifier(email_key),
                "ip_hash": hash_identifier(ip_key),
                "email_remaining": email_decision.remaining,
                "ip_remaining": ip_decision.remaining,
            },
        )


def get_rate_limit_policy(request: Request) -> RateLimitPolicy:
    """FastAPI dependency returning the app-scoped rate limit policy."""
    return request.app.state.rate_limit_policy
