from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(request: Request) -> dict:
    """Liveness check.

    Also reports whether rate limiting is active and how many identifiers are
    currently tracked per space, which helps when tuning limits.
    """
    policy = request.app.state.rate_limit_policy
    return {
        "status": "ok",
        "rate_limit": {
            "enabled": policy.enabled,
            "tracked_emails": len(getattr(policy.email_limiter, "store", ())),
            "tracked_ips": len(getattr(policy.ip_limiter, "store", ())),
        },
    }
