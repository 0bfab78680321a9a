from __future__ import annotations

from studio_api.api.routes.blog import router as blog_router
from studio_api.api.routes.health import router as health_router
from studio_api.api.routes.portrait import router as portrait_router

__all__ = ["blog_router", "health_router", "portrait_router"]
