"""Application factory for the FastAPI app.

Centralizes app construction (metadata, middleware, handlers, routers and
app-scoped state) so tests can build isolated instances.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from studio_api.api.routes import blog_router, health_router, portrait_router
from studio_api.core.config import Settings, parse_csv, settings
from studio_api.core.exception_handlers import setup_exception_handlers
from studio_api.core.logging import configure_logging
from studio_api.core.middleware import request_id_middleware
from studio_api.core.rate_limit import RateLimitPolicy

OPENAPI_TAGS = [
    {"name": "Portrait", "description": "Renaissance pet portraits from a photo."},
    {"name": "Blog", "description": "Long-form SEO blog post generation."},
    {"name": "Health", "description": "Liveness checks."},
]


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        app_settings: Settings to build from; defaults to the global settings.

    Returns:
        Configured FastAPI app with middleware, handlers, routers and a fresh
        rate limit policy (empty stores).
    """
    cfg = app_settings or settings

    # Logging first so subsequent init logs are formatted as desired
    configure_logging(cfg.log)

    app = FastAPI(
        title="Studio API",
        description=(
            "Generates Renaissance-style pet portraits from a photo (vision + image "
            "generation, with per-email and per-IP rate limits) and long-form SEO "
            "blog posts."
        ),
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
    )

    app.state.rate_limit_policy = RateLimitPolicy.from_settings(cfg.rate_limit)

    # Middleware (last added runs first, so CORS wraps request-id)
    app.middleware("http")(request_id_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=parse_csv(cfg.app.cors_origins) or ["*"],
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    setup_exception_handlers(app)

    app.include_router(portrait_router, prefix="/api")
    app.include_router(blog_router, prefix="/api")
    app.include_router(health_router)

    return app
