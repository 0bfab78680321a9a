from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from studio_api.api.dependencies import get_blog_service, validate_blog_payload
from studio_api.schemas.blog import BlogPostResponse, BlogRequest
from studio_api.services.blog_service import BlogService

router = APIRouter(tags=["Blog"])


@router.post("/generate-blog", response_model=BlogPostResponse)
async def generate_blog(
    payload: Annotated[BlogRequest, Depends(validate_blog_payload)],
    service: Annotated[BlogService, Depends(get_blog_service)],
) -> BlogPostResponse:
    """Generate an SEO blog post split into title, meta, slug and body sections."""
    return await service.generate(payload)
