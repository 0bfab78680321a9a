"""FastAPI dependencies resolving request payloads and app-scoped services.

Routes declare the validation dependency before the service dependency.
FastAPI resolves them in that order, so a malformed request is rejected with
a 400 before any provider client is built.

Services are built lazily on first use and cached on ``app.state`` so that a
missing provider key surfaces as a per-request 500 instead of a startup crash.
Tests replace them via ``app.dependency_overrides``.
"""

from __future__ import annotations

from fastapi import Request

from studio_api.adapters.llm.base import AbstractLLMClient
from studio_api.adapters.llm.factory import create_llm_client
from studio_api.adapters.mailing_list.factory import create_mailing_list_client
from studio_api.schemas.blog import BlogRequest
from studio_api.schemas.portrait import PortraitRequest
from studio_api.services.blog_service import BlogService
from studio_api.services.portrait_service import PortraitService, ValidatedPortrait


def validate_portrait_payload(payload: PortraitRequest) -> ValidatedPortrait:
    return PortraitService.validate_request(payload)


def validate_blog_payload(payload: BlogRequest) -> BlogRequest:
    BlogService.validate_request(payload)
    return payload


def _get_llm_client(request: Request) -> AbstractLLMClient:
    client = getattr(request.app.state, "llm_client", None)
    if client is None:
        client = create_llm_client()
        request.app.state.llm_client = client
    return client


def get_portrait_service(request: Request) -> PortraitService:
    service = getattr(request.app.state, "portrait_service", None)
    if service is None:
        service = PortraitService(
            llm=_get_llm_client(request),
            mailing_list=create_mailing_list_client(),
        )
        request.app.state.portrait_service = service
    return service


def get_blog_service(request: Request) -> BlogService:
    service = getattr(request.app.state, "blog_service", None)
    if service is None:
        service = BlogService(llm=_get_llm_client(request))
        request.app.state.blog_service = service
    return service
