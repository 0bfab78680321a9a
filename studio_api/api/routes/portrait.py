from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from studio_api.api.dependencies import get_portrait_service, validate_portrait_payload
from studio_api.core.rate_limit import RateLimitPolicy, get_rate_limit_policy, resolve_client_ip
from studio_api.schemas.portrait import PortraitResponse
from studio_api.services.portrait_service import PortraitService, ValidatedPortrait

router = APIRouter(tags=["Portrait"])


@router.post("/generate-portrait", response_model=PortraitResponse)
async def generate_portrait(
    request: Request,
    validated: Annotated[ValidatedPortrait, Depends(validate_portrait_payload)],
    service: Annotated[PortraitService, Depends(get_portrait_service)],
    rate_limit: Annotated[RateLimitPolicy, Depends(get_rate_limit_policy)],
) -> PortraitResponse:
    """Generate a Renaissance portrait of the uploaded pet.

    The body is validated before the service is built and before rate
    limiting, so malformed requests never consume quota. Errors are rendered
    by the global exception handlers: 400 for invalid input, 429 when a limit
    is hit, 500 for provider failures.
    """
    rate_limit.enforce(email=validated.email, client_ip=resolve_client_ip(request))
    return await service.generate(email=validated.email, image_url=validated.image_url)
