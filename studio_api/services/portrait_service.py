"""Pet portrait service orchestrating vision, image generation and signup.

Pipeline for one request:
1. Validate the email and decode/verify the photo
2. Describe the pet with the vision model
3. Paint a Renaissance portrait from that description
4. Register the email with the mailing list (best effort, never fatal)
"""

from __future__ import annotations

import logging
from typing import NamedTuple

from studio_api.adapters.llm.base import AbstractLLMClient
from studio_api.adapters.mailing_list.base import AbstractMailingListClient
from studio_api.core.config import settings
from studio_api.core.errors import ValidationAppError
from studio_api.core.rate_limit import hash_identifier
from studio_api.schemas.portrait import PortraitRequest, PortraitResponse
from studio_api.utils.image_validators import (
    decode_base64_image,
    detect_image_type,
    estimate_decoded_size,
    is_remote_url,
    split_data_url,
    to_data_url,
)

logger = logging.getLogger(__name__)

SUBSCRIBER_SOURCE = "Renaissance Pet Portrait Generator"

VISION_PROMPT = (
    "Analyze this pet photo in detail. Describe: 1) The animal species and breed "
    "(if identifiable), 2) Fur/coat color and patterns, 3) Distinctive facial features, "
    "markings, or characteristics, 4) Eye color, 5) Ear shape and position, 6) Overall "
    "appearance and expression. Be specific and detailed - this description will be used "
    "to recreate the pet accurately in an artwork."
)


def build_portrait_prompt(pet_description: str) -> str:
    """Build the image generation prompt around the vision description."""
    return f"""Create a Renaissance-era pet portrait based on this description: {pet_description}

CRITICAL: Keep the pet's exact features as described - same species, breed, coloring, markings, facial features, and expression.

The outfit should include:
- ornate embroidered military coat
- gold trims and shoulder epaulettes
- a high collar
- rich textures like velvet, brocade or leather
- subtle metallic armor elements (optional, if stylistically appropriate)

Match lighting, chiaroscuro lighting, shadows, and color tones so the pet's head blends seamlessly with the painted Renaissance-style body.

The final artwork should look like a classical oil painting from the 1500-1700s, with dramatic lighting, painterly brushstrokes, deep shadows, and warm tones.

Composition:
- Bust or half-body portrait
- Neutral or dark textured Renaissance backdrop
- Slight vignette around edges for depth

Mood: regal, powerful, commanding, as if the pet is a noble general in a historical portrait.

Do NOT alter the pet's species, breed, coloring, or distinctive features. Only add the Renaissance general uniform and painting style."""


class ValidatedPortrait(NamedTuple):
    email: str
    image_url: str


class PortraitService:
    """Generates Renaissance portraits of pets.

    Attributes:
        llm: LLM client used for both vision and image generation.
        mailing_list: Optional subscriber registration client.
    """

    def __init__(
        self,
        llm: AbstractLLMClient,
        mailing_list: AbstractMailingListClient | None = None,
    ) -> None:
        self.llm = llm
        self.mailing_list = mailing_list

    @staticmethod
    def validate_request(request: PortraitRequest) -> ValidatedPortrait:
        """Validate the request and normalize the photo for the vision API.

        Args:
            request: Incoming portrait request.

        Returns:
            ValidatedPortrait. The email is stripped but keeps its original
            casing. http(s) links are returned unchanged; inline photos come
            back as a data URL typed by their detected signature.

        Raises:
            ValidationAppError: On a missing/invalid email or image.
        """
        email = (request.email or "").strip()
        if not email or "@" not in email:
            raise ValidationAppError(code="invalid_email", message="Valid email is required")

        raw_image = (request.pet_image_base64 or "").strip()
        if not raw_image:
            raise ValidationAppError(code="missing_image", message="Pet image is required")

        if is_remote_url(raw_image):
            return ValidatedPortrait(email, raw_image)

        _, payload = split_data_url(raw_image)
        max_bytes = settings.app.max_image_size_mb * 1024 * 1024
        size = estimate_decoded_size(payload)
        if size > max_bytes:
            raise ValidationAppError(
                code="image_too_large",
                message=f"Pet image too large. Maximum size: {settings.app.max_image_size_mb}MB",
                details={"max_value": max_bytes, "actual_value": size},
            )

        try:
            image_bytes = decode_base64_image(payload)
        except ValueError as exc:
            raise ValidationAppError(code="invalid_image", message=str(exc)) from exc

        image_type = detect_image_type(image_bytes)
        if image_type is None:
            raise ValidationAppError(
                code="invalid_image",
                message="Pet image must be a JPEG, PNG, GIF or WEBP file",
            )

        return ValidatedPortrait(email, to_data_url(image_type, payload))

    async def _register_subscriber(self, email: str) -> None:
        if self.mailing_list is None:
            return
        try:
            await self.mailing_list.subscribe(email, source=SUBSCRIBER_SOURCE)
        except Exception as exc:  # registration must never fail the portrait
            logger.warning(
                "mailing_list.subscribe_failed",
                extra={
                    "email_hash": hash_identifier(email.lower()),
                    "error_type": type(exc).__name__,
                    "error_msg": str(exc),
                },
            )

    async def generate(self, *, email: str, image_url: str) -> PortraitResponse:
        """Run the portrait pipeline for a validated request.

        Args:
            email: Validated requester email.
            image_url: Photo as a data URL (see validate_request).

        Returns:
            PortraitResponse with the generated image URL.

        Raises:
            LLMAppError: If the vision or image generation call fails.
        """
        email_hash = hash_identifier(email.lower())

        logger.info("portrait.vision_started", extra={"email_hash": email_hash})
        pet_description = await self.llm.describe_image(image_url, VISION_PROMPT)
        logger.info(
            "portrait.vision_completed",
            extra={"email_hash": email_hash, "description_chars": len(pet_description)},
        )

        portrait_url = await self.llm.generate_image(build_portrait_prompt(pet_description))
        logger.info("portrait.image_generated", extra={"email_hash": email_hash})

        await self._register_subscriber(email)

        return PortraitResponse(
            success=True,
            image_url=portrait_url,
            pet_description=pet_description,
            email=email,
        )
