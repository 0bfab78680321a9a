"""Pydantic schemas for pet portrait generation."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PortraitRequest(BaseModel):
    """Portrait request body.

    Fields are optional at the schema level so that missing values produce
    the service's own 400 responses instead of framework 422s.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    email: str | None = Field(
        default=None,
        description="Email address of the requester; also used for rate limiting.",
    )
    pet_image_base64: str | None = Field(
        default=None,
        description="Pet photo as a base64 data URL (data:image/jpeg;base64,...) or bare base64.",
    )


class PortraitResponse(BaseModel):
    """Generated portrait with the description it was painted from."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = Field(default=True)
    image_url: str = Field(..., description="URL of the generated portrait (expires upstream).")
    pet_description: str = Field(..., description="Vision model description of the pet.")
    email: str = Field(..., description="Email the portrait was generated for.")
