"""OpenAI LLM client adapter."""

import logging
from typing import Any

from openai import AsyncOpenAI, OpenAIError

from studio_api.adapters.llm.base import AbstractLLMClient
from studio_api.core.errors import LLMAppError

logger = logging.getLogger(__name__)


class OpenAIClient(AbstractLLMClient):
    """Client for OpenAI chat completions (vision and text) and image generation.

    Uses the official OpenAI Python SDK with async support.
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str | None = None,
        timeout_seconds: float = 120.0,
        vision_model: str = "gpt-4o",
        vision_max_tokens: int = 300,
        image_model: str = "dall-e-3",
        image_size: str = "1024x1792",
        image_quality: str = "hd",
        text_model: str = "gpt-4o-mini",
        text_temperature: float = 0.7,
        text_max_tokens: int = 4000,
    ) -> None:
        """Initialize OpenAI async client.

        Args:
            api_key: OpenAI API key for authentication.
            base_url: Optional custom base URL for OpenAI API.
            timeout_seconds: Timeout for requests in seconds.
            vision_model: Chat model used for image description.
            vision_max_tokens: Token cap for the description.
            image_model: Image generation model.
            image_size: Requested image dimensions.
            image_quality: Requested image quality.
            text_model: Chat model used for text generation.
            text_temperature: Sampling temperature for text generation.
            text_max_tokens: Token cap for text generation.
        """
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_seconds,
        )
        self.vision_model = vision_model
        self.vision_max_tokens = vision_max_tokens
        self.image_model = image_model
        self.image_size = image_size
        self.image_quality = image_quality
        self.text_model = text_model
        self.text_temperature = text_temperature
        self.text_max_tokens = text_max_tokens

    @staticmethod
    def _first_message_content(response: Any) -> str | None:
        if not response.choices:
            return None
        content = response.choices[0].message.content
        return content.strip() if content else None

    async def describe_image(self, image_url: str, prompt: str) -> str:
        messages = [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": prompt},
                    {"type": "image_url", "image_url": {"url": image_url}},
                ],
            }
        ]

        try:
            response = await self.client.chat.completions.create(
                model=self.vision_model,
                messages=messages,
                max_tokens=self.vision_max_tokens,
            )
        except OpenAIError as exc:
            logger.error("llm.vision_failed", extra={"model": self.vision_model, "error": str(exc)})
            raise LLMAppError(
                code="vision_failed",
                message=f"Failed to analyze pet image: {exc}",
                details={"model": self.vision_model, "provider": "openai"},
            ) from exc

        content = self._first_message_content(response)
        if not content:
            raise LLMAppError(
                code="vision_failed",
                message="Failed to analyze pet image: empty response",
                details={"model": self.vision_model, "provider": "openai"},
            )
        return content

    async def generate_image(self, prompt: str) -> str:
        try:
            response = await self.client.images.generate(
                model=self.image_model,
                prompt=prompt,
                n=1,
                size=self.image_size,
                quality=self.image_quality,
            )
        except OpenAIError as exc:
            logger.error("llm.image_failed", extra={"model": self.image_model, "error": str(exc)})
            raise LLMAppError(
                code="image_generation_failed",
                message=f"Failed to generate portrait: {exc}",
                details={"model": self.image_model, "provider": "openai"},
            ) from exc

        if not response.data or not response.data[0].url:
            raise LLMAppError(
                code="image_generation_failed",
                message="Failed to generate portrait: no image returned",
                details={"model": self.image_model, "provider": "openai"},
            )
        return response.data[0].url

    async def generate_text(self, prompt: str, *, system_prompt: str | None = None) -> str:
        messages: list[dict[str, Any]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        try:
            response = await self.client.chat.completions.create(
                model=self.text_model,
                messages=messages,
                temperature=self.text_temperature,
                max_tokens=self.text_max_tokens,
            )
        except OpenAIError as exc:
            logger.error("llm.text_failed", extra={"model": self.text_model, "error": str(exc)})
            raise LLMAppError(
                code="text_generation_failed",
                message=f"Failed to generate blog post: {exc}",
                details={"model": self.text_model, "provider": "openai"},
            ) from exc

        content = self._first_message_content(response)
        if not content:
            raise LLMAppError(
                code="text_generation_failed",
                message="Failed to generate blog post: empty response",
                details={"model": self.text_model, "provider": "openai"},
            )
        return content
