from abc import ABC, abstractmethod


class AbstractLLMClient(ABC):
	"""Interface for the vision, image and text generation calls we make."""

	@abstractmethod
	async def describe_image(self, image_url: str, prompt: str) -> str:
		"""Describe an image with a vision-capable chat model.

		Args:
			image_url: HTTP(S) URL or ``data:image/...;base64,`` URL.
			prompt: Instructions for what to describe.

		Returns:
			str: The model's description.

		Raises:
			LLMAppError: If the provider call fails or returns no content.
		"""
		...

	@abstractmethod
	async def generate_image(self, prompt: str) -> str:
		"""Generate one image and return its URL.

		Raises:
			LLMAppError: If the provider call fails or returns no image.
		"""
		...

	@abstractmethod
	async def generate_text(self, prompt: str, *, system_prompt: str | None = None) -> str:
		"""Generate free-form text from a chat model.

		Raises:
			LLMAppError: If the provider call fails or returns no content.
		"""
		...
