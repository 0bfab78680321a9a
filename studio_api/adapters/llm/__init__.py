"""LLM adapter layer - abstracts over the generation provider."""

from studio_api.adapters.llm.base import AbstractLLMClient
from studio_api.adapters.llm.factory import create_llm_client
from studio_api.adapters.llm.openai_client import OpenAIClient

__all__ = [
    "AbstractLLMClient",
    "OpenAIClient",
    "create_llm_client",
]
