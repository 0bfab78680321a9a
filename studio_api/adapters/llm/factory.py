"""Factory pattern for creating LLM client instances."""

from studio_api.adapters.llm.base import AbstractLLMClient
from studio_api.adapters.llm.openai_client import OpenAIClient
from studio_api.core.config import LLMSettings, settings
from studio_api.core.errors import ConfigurationAppError


def create_llm_client(llm_settings: LLMSettings | None = None) -> AbstractLLMClient:
    """Instantiate the LLM client for the configured provider.

    Args:
        llm_settings: Settings to use; defaults to the global settings.

    Returns:
        AbstractLLMClient: Configured LLM client instance.

    Raises:
        ConfigurationAppError: If the provider is unknown or its key is missing.
    """
    cfg = llm_settings or settings.llm
    provider = cfg.provider.lower()

    if provider == "openai":
        if not cfg.api_key:
            raise ConfigurationAppError(
                code="llm_missing_api_key",
                message="OpenAI API key not configured",
                details={"hint": "Set OPENAI_API_KEY or LLM_API_KEY"},
            )
        return OpenAIClient(
            api_key=cfg.api_key,
            base_url=cfg.base_url,
            timeout_seconds=cfg.timeout_seconds,
            vision_model=cfg.vision_model,
            vision_max_tokens=cfg.vision_max_tokens,
            image_model=cfg.image_model,
            image_size=cfg.image_size,
            image_quality=cfg.image_quality,
            text_model=cfg.text_model,
            text_temperature=cfg.text_temperature,
            text_max_tokens=cfg.text_max_tokens,
        )

    raise ConfigurationAppError(
        code="llm_unknown_provider",
        message=f"Unknown LLM provider: '{provider}'. Supported providers: openai",
    )
