"""Registry of supported providers, keyed by the ``LLM_PROVIDER`` tag."""
from __future__ import annotations

from typing import Dict, Optional, Type

import httpx

from bullet_improver.errors import ConfigurationError
from llm.schemas import LLMConfig

from .base import LLMProvider
from .huggingface_provider import HuggingFaceProvider
from .openai_provider import GroqProvider, OpenAIProvider

PROVIDERS: Dict[str, Type[LLMProvider]] = {
    "openai": OpenAIProvider,
    "groq": GroqProvider,
    "huggingface": HuggingFaceProvider,
}


def build_provider(config: LLMConfig, client: Optional[httpx.Client] = None) -> LLMProvider:
    provider_cls = PROVIDERS.get(config.provider)
    if provider_cls is None:
        raise ConfigurationError(f"Unsupported provider: {config.provider}")
    return provider_cls(
        api_key=config.api_key.get_secret_value(),
        model=config.model,
        base_url=config.base_url,
        timeout_s=config.timeout_s,
        client=client,
    )


__all__ = [
    "PROVIDERS",
    "LLMProvider",
    "OpenAIProvider",
    "GroqProvider",
    "HuggingFaceProvider",
    "build_provider",
]
