import logging
from typing import Optional

import httpx

from bullet_improver.errors import ConfigurationError
from llm.prompts import build_prompt
from llm.providers import LLMProvider, build_provider
from llm.schemas import LLMConfig

logger = logging.getLogger(__name__)


class LLMClient:
    """Provider-agnostic entry point: one prompt, one provider, one HTTP call.

    Credentials and the provider tag are checked on construction, so a bad
    configuration never reaches the network.
    """

    def __init__(self, config: LLMConfig, http_client: Optional[httpx.Client] = None):
        if not config.api_key.get_secret_value().strip():
            raise ConfigurationError(
                "LLM API key not configured. Please set LLM_API_KEY in the environment."
            )
        self.config = config
        self.provider: LLMProvider = build_provider(config, client=http_client)

    def dispatch(self, text: str) -> str:
        """Send the improvement prompt for ``text`` and return the raw completion."""
        prompt = build_prompt(text)
        logger.debug(f"Dispatching {len(text)} chars to {self.provider.name}")
        return self.provider.generate(prompt=prompt)
