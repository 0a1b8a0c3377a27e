import os
from typing import Callable, Optional

from pydantic import SecretStr

from api import state
from bullet_improver.errors import ConfigurationError
from llm.schemas import LLMConfig
from storage.request_store import RequestStore


def _timeout_from_env() -> float:
    raw = os.getenv("LLM_TIMEOUT_S", "30").strip()
    try:
        timeout_s = float(raw)
    except ValueError:
        raise ConfigurationError(f"Invalid LLM_TIMEOUT_S: {raw!r} is not a number") from None
    if not timeout_s > 0:
        raise ConfigurationError(f"Invalid LLM_TIMEOUT_S: {raw!r} must be greater than 0")
    return timeout_s


def get_llm_config() -> LLMConfig:
    """Read provider settings per request so a bad setting is reported, not fatal at boot."""
    return LLMConfig(
        provider=os.getenv("LLM_PROVIDER", "openai").strip().lower() or "openai",
        api_key=SecretStr(os.getenv("LLM_API_KEY", "").strip()),
        model=os.getenv("LLM_MODEL", "").strip() or None,
        base_url=os.getenv("LLM_BASE_URL", "").strip() or None,
        timeout_s=_timeout_from_env(),
    )


def get_llm_config_loader() -> Callable[[], LLMConfig]:
    # Routes call the loader after input validation, so a bad input is a 400 even when settings are broken
    return get_llm_config


def get_request_store() -> Optional[RequestStore]:
    return state.request_store
