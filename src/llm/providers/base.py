from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx

from bullet_improver.errors import ConfigurationError, ProviderError

logger = logging.getLogger(__name__)

DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 200


class LLMProvider(ABC):
    """One hosted text-generation backend.

    Subclasses only describe their endpoint, body shape and response path;
    the single POST, the status handling and the error messages live here.
    """

    name: str = "LLM"
    default_model: str = ""
    default_base_url: str = ""

    def __init__(
        self,
        api_key: str,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_s: float = 30.0,
        client: Optional[httpx.Client] = None,
    ):
        self.api_key = api_key
        self.model = (model or self.default_model).strip()
        self.base_url = (base_url or self.default_base_url).strip().rstrip("/")
        _check_base_url(self.name, self.base_url)
        self.timeout_s = timeout_s
        self._client = client

    @abstractmethod
    def generate(self, *, prompt: str) -> str:
        """
        Must return the completion as trimmed TEXT, or raise ProviderError.
        """
        raise NotImplementedError

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _post(self, url: str, payload: dict) -> Any:
        """POST ``payload`` once and return the decoded JSON body (None if undecodable)."""
        logger.info(f"Calling {self.name} (model={self.model})")
        try:
            if self._client is not None:
                r = self._client.post(url, headers=self._headers(), json=payload)
            else:
                with httpx.Client(timeout=self.timeout_s) as client:
                    r = client.post(url, headers=self._headers(), json=payload)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"{self.name} request failed: {e!r}")
            raise ProviderError(str(e) or f"{self.name} request failed: {type(e).__name__}") from e

        if not r.is_success:
            raise ProviderError(self._error_message(r), upstream_status=r.status_code)

        try:
            return r.json()
        except ValueError:
            return None

    def _error_message(self, response: httpx.Response) -> str:
        # Chat APIs send {"error": {"message": ...}}, generation APIs {"error": "..."}
        message = None
        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict):
                message = error.get("message")
            elif isinstance(error, str):
                message = error

        if not message:
            message = f"{self.name} API error: {response.reason_phrase}"
        logger.warning(f"{self.name} returned HTTP {response.status_code}: {message}")
        return message

    def _require_text(self, text: Optional[str]) -> str:
        text = (text or "").strip()
        if not text:
            raise ProviderError(f"No response from {self.name}")
        return text


def _check_base_url(provider_name: str, base_url: str) -> None:
    try:
        url = httpx.URL(base_url)
    except httpx.InvalidURL as e:
        raise ConfigurationError(f"Invalid base URL for {provider_name}: {e}") from e
    if url.scheme not in ("http", "https") or not url.host:
        raise ConfigurationError(f"Invalid base URL for {provider_name}: {base_url!r}")
