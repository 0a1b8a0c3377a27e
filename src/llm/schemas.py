from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr


class LLMConfig(BaseModel):
    """Provider selection plus credentials and optional overrides.

    ``provider`` stays a plain string: unknown tags are rejected by the
    provider registry at dispatch time, not at construction.
    """

    model_config = ConfigDict(frozen=True)

    provider: str = "openai"
    api_key: SecretStr = SecretStr("")
    model: Optional[str] = None
    base_url: Optional[str] = None
    timeout_s: float = Field(default=30.0, gt=0)
