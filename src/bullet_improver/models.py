from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from llm.schemas import LLMConfig


class ImprovementRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    config: LLMConfig

    @field_validator("text")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()


class ImprovementResult(BaseModel):
    """Tagged result: exactly one of ``text`` (success) or ``error`` (failure)."""

    model_config = ConfigDict(frozen=True)

    text: Optional[str] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def exactly_one_field(self) -> "ImprovementResult":
        if (self.text is None) == (self.error is None):
            raise ValueError("exactly one of text or error must be set")
        if self.text is not None and not self.text:
            raise ValueError("text must not be empty")
        return self

    @classmethod
    def success(cls, text: str) -> "ImprovementResult":
        return cls(text=text)

    @classmethod
    def failure(cls, message: str) -> "ImprovementResult":
        return cls(error=message)

    @property
    def ok(self) -> bool:
        return self.text is not None
