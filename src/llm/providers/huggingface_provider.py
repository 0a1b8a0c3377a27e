from __future__ import annotations

from typing import Any, Optional

from .base import DEFAULT_MAX_TOKENS, DEFAULT_TEMPERATURE, LLMProvider


class HuggingFaceProvider(LLMProvider):
    """Hugging Face Inference API text generation; the model id is part of the URL."""

    name = "Hugging Face"
    default_model = "mistralai/Mistral-7B-Instruct-v0.2"
    default_base_url = "https://api-inference.huggingface.co/models"

    def generate(self, *, prompt: str) -> str:
        url = f"{self.base_url}/{self.model}"
        payload = {
            "inputs": prompt,
            "parameters": {
                "max_new_tokens": DEFAULT_MAX_TOKENS,
                "temperature": DEFAULT_TEMPERATURE,
            },
        }

        data = self._post(url, payload)
        text = _first_generated_text(data)
        # text-generation models echo the prompt in front of the completion
        if text and text.startswith(prompt):
            text = text[len(prompt):]
        return self._require_text(text)


def _first_generated_text(data: Any) -> Optional[str]:
    if not isinstance(data, list) or not data:
        return None
    first = data[0]
    if not isinstance(first, dict):
        return None
    text = first.get("generated_text")
    return text if isinstance(text, str) else None
