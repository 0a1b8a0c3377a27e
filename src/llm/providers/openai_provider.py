from __future__ import annotations

from typing import Any, Optional

from .base import DEFAULT_MAX_TOKENS, DEFAULT_TEMPERATURE, LLMProvider


class OpenAIProvider(LLMProvider):
    name = "OpenAI"
    default_model = "gpt-3.5-turbo"
    default_base_url = "https://api.openai.com/v1"

    def generate(self, *, prompt: str) -> str:
        return _chat_completion(self, prompt)


class GroqProvider(LLMProvider):
    """Groq serves the OpenAI chat-completions API under its own host."""

    name = "Groq"
    default_model = "llama-3.1-8b-instant"
    default_base_url = "https://api.groq.com/openai/v1"

    def generate(self, *, prompt: str) -> str:
        return _chat_completion(self, prompt)


def _chat_completion(provider: LLMProvider, prompt: str) -> str:
    url = f"{provider.base_url}/chat/completions"
    payload = {
        "model": provider.model,
        "messages": [
            {"role": "user", "content": prompt},
        ],
        "temperature": DEFAULT_TEMPERATURE,
        "max_tokens": DEFAULT_MAX_TOKENS,
    }

    data = provider._post(url, payload)
    return provider._require_text(_first_choice_content(data))


def _first_choice_content(data: Any) -> Optional[str]:
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return None
    return content if isinstance(content, str) else None
