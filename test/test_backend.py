import asyncio

import httpx
import pytest
from pydantic import SecretStr

from api.backend import BackendAPI
from bullet_improver.errors import ConfigurationError, ProviderError, ValidationError
from bullet_improver.models import ImprovementRequest
from llm.llm_client import LLMClient
from llm.schemas import LLMConfig


def _request(text, **config):
    config.setdefault("api_key", SecretStr("sk-test"))
    return ImprovementRequest(text=text, config=LLMConfig(**config))


def test_empty_input_rejected_before_client_is_built(fake_client_factory):
    factory, created = fake_client_factory("unused")
    backend = BackendAPI(client_factory=factory)

    for text in ["", "   ", "\n\t"]:
        with pytest.raises(ValidationError, match="Input text is required"):
            asyncio.run(backend.improve(_request(text)))

    assert created == []


def test_improve_normalizes_completion(fake_client_factory):
    factory, created = fake_client_factory('Improved Bullet: "Cut deployment time by 40%."')
    backend = BackendAPI(client_factory=factory)

    result = asyncio.run(backend.improve(_request("  Made deploys faster  ")))

    assert result.ok
    assert result.text == "Cut deployment time by 40%."
    assert created[0].dispatched == ["Made deploys faster"]


def test_completion_that_normalizes_to_nothing(fake_client_factory):
    factory, _ = fake_client_factory('Result: ""')
    backend = BackendAPI(client_factory=factory)

    with pytest.raises(ProviderError, match="^No response from Fake$"):
        asyncio.run(backend.improve(_request("text")))


def test_unsupported_provider_end_to_end(mock_http):
    http, calls = mock_http(lambda request: httpx.Response(200, json={}))
    backend = BackendAPI(client_factory=lambda cfg: LLMClient(cfg, http_client=http))

    with pytest.raises(ConfigurationError, match="Unsupported provider: cohere"):
        asyncio.run(backend.improve(_request("text", provider="cohere")))
    assert calls == []


def test_missing_key_end_to_end(mock_http):
    http, calls = mock_http(lambda request: httpx.Response(200, json={}))
    backend = BackendAPI(client_factory=lambda cfg: LLMClient(cfg, http_client=http))

    with pytest.raises(ConfigurationError):
        asyncio.run(backend.improve(_request("text", api_key=SecretStr(""))))
    assert calls == []


def test_real_provider_through_backend(mock_http):
    def handler(request):
        return httpx.Response(200, json=[{"generated_text": "  Output: 'Onboarded 30 clients' "}])

    http, calls = mock_http(handler)
    backend = BackendAPI(client_factory=lambda cfg: LLMClient(cfg, http_client=http))

    result = asyncio.run(backend.improve(_request("onboarding", provider="huggingface", model="gpt2")))

    assert result.text == "Onboarded 30 clients"
    assert len(calls) == 1
    assert calls[0].url.path == "/models/gpt2"


def test_persist_stores_pair(fake_store):
    asyncio.run(BackendAPI().persist(fake_store, "in", "out"))
    assert [(r.input_text, r.output_text) for r in fake_store.inserted] == [("in", "out")]


def test_persist_failure_is_swallowed(fake_client_factory, failing_store):
    factory, _ = fake_client_factory("Reduced costs by 15%")
    backend = BackendAPI(client_factory=factory)

    async def run():
        result = await backend.improve(_request("costs"))
        await backend.persist(failing_store, "costs", result.text)
        return result

    result = asyncio.run(run())
    assert result.ok and result.text == "Reduced costs by 15%"


def test_persist_without_store_is_noop():
    asyncio.run(BackendAPI().persist(None, "in", "out"))


def test_persist_swallows_unexpected_exceptions():
    class BrokenStore:
        async def insert(self, input_text, output_text):
            raise RuntimeError("boom")

    asyncio.run(BackendAPI().persist(BrokenStore(), "in", "out"))
