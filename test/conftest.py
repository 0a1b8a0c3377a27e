from contextlib import asynccontextmanager
from datetime import datetime, timezone

import httpx
import pytest

from bullet_improver.errors import PersistenceError
from storage.request_store import RequestRecord


class FakeProvider:
    name = "Fake"

    def __init__(self, response_text: str):
        self._response_text = response_text
        self.prompts = []

    def generate(self, *, prompt: str) -> str:
        self.prompts.append(prompt)
        return self._response_text


class FakeClient:
    """Stands in for LLMClient; records what it was asked."""

    def __init__(self, provider):
        self.provider = provider
        self.dispatched = []

    def dispatch(self, text: str) -> str:
        self.dispatched.append(text)
        return self.provider.generate(prompt=text)


class FakeStore:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.inserted = []

    async def insert(self, input_text: str, output_text: str) -> RequestRecord:
        if self.fail:
            raise PersistenceError("connection refused")
        record = RequestRecord(
            id=str(len(self.inserted) + 1),
            input_text=input_text,
            output_text=output_text,
            created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
        )
        self.inserted.append(record)
        return record

    async def list_recent(self, limit: int = 20):
        if self.fail:
            raise PersistenceError("connection refused")
        return list(reversed(self.inserted))[:limit]


class FakeConnection:
    def __init__(self, row=None, rows=None, error=None):
        self.row = row
        self.rows = rows or []
        self.error = error
        self.calls = []

    async def fetchrow(self, query, *args):
        self.calls.append((query, args))
        if self.error:
            raise self.error
        return self.row

    async def fetch(self, query, *args):
        self.calls.append((query, args))
        if self.error:
            raise self.error
        return self.rows


class FakePool:
    def __init__(self, connection: FakeConnection):
        self.connection = connection

    @asynccontextmanager
    async def acquire(self):
        yield self.connection


@pytest.fixture
def fake_provider_factory():
    def _make(response_text: str):
        return FakeProvider(response_text)
    return _make


@pytest.fixture
def fake_client_factory(fake_provider_factory):
    """Returns (factory, created) where created collects every FakeClient built."""
    def _make(response_text: str):
        created = []

        def factory(config):
            client = FakeClient(fake_provider_factory(response_text))
            created.append(client)
            return client

        return factory, created
    return _make


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def failing_store():
    return FakeStore(fail=True)


@pytest.fixture
def fake_pool():
    """Build a pool whose single connection returns ``row``/``rows`` or raises ``error``."""
    def _make(row=None, rows=None, error=None):
        conn = FakeConnection(row=row, rows=rows, error=error)
        return FakePool(conn), conn
    return _make


@pytest.fixture
def mock_http():
    """Build an httpx.Client backed by a MockTransport; ``calls`` records each request."""
    def _make(handler):
        calls = []

        def _recording(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return handler(request)

        client = httpx.Client(transport=httpx.MockTransport(_recording))
        return client, calls
    return _make


@pytest.fixture
def llm_env(monkeypatch):
    monkeypatch.setenv("LLM_PROVIDER", "openai")
    monkeypatch.setenv("LLM_API_KEY", "sk-test")
    monkeypatch.delenv("LLM_MODEL", raising=False)
    monkeypatch.delenv("LLM_BASE_URL", raising=False)
    monkeypatch.delenv("LLM_TIMEOUT_S", raising=False)
