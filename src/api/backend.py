import asyncio
import logging
from typing import Callable, Optional

from api.metrics import PERSISTENCE_FAILURES_TOTAL, PROVIDER_CALLS_TOTAL
from bullet_improver.errors import ProviderError, ValidationError
from bullet_improver.models import ImprovementRequest, ImprovementResult
from bullet_improver.normalizer import normalize
from llm.llm_client import LLMClient
from llm.schemas import LLMConfig
from storage.request_store import RequestStore

logger = logging.getLogger(__name__)


class BackendAPI:
    """Central orchestration component: validate, dispatch, normalize, persist."""

    def __init__(self, client_factory: Callable[[LLMConfig], LLMClient] = LLMClient):
        self._client_factory = client_factory

    async def improve(self, request: ImprovementRequest) -> ImprovementResult:
        """Run one improvement. Raises ValidationError, ConfigurationError or ProviderError."""

        # 1. Reject blank input before anything touches the network
        if not request.text:
            raise ValidationError("Input text is required")

        # 2. Build the client (checks credentials and provider tag)
        client = self._client_factory(request.config)
        provider_name = client.provider.name

        # 3. Single provider round trip; httpx call is blocking, keep it off the loop
        try:
            raw = await asyncio.to_thread(client.dispatch, request.text)
        except ProviderError:
            _count_provider_call(provider_name, "error")
            raise
        _count_provider_call(provider_name, "ok")

        # 4. Strip labels / quotes the model added despite instructions
        improved = normalize(raw)
        if not improved:
            raise ProviderError(f"No response from {provider_name}")

        return ImprovementResult.success(improved)

    async def persist(
        self,
        store: Optional[RequestStore],
        input_text: str,
        output_text: str,
    ) -> None:
        """Best-effort storage of an already computed result; never raises."""
        if store is None:
            logger.debug("Request store not configured, skipping persistence")
            return

        try:
            await store.insert(input_text=input_text, output_text=output_text)
        except Exception as e:
            logger.error(f"Failed to persist improvement: {e}")
            try:
                PERSISTENCE_FAILURES_TOTAL.inc()
            except Exception:
                pass


def _count_provider_call(provider: str, outcome: str) -> None:
    try:
        PROVIDER_CALLS_TOTAL.labels(provider=provider, outcome=outcome).inc()
    except Exception:
        pass
