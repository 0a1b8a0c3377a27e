import logging
import time
from typing import Any, Callable, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from pydantic import BaseModel

from api.backend import BackendAPI
from api.dependencies import get_llm_config_loader, get_request_store
from api.metrics import REQUESTS_TOTAL, REQUEST_LATENCY_SECONDS
from bullet_improver.errors import BulletImproverError, PersistenceError, ValidationError
from bullet_improver.models import ImprovementRequest
from llm.schemas import LLMConfig
from storage.request_store import RequestStore

router = APIRouter()
logger = logging.getLogger(__name__)
backend = BackendAPI()


class ImproveIn(BaseModel):
    # Any: type problems are reported as "Input text is required", not a 422
    inputText: Optional[Any] = None


def _observe(endpoint: str, status: str, start: float) -> None:
    try:
        REQUESTS_TOTAL.labels(endpoint=endpoint, status=status).inc()
        REQUEST_LATENCY_SECONDS.labels(endpoint=endpoint).observe(time.time() - start)
    except Exception:
        pass


@router.post("/improve")
async def improve(
    payload: ImproveIn,
    background_tasks: BackgroundTasks,
    load_config: Callable[[], LLMConfig] = Depends(get_llm_config_loader),
    store: Optional[RequestStore] = Depends(get_request_store),
) -> dict:
    start = time.time()
    text = payload.inputText if isinstance(payload.inputText, str) else ""

    try:
        if not text.strip():
            raise ValidationError("Input text is required")
        config = load_config()
        request = ImprovementRequest(text=text, config=config)
        logger.info(f"Received improve request ({len(request.text)} chars, provider={config.provider})")
        result = await backend.improve(request)
    except BulletImproverError as e:
        logger.warning(f"Improve request failed: {e}")
        _observe("/improve", type(e).__name__, start)
        raise

    # Stored after the response is sent; a storage failure cannot change it
    background_tasks.add_task(backend.persist, store, request.text, result.text)

    _observe("/improve", "ok", start)
    return {"improvedText": result.text}


@router.get("/requests")
async def recent_requests(
    limit: int = Query(20, ge=1, le=100),
    store: Optional[RequestStore] = Depends(get_request_store),
) -> dict:
    """Get the most recently stored improvements."""
    if store is None:
        return {"requests": [], "total": 0}

    try:
        records = await store.list_recent(limit)
    except PersistenceError as e:
        logger.error(f"Could not load stored requests: {e}")
        raise PersistenceError("Stored requests are unavailable") from e

    return {
        "requests": [r.to_dict() for r in records],
        "total": len(records),
    }
