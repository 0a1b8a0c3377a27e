import logging

from fastapi import APIRouter, Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from api import state
from api.dependencies import get_llm_config
from bullet_improver.errors import ConfigurationError
from llm.providers import PROVIDERS
from storage import db

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint for container orchestration."""
    try:
        config = get_llm_config()
    except ConfigurationError as e:
        health = {"status": "degraded", "config_error": e.message}
    else:
        health = {
            "status": "healthy",
            "provider": config.provider,
            "provider_supported": config.provider in PROVIDERS,
            "api_key_configured": bool(config.api_key.get_secret_value()),
        }

    if state.db_pool is not None:
        db_health = await db.health_check(state.db_pool)
        health["database"] = db_health
        if db_health["status"] != "healthy":
            health["status"] = "degraded"
    else:
        health["database"] = {"status": "disabled"}

    if not health.get("provider_supported") or not health.get("api_key_configured"):
        health["status"] = "degraded"

    return health


@router.get("/metrics")
async def metrics() -> Response:
    """
    Prometheus scrape endpoint.
    """
    data = generate_latest()
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)
