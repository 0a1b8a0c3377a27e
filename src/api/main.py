import logging
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from api import state
from api.routers import improve, ops
from bullet_improver.errors import BulletImproverError
from bullet_improver.models import ImprovementResult
from storage import db
from storage.request_store import RequestStore

# Logging configuration
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s"
)
logger = logging.getLogger(__name__)

DATABASE_URL = os.getenv("DATABASE_URL", "").strip()
INIT_DB_SCHEMA = os.getenv("INIT_DB_SCHEMA", "false").lower() in {"1", "true", "yes"}

app = FastAPI(title="Bullet Improver")
app.include_router(improve.router)
app.include_router(ops.router)


def _error_response(message: str, status_code: int) -> JSONResponse:
    body = ImprovementResult.failure(message).model_dump(exclude_none=True)
    return JSONResponse(body, status_code=status_code)


@app.exception_handler(BulletImproverError)
async def handle_bullet_improver_error(request: Request, exc: BulletImproverError) -> JSONResponse:
    return _error_response(exc.message, exc.status_code)


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info(f"Rejected malformed request to {request.url.path}: {exc.errors()}")
    return _error_response("Invalid request", 400)


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.url.path}")
    return _error_response("Internal server error", 500)


@app.on_event("startup")
async def startup() -> None:
    if not DATABASE_URL:
        logger.info("DATABASE_URL not set, requests will not be stored")
        return

    try:
        state.db_pool = await db.init_db_pool(DATABASE_URL)
        if INIT_DB_SCHEMA:
            await db.init_schema(state.db_pool)
        state.request_store = RequestStore(state.db_pool)
    except Exception:
        # Storage is best-effort; serve improvements without it
        logger.exception("Database unavailable, continuing without persistence")
        state.request_store = None


@app.on_event("shutdown")
async def shutdown() -> None:
    state.request_store = None
    if state.db_pool is not None:
        await db.close_db_pool(state.db_pool)
        state.db_pool = None


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
