import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.domain.errors import InternalConsistencyError, TransientStorageError
from app.infrastructure.db.pool import close_pool, get_pool
from app.infrastructure.http.client import (
    close_http_client,
    get_http_client,
    open_http_client,
)
from app.infrastructure.messaging.http_message_adapter import HttpMessageAdapter
from app.infrastructure.redis_cache.pool import close_redis, get_redis
from app.logging import setup_logging
from app.presentation.api import api
from app.settings import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # startup
    pool = get_pool()
    if getattr(pool, "closed", True):
        await pool.open()

    await open_http_client()

    get_redis()

    # ONE shared message adapter on top of the shared HTTP client
    message_adapter = HttpMessageAdapter(
        base_url=settings.smtp_base_url,
        client=get_http_client(),
    )
    app.state.message_adapter = message_adapter

    try:
        yield
    finally:
        # shutdown
        await message_adapter.aclose()  # it won't close the shared client
        await close_http_client()
        await close_redis()
        await close_pool()


async def on_transient_storage_error(
    request: Request, exc: TransientStorageError
) -> JSONResponse:
    logger.warning("storage unavailable", extra={"path": request.url.path})
    return JSONResponse(status_code=503, content={"detail": "temporarily unavailable"})


async def on_internal_consistency_error(
    request: Request, exc: InternalConsistencyError
) -> JSONResponse:
    logger.error(
        "internal consistency error",
        extra={"path": request.url.path, "error": str(exc)},
    )
    return JSONResponse(status_code=500, content={"detail": "internal error"})


def create_app() -> FastAPI:
    setup_logging(settings.log_level)
    app = FastAPI(title="Account Activation API", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.add_exception_handler(TransientStorageError, on_transient_storage_error)
    app.add_exception_handler(InternalConsistencyError, on_internal_consistency_error)
    app.include_router(api)
    return app


app = create_app()
