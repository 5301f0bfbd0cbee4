from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import redis.asyncio as aioredis
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from campus_chat.api.middleware.correlation_id import CorrelationIdMiddleware
from campus_chat.api.middleware.request_logging import RequestLoggingMiddleware
from campus_chat.api.v1.routers import (
    conversations,
    group_messages,
    groups,
    health,
    interactions,
    messages,
    sharing,
    uploads,
    ws,
)
from campus_chat.application.exceptions import (
    AppError,
    ConflictError,
    ForbiddenError,
    NotAuthenticatedError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)
from campus_chat.application.row_changes import ROW_CHANGED, from_payload
from campus_chat.config import settings
from campus_chat.infrastructure.bus.redis_pubsub import RedisPubSubSubscriber
from campus_chat.infrastructure.db.session import dispose_engine
from campus_chat.infrastructure.db.uow import session_uow
from campus_chat.infrastructure.realtime.router import ChangeRouter
from campus_chat.infrastructure.storage.supabase_storage import SupabaseStorage
from campus_chat.infrastructure.verification.http_verifier import HttpDocumentVerifier

logger = logging.getLogger(__name__)


def _bus_callback(change_router: ChangeRouter):
    async def on_event(event_type: str, data: dict[str, Any]) -> None:
        if event_type != ROW_CHANGED:
            return
        try:
            change = from_payload(data)
        except (KeyError, ValueError):
            logger.warning("Ignoring malformed row change: %r", data)
            return
        await change_router.dispatch(change)

    return on_event


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""
    app.state.redis = aioredis.from_url(
        settings.REDIS_URL,
        decode_responses=True,
    )
    logger.info("Redis connection pool created")

    app.state.uow_factory = session_uow
    app.state.change_router = ChangeRouter()
    subscriber = RedisPubSubSubscriber(
        app.state.redis,
        settings.REDIS_PUBSUB_CHANNEL,
        _bus_callback(app.state.change_router),
    )
    await subscriber.start()
    app.state.pubsub_subscriber = subscriber

    app.state.storage = SupabaseStorage(
        settings.SUPABASE_URL,
        settings.SUPABASE_SERVICE_KEY,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )
    app.state.document_verifier = HttpDocumentVerifier(
        settings.verify_function_url,
        settings.SUPABASE_SERVICE_KEY,
    )

    yield

    ws.get_manager().close_all()
    await subscriber.stop()
    await app.state.storage.aclose()
    await app.state.document_verifier.aclose()
    await app.state.redis.aclose()
    logger.info("Redis connection pool closed")
    await dispose_engine()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Campus Chat Service",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(CorrelationIdMiddleware)

    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(conversations.router)
    app.include_router(messages.router)
    app.include_router(group_messages.router)
    app.include_router(groups.router)
    app.include_router(interactions.router)
    app.include_router(sharing.router)
    app.include_router(uploads.router)
    app.include_router(ws.router)

    return app


_STATUS_CODES: dict[type[AppError], int] = {
    NotAuthenticatedError: 401,
    ForbiddenError: 403,
    NotFoundError: 404,
    ConflictError: 409,
    ValidationError: 422,
    StoreUnavailableError: 503,
}


def _register_exception_handlers(app: FastAPI) -> None:
    async def _app_error(_req: Request, exc: Exception) -> JSONResponse:
        assert isinstance(exc, AppError)
        status_code = _STATUS_CODES.get(type(exc), 400)
        if status_code == 503:
            logger.warning("Store unavailable: %s", exc.detail)
        headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
        return JSONResponse(status_code=status_code, content={"detail": exc.detail}, headers=headers)

    for exc_class in _STATUS_CODES:
        app.add_exception_handler(exc_class, _app_error)
