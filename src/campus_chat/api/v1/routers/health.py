from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from campus_chat.infrastructure.db.session import ping_database

router = APIRouter(tags=["health"])


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(request: Request) -> JSONResponse:
    errors: list[str] = []

    try:
        await ping_database()
    except Exception as exc:  # noqa: BLE001
        errors.append(f"postgres: {exc}")

    try:
        await request.app.state.redis.ping()
    except Exception as exc:  # noqa: BLE001
        errors.append(f"redis: {exc}")

    if not request.app.state.pubsub_subscriber.running:
        errors.append("change feed: subscriber not running")

    if errors:
        return JSONResponse(
            status_code=503,
            content={"status": "unavailable", "errors": errors},
        )
    return JSONResponse(
        content={
            "status": "ready",
            "subscriptions": request.app.state.change_router.subscription_count,
        }
    )
