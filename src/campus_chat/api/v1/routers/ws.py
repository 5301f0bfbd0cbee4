from __future__ import annotations

import asyncio
import logging
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect

from campus_chat.api.deps import authenticate
from campus_chat.api.v1.schemas.conversation import ConversationResponse
from campus_chat.api.v1.schemas.interaction import InteractionStateResponse
from campus_chat.api.v1.schemas.message import MessageResponse, SendMessageRequest
from campus_chat.application.dto.principal import Principal
from campus_chat.application.exceptions import AppError
from campus_chat.config import settings
from campus_chat.domain.entities.message import Message
from campus_chat.domain.value_objects.enums import EntityKind, InteractionKind
from campus_chat.infrastructure.ws.manager import ConnectionManager
from campus_chat.infrastructure.ws.protocol import WsInbound, WsOutbound
from campus_chat.sync.channels import MessageChannel, OnRefresh
from campus_chat.sync.session import ChatSession

logger = logging.getLogger(__name__)
router = APIRouter(tags=["websocket"])

manager = ConnectionManager()


def get_manager() -> ConnectionManager:
    return manager


async def _authenticate(token: str) -> Principal | None:
    try:
        return await authenticate(token)
    except AppError:
        logger.debug("WS auth failed", exc_info=True)
        return None


@router.websocket("/ws/chat")
async def ws_chat(
    websocket: WebSocket,
    token: str = Query(...),
) -> None:
    principal = await _authenticate(token)
    if principal is None:
        await websocket.close(code=4001, reason="Authentication failed")
        return

    pkey = principal.principal_key
    state = websocket.app.state
    session = ChatSession(principal, state.uow_factory, state.change_router)
    await manager.connect(websocket, pkey, session)

    heartbeat_task = asyncio.create_task(
        _heartbeat(websocket), name=f"ws-heartbeat-{pkey}",
    )
    try:
        await _read_loop(websocket, session)
    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception("WS error for %s", pkey)
    finally:
        heartbeat_task.cancel()
        manager.disconnect(websocket, pkey)


async def _heartbeat(ws: WebSocket) -> None:
    interval = settings.WS_HEARTBEAT_SECONDS
    try:
        while True:
            await asyncio.sleep(interval)
            await ws.send_text(WsOutbound(type="pong", data={}).model_dump_json())
    except asyncio.CancelledError:
        pass
    except Exception:
        logger.debug("WS heartbeat stopped", exc_info=True)


async def _read_loop(ws: WebSocket, session: ChatSession) -> None:
    while True:
        raw = await ws.receive_text()
        try:
            msg = WsInbound.model_validate_json(raw)
        except ValueError:
            await manager.send_error(ws, "invalid_payload")
            continue

        handler = _HANDLERS.get(msg.type)
        if handler is None:
            await manager.send_error(ws, "unknown_type", type=msg.type)
            continue
        try:
            await handler(ws, session, msg.data)
        except AppError as exc:
            await manager.send_error(ws, type(exc).__name__, detail=exc.detail, type=msg.type)
        except (KeyError, ValueError) as exc:
            await manager.send_error(ws, "invalid_data", detail=str(exc), type=msg.type)


async def _push_thread(
    ws: WebSocket, session: ChatSession, target: dict[str, str], messages: list[Message],
) -> None:
    previews = await session.shared_previews(messages)
    await manager.send(ws, "thread", {
        **target,
        "messages": [
            MessageResponse.from_entity(m, previews.get(m.id)).model_dump(mode="json")
            for m in messages
        ],
    })


def _pusher(ws: WebSocket, session: ChatSession, target: dict[str, str]) -> OnRefresh:
    async def push(messages: list[Message]) -> None:
        await _push_thread(ws, session, target, messages)

    return push


async def _ping(ws: WebSocket, session: ChatSession, data: dict[str, Any]) -> None:
    await manager.send(ws, "pong", {})


async def _conversations(ws: WebSocket, session: ChatSession, data: dict[str, Any]) -> None:
    convs = await session.conversations(force=bool(data.get("force")))
    await manager.send(ws, "conversations", {
        "items": [
            ConversationResponse.model_validate(c, from_attributes=True).model_dump(mode="json")
            for c in convs
        ],
    })


async def _channel(
    ws: WebSocket, session: ChatSession, data: dict[str, Any],
) -> tuple[MessageChannel, dict[str, str]]:
    """Open (or reuse) the thread named by ``group_id`` or ``partner_id``."""
    if "group_id" in data:
        group_id = UUID(data["group_id"])
        target = {"group_id": str(group_id)}
        return await session.group(group_id, on_refresh=_pusher(ws, session, target)), target
    partner_id = UUID(data["partner_id"])
    target = {"partner_id": str(partner_id)}
    return await session.direct(partner_id, on_refresh=_pusher(ws, session, target)), target


async def _open(ws: WebSocket, session: ChatSession, data: dict[str, Any]) -> None:
    channel, target = await _channel(ws, session, data)
    await _push_thread(ws, session, target, await channel.messages())


async def _leave(ws: WebSocket, session: ChatSession, data: dict[str, Any]) -> None:
    if "partner_id" in data:
        session.leave_direct(UUID(data["partner_id"]))
    if "group_id" in data:
        session.leave_group(UUID(data["group_id"]))


async def _send(ws: WebSocket, session: ChatSession, data: dict[str, Any]) -> None:
    payload = SendMessageRequest.model_validate(data).to_dto()
    channel, _ = await _channel(ws, session, data)
    await channel.send(payload)


async def _delete(ws: WebSocket, session: ChatSession, data: dict[str, Any]) -> None:
    message_id = UUID(data["message_id"])
    channel, _ = await _channel(ws, session, data)
    await channel.delete(message_id)


async def _toggle(ws: WebSocket, session: ChatSession, data: dict[str, Any]) -> None:
    kind = InteractionKind(data["kind"])
    entity = EntityKind(data["entity"])
    entity_id = UUID(data["entity_id"])
    state = await session.counter(kind, entity, entity_id).toggle()
    await manager.send(ws, "interaction", {
        "kind": kind.value,
        "entity": entity.value,
        "entity_id": str(entity_id),
        **InteractionStateResponse.model_validate(state).model_dump(),
    })


_HANDLERS = {
    "ping": _ping,
    "conversations": _conversations,
    "open": _open,
    "leave": _leave,
    "send": _send,
    "delete": _delete,
    "toggle": _toggle,
}
