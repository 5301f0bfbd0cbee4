from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Response

from campus_chat.api.deps import OptionalPrincipal, UoWDep
from campus_chat.api.v1.schemas.message import MessageResponse, SendMessageRequest
from campus_chat.services import group_message_service
from campus_chat.services.shared_entity_resolver import SharedEntityResolver

router = APIRouter(prefix="/api/v1/chat", tags=["group-messages"])


@router.get("/groups/{group_id}/messages", response_model=list[MessageResponse])
async def list_group_messages(
    group_id: UUID,
    principal: OptionalPrincipal,
    uow: UoWDep,
) -> list[MessageResponse]:
    messages = await group_message_service.list_group_messages(principal, group_id, uow)
    previews = await SharedEntityResolver(uow.profiles).resolve_many(messages)
    return [MessageResponse.from_entity(m, previews.get(m.id)) for m in messages]


@router.post("/groups/{group_id}/messages", response_model=MessageResponse, status_code=201)
async def send_group_message(
    group_id: UUID,
    body: SendMessageRequest,
    principal: OptionalPrincipal,
    uow: UoWDep,
) -> MessageResponse:
    msg = await group_message_service.send_group_message(principal, group_id, body.to_dto(), uow)
    return MessageResponse.from_entity(msg)


@router.delete("/group-messages/{message_id}", status_code=204)
async def delete_group_message(
    message_id: UUID,
    principal: OptionalPrincipal,
    uow: UoWDep,
) -> Response:
    await group_message_service.delete_group_message(principal, message_id, uow)
    return Response(status_code=204)
