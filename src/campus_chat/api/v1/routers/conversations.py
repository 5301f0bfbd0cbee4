from __future__ import annotations

from fastapi import APIRouter

from campus_chat.api.deps import OptionalPrincipal, UoWDep
from campus_chat.api.v1.schemas.conversation import ConversationResponse
from campus_chat.services import conversation_service

router = APIRouter(prefix="/api/v1/chat/conversations", tags=["conversations"])


@router.get("", response_model=list[ConversationResponse])
async def list_conversations(
    principal: OptionalPrincipal,
    uow: UoWDep,
) -> list[ConversationResponse]:
    convs = await conversation_service.list_conversations(principal, uow)
    return [ConversationResponse.model_validate(c, from_attributes=True) for c in convs]
