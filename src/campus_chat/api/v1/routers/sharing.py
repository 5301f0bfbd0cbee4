from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Response

from campus_chat.api.deps import OptionalPrincipal, UoWDep
from campus_chat.api.v1.schemas.message import MessageResponse
from campus_chat.api.v1.schemas.sharing import (
    FollowStatusResponse,
    ShareRequest,
    ShareTargetsResponse,
)
from campus_chat.services import follow_service, share_service

router = APIRouter(prefix="/api/v1", tags=["sharing"])


@router.post("/share", response_model=MessageResponse, status_code=201)
async def share_entity(
    body: ShareRequest,
    principal: OptionalPrincipal,
    uow: UoWDep,
) -> MessageResponse:
    msg = await share_service.share_entity(principal, body.target, body.shared, uow)
    return MessageResponse.from_entity(msg)


@router.get("/share/targets", response_model=ShareTargetsResponse)
async def list_share_targets(
    principal: OptionalPrincipal,
    uow: UoWDep,
) -> ShareTargetsResponse:
    targets = await share_service.list_share_targets(principal, uow)
    return ShareTargetsResponse.model_validate(targets)


@router.get("/follows/{user_id}", response_model=FollowStatusResponse)
async def follow_status(
    user_id: UUID,
    principal: OptionalPrincipal,
    uow: UoWDep,
) -> FollowStatusResponse:
    return FollowStatusResponse(
        following=await follow_service.is_following(principal, user_id, uow),
        mutual=await follow_service.is_mutual(principal, user_id, uow),
    )


@router.put("/follows/{user_id}", status_code=204)
async def follow(
    user_id: UUID,
    principal: OptionalPrincipal,
    uow: UoWDep,
) -> Response:
    await follow_service.follow(principal, user_id, uow)
    return Response(status_code=204)


@router.delete("/follows/{user_id}", status_code=204)
async def unfollow(
    user_id: UUID,
    principal: OptionalPrincipal,
    uow: UoWDep,
) -> Response:
    await follow_service.unfollow(principal, user_id, uow)
    return Response(status_code=204)
