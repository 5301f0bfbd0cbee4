from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Query, Response

from campus_chat.api.deps import OptionalPrincipal, UoWDep
from campus_chat.api.v1.schemas.group import (
    AddMemberRequest,
    CreateGroupRequest,
    GroupMemberResponse,
    GroupResponse,
    UpdateGroupRequest,
)
from campus_chat.domain.value_objects.enums import GroupVisibility
from campus_chat.services import group_service

router = APIRouter(prefix="/api/v1/groups", tags=["groups"])


@router.post("", response_model=GroupResponse, status_code=201)
async def create_group(
    body: CreateGroupRequest,
    principal: OptionalPrincipal,
    uow: UoWDep,
) -> GroupResponse:
    group = await group_service.create_group(principal, body.to_dto(), uow)
    return GroupResponse.model_validate(group)


@router.get("", response_model=list[GroupResponse])
async def list_groups(
    principal: OptionalPrincipal,
    uow: UoWDep,
    visibility: GroupVisibility = Query(GroupVisibility.MY_COLLEGE),
) -> list[GroupResponse]:
    groups = await group_service.list_groups(principal, visibility, uow)
    return [GroupResponse.model_validate(g) for g in groups]


@router.get("/{group_id}", response_model=GroupResponse)
async def get_group(
    group_id: UUID,
    principal: OptionalPrincipal,
    uow: UoWDep,
) -> GroupResponse:
    group = await group_service.get_group(principal, group_id, uow)
    return GroupResponse.model_validate(group)


@router.patch("/{group_id}", response_model=GroupResponse)
async def update_group(
    group_id: UUID,
    body: UpdateGroupRequest,
    principal: OptionalPrincipal,
    uow: UoWDep,
) -> GroupResponse:
    group = await group_service.update_group(principal, group_id, body.to_dto(), uow)
    return GroupResponse.model_validate(group)


@router.delete("/{group_id}", status_code=204)
async def delete_group(
    group_id: UUID,
    principal: OptionalPrincipal,
    uow: UoWDep,
) -> Response:
    await group_service.delete_group(principal, group_id, uow)
    return Response(status_code=204)


@router.get("/{group_id}/members", response_model=list[GroupMemberResponse])
async def list_members(
    group_id: UUID,
    principal: OptionalPrincipal,
    uow: UoWDep,
) -> list[GroupMemberResponse]:
    members = await group_service.list_members(principal, group_id, uow)
    return [GroupMemberResponse.model_validate(m) for m in members]


@router.post("/{group_id}/members", response_model=GroupMemberResponse, status_code=201)
async def add_member(
    group_id: UUID,
    body: AddMemberRequest,
    principal: OptionalPrincipal,
    uow: UoWDep,
) -> GroupMemberResponse:
    member = await group_service.add_member(principal, group_id, body.user_id, uow)
    return GroupMemberResponse.model_validate(member)


@router.delete("/{group_id}/members/{user_id}", status_code=204)
async def remove_member(
    group_id: UUID,
    user_id: UUID,
    principal: OptionalPrincipal,
    uow: UoWDep,
) -> Response:
    await group_service.remove_member(principal, group_id, user_id, uow)
    return Response(status_code=204)
