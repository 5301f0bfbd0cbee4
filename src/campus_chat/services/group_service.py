from __future__ import annotations

import uuid
from datetime import datetime, timezone

from campus_chat.application.dto.group import CreateGroupDTO, UpdateGroupDTO
from campus_chat.application.dto.principal import Principal
from campus_chat.application.exceptions import ConflictError, NotFoundError, ValidationError
from campus_chat.application.policies.permissions import assert_group_admin, require_viewer
from campus_chat.application.row_changes import record_membership_change
from campus_chat.application.uow import UnitOfWork
from campus_chat.domain.entities.group import Group, GroupMember
from campus_chat.domain.value_objects.enums import ChangeType, GroupVisibility, MemberRole


async def create_group(
    principal: Principal | None,
    payload: CreateGroupDTO,
    uow: UnitOfWork,
) -> Group:
    """Create a group; the creator joins as admin, listed users as members."""
    viewer = require_viewer(principal)
    name = payload.name.strip()
    if not name:
        raise ValidationError("Group name is required")

    college: str | None = None
    if payload.visibility == GroupVisibility.MY_COLLEGE:
        profile = await uow.profiles.get_user(viewer.user_id)
        college = profile.college if profile else None

    now = datetime.now(timezone.utc)
    group = await uow.groups_w.create(
        Group(
            id=uuid.uuid4(),
            name=name,
            description=payload.description,
            visibility=payload.visibility,
            college=college,
            created_by=viewer.user_id,
            image_url=None,
            created_at=now,
        )
    )

    await uow.members_w.add(
        GroupMember(group_id=group.id, user_id=viewer.user_id, role=MemberRole.ADMIN, joined_at=now)
    )
    for user_id in dict.fromkeys(payload.members):
        if user_id == viewer.user_id:
            continue
        await uow.members_w.add(
            GroupMember(group_id=group.id, user_id=user_id, role=MemberRole.MEMBER, joined_at=now)
        )

    await uow.commit()
    return group


async def list_groups(
    principal: Principal | None,
    visibility: GroupVisibility,
    uow: UnitOfWork,
) -> list[Group]:
    viewer = require_viewer(principal)
    if visibility == GroupVisibility.OTHER_COLLEGES:
        return await uow.groups.list_by_visibility(visibility)

    profile = await uow.profiles.get_user(viewer.user_id)
    if profile is None or not profile.college:
        return []
    return await uow.groups.list_by_visibility(visibility, college=profile.college)


async def get_group(
    principal: Principal | None,
    group_id: uuid.UUID,
    uow: UnitOfWork,
) -> Group:
    require_viewer(principal)
    group = await uow.groups.get_by_id(group_id)
    if group is None:
        raise NotFoundError("Group not found")
    return group


async def update_group(
    principal: Principal | None,
    group_id: uuid.UUID,
    payload: UpdateGroupDTO,
    uow: UnitOfWork,
) -> Group:
    viewer = require_viewer(principal)
    group = await assert_group_admin(viewer, group_id, uow.groups, uow.members)

    changes = payload.changes()
    if "name" in changes and not changes["name"].strip():
        raise ValidationError("Group name is required")
    if not changes:
        return group

    await uow.groups_w.update(group_id, changes)
    await uow.commit()
    return await get_group(viewer, group_id, uow)


async def delete_group(
    principal: Principal | None,
    group_id: uuid.UUID,
    uow: UnitOfWork,
) -> None:
    viewer = require_viewer(principal)
    await assert_group_admin(viewer, group_id, uow.groups, uow.members)
    await uow.groups_w.delete(group_id)
    await uow.commit()


async def list_members(
    principal: Principal | None,
    group_id: uuid.UUID,
    uow: UnitOfWork,
) -> list[GroupMember]:
    await get_group(principal, group_id, uow)
    return await uow.members.list_members(group_id)


async def add_member(
    principal: Principal | None,
    group_id: uuid.UUID,
    user_id: uuid.UUID,
    uow: UnitOfWork,
) -> GroupMember:
    viewer = require_viewer(principal)
    await assert_group_admin(viewer, group_id, uow.groups, uow.members)

    if await uow.members.get_member(group_id, user_id) is not None:
        raise ConflictError("User is already a member of this group")

    member = GroupMember(
        group_id=group_id,
        user_id=user_id,
        role=MemberRole.MEMBER,
        joined_at=datetime.now(timezone.utc),
    )
    await uow.members_w.add(member)
    await record_membership_change(uow, group_id, user_id, ChangeType.INSERT)
    await uow.commit()
    return member


async def remove_member(
    principal: Principal | None,
    group_id: uuid.UUID,
    user_id: uuid.UUID,
    uow: UnitOfWork,
) -> None:
    viewer = require_viewer(principal)
    await assert_group_admin(viewer, group_id, uow.groups, uow.members)

    if await uow.members.get_member(group_id, user_id) is None:
        raise NotFoundError("User is not a member of this group")

    await uow.members_w.remove(group_id, user_id)
    await record_membership_change(uow, group_id, user_id, ChangeType.DELETE)
    await uow.commit()
