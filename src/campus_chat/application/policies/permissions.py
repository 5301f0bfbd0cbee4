from __future__ import annotations

from uuid import UUID

from campus_chat.application.dto.principal import Principal
from campus_chat.application.exceptions import (
    ForbiddenError,
    NotAuthenticatedError,
    NotFoundError,
)
from campus_chat.application.repositories.group import GroupReader, MemberReader
from campus_chat.domain.entities.group import Group, GroupMember
from campus_chat.domain.entities.message import Message


def require_viewer(principal: Principal | None) -> Principal:
    """Raise if there is no authenticated viewer."""
    if principal is None:
        raise NotAuthenticatedError("Not authenticated")
    return principal


def assert_sender(principal: Principal, message: Message | None) -> Message:
    if message is None:
        raise NotFoundError("Message not found")
    if message.sender_id != principal.user_id:
        raise ForbiddenError("Only the sender can delete this message")
    return message


async def assert_group_member(
    principal: Principal,
    group_id: UUID,
    groups: GroupReader,
    members: MemberReader,
) -> tuple[Group, GroupMember]:
    """Raise if the group doesn't exist or the viewer is not a member."""
    group = await groups.get_by_id(group_id)
    if group is None:
        raise NotFoundError("Group not found")

    member = await members.get_member(group_id, principal.user_id)
    if member is None:
        raise ForbiddenError("Not a member of this group")

    return group, member


async def assert_group_admin(
    principal: Principal,
    group_id: UUID,
    groups: GroupReader,
    members: MemberReader,
) -> Group:
    group, member = await assert_group_member(principal, group_id, groups, members)
    if not member.is_admin:
        raise ForbiddenError("Group admin access required")
    return group
