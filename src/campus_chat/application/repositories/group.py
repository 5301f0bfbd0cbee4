from __future__ import annotations

from typing import Any, Protocol
from uuid import UUID

from campus_chat.domain.entities.group import Group, GroupMember
from campus_chat.domain.value_objects.enums import GroupVisibility


class GroupReader(Protocol):
    async def get_by_id(self, group_id: UUID) -> Group | None: ...

    async def list_by_visibility(
        self, visibility: GroupVisibility, *, college: str | None = None,
    ) -> list[Group]:
        """Newest first."""
        ...

    async def list_by_ids(self, group_ids: list[UUID]) -> list[Group]: ...


class GroupWriter(Protocol):
    async def create(self, group: Group) -> Group: ...

    async def update(self, group_id: UUID, changes: dict[str, Any]) -> None: ...

    async def delete(self, group_id: UUID) -> None: ...


class MemberReader(Protocol):
    async def get_member(self, group_id: UUID, user_id: UUID) -> GroupMember | None: ...

    async def list_members(self, group_id: UUID) -> list[GroupMember]: ...

    async def list_group_ids_for_user(self, user_id: UUID) -> list[UUID]: ...


class MemberWriter(Protocol):
    async def add(self, member: GroupMember) -> None: ...

    async def remove(self, group_id: UUID, user_id: UUID) -> None: ...
