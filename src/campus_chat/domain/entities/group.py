from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from campus_chat.domain.value_objects.enums import GroupVisibility, MemberRole


@dataclass(frozen=True, slots=True)
class Group:
    id: UUID
    name: str
    description: str | None
    visibility: GroupVisibility
    college: str | None
    created_by: UUID | None
    image_url: str | None
    created_at: datetime


@dataclass(frozen=True, slots=True)
class GroupMember:
    group_id: UUID
    user_id: UUID
    role: MemberRole
    joined_at: datetime

    @property
    def is_admin(self) -> bool:
        return self.role == MemberRole.ADMIN
