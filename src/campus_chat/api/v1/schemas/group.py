from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from campus_chat.application.dto.group import CreateGroupDTO, UpdateGroupDTO
from campus_chat.domain.value_objects.enums import GroupVisibility, MemberRole


class CreateGroupRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    visibility: GroupVisibility
    members: list[UUID] = []

    def to_dto(self) -> CreateGroupDTO:
        return CreateGroupDTO(
            name=self.name,
            visibility=self.visibility,
            description=self.description,
            members=list(self.members),
        )


class UpdateGroupRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    image_url: str | None = None

    def to_dto(self) -> UpdateGroupDTO:
        return UpdateGroupDTO(name=self.name, description=self.description, image_url=self.image_url)


class AddMemberRequest(BaseModel):
    user_id: UUID


class GroupResponse(BaseModel):
    id: UUID
    name: str
    description: str | None
    visibility: GroupVisibility
    college: str | None
    created_by: UUID | None
    image_url: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class GroupMemberResponse(BaseModel):
    group_id: UUID
    user_id: UUID
    role: MemberRole
    joined_at: datetime

    model_config = {"from_attributes": True}
