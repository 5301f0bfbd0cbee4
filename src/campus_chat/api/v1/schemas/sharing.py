from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, model_validator

from campus_chat.api.v1.schemas.group import GroupResponse
from campus_chat.api.v1.schemas.profile import ProfileResponse
from campus_chat.domain.value_objects.enums import SharedKind
from campus_chat.domain.value_objects.scope import MessageScope
from campus_chat.domain.value_objects.shared_ref import SharedRef


class ShareRequest(BaseModel):
    """Exactly one of ``receiver_id`` and ``group_id`` selects the thread."""

    kind: SharedKind
    entity_id: UUID
    receiver_id: UUID | None = None
    group_id: UUID | None = None

    @model_validator(mode="after")
    def _one_target(self) -> ShareRequest:
        if (self.receiver_id is None) == (self.group_id is None):
            raise ValueError("Provide exactly one of receiver_id or group_id")
        if self.kind == SharedKind.NONE:
            raise ValueError("kind must be post, project or user")
        return self

    @property
    def target(self) -> MessageScope:
        if self.receiver_id is not None:
            return MessageScope.direct(self.receiver_id)
        assert self.group_id is not None
        return MessageScope.group(self.group_id)

    @property
    def shared(self) -> SharedRef:
        return SharedRef(self.kind, self.entity_id)


class ShareTargetsResponse(BaseModel):
    users: list[ProfileResponse]
    groups: list[GroupResponse]

    model_config = {"from_attributes": True}


class FollowStatusResponse(BaseModel):
    following: bool
    mutual: bool
