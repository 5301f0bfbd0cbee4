from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from campus_chat.api.v1.schemas.profile import ProfileResponse
from campus_chat.application.dto.message import Attachment, SendMessageDTO
from campus_chat.application.exceptions import ValidationError
from campus_chat.domain.entities.message import Message
from campus_chat.domain.entities.profile import PostPreview, ProjectPreview, UserProfile
from campus_chat.domain.entities.shared import SharedPreview, Unavailable
from campus_chat.domain.value_objects.enums import AttachmentKind, ScopeKind, SharedKind
from campus_chat.domain.value_objects.shared_ref import SharedRef


class SendMessageRequest(BaseModel):
    body: str | None = None
    attachment_url: str | None = None
    attachment_kind: AttachmentKind | None = None
    shared_post_id: UUID | None = None
    shared_project_id: UUID | None = None
    shared_user_id: UUID | None = None

    def to_dto(self) -> SendMessageDTO:
        try:
            shared = SharedRef.from_columns(
                self.shared_post_id, self.shared_project_id, self.shared_user_id,
            )
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc

        attachment = None
        if self.attachment_url:
            if self.attachment_kind is None:
                raise ValidationError("attachment_kind is required with attachment_url")
            attachment = Attachment(url=self.attachment_url, kind=self.attachment_kind)
        return SendMessageDTO(body=self.body, attachment=attachment, shared=shared)


class SharedPreviewResponse(BaseModel):
    kind: SharedKind
    id: UUID
    available: bool = True
    label: str | None = None
    caption: str | None = None
    title: str | None = None
    description: str | None = None
    media_url: str | None = None
    zip_file_url: str | None = None
    author: ProfileResponse | None = None
    profile: ProfileResponse | None = None

    @classmethod
    def from_preview(cls, preview: SharedPreview) -> SharedPreviewResponse:
        if isinstance(preview, Unavailable):
            return cls(kind=preview.kind, id=preview.id, available=False, label=preview.label)
        if isinstance(preview, PostPreview):
            return cls(
                kind=SharedKind.POST,
                id=preview.id,
                caption=preview.caption,
                media_url=preview.media_url,
                author=_profile(preview.author),
            )
        if isinstance(preview, ProjectPreview):
            return cls(
                kind=SharedKind.PROJECT,
                id=preview.id,
                title=preview.title,
                description=preview.description,
                zip_file_url=preview.zip_file_url,
                author=_profile(preview.author),
            )
        return cls(kind=SharedKind.USER, id=preview.id, profile=_profile(preview))


def _profile(profile: UserProfile | None) -> ProfileResponse | None:
    return ProfileResponse.model_validate(profile) if profile else None


class MessageResponse(BaseModel):
    id: UUID
    scope: ScopeKind
    sender_id: UUID
    receiver_id: UUID | None = None
    group_id: UUID | None = None
    body: str | None
    attachment_url: str | None
    attachment_kind: AttachmentKind | None
    shared_kind: SharedKind = SharedKind.NONE
    shared_id: UUID | None = None
    shared: SharedPreviewResponse | None = None
    created_at: datetime

    @classmethod
    def from_entity(
        cls, message: Message, preview: SharedPreview | None = None,
    ) -> MessageResponse:
        return cls(
            id=message.id,
            scope=message.scope.kind,
            sender_id=message.sender_id,
            receiver_id=message.scope.target_id if message.scope.is_direct else None,
            group_id=None if message.scope.is_direct else message.scope.target_id,
            body=message.body,
            attachment_url=message.attachment_url,
            attachment_kind=message.attachment_kind,
            shared_kind=message.shared.kind,
            shared_id=message.shared.id,
            shared=SharedPreviewResponse.from_preview(preview) if preview else None,
            created_at=message.created_at,
        )
