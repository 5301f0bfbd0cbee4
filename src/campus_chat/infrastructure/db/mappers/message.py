"""Both message tables map onto the single ``Message`` entity."""
from __future__ import annotations

from campus_chat.domain.entities.message import Message
from campus_chat.domain.value_objects.enums import AttachmentKind
from campus_chat.domain.value_objects.scope import MessageScope
from campus_chat.domain.value_objects.shared_ref import SharedRef
from campus_chat.infrastructure.db.models.message import GroupMessageModel, MessageModel

# group_messages.type for a plain text row
TEXT_TYPE = "text"


def _attachment_kind(value: str | None) -> AttachmentKind | None:
    if not value or value == TEXT_TYPE:
        return None
    try:
        return AttachmentKind(value)
    except ValueError:
        return AttachmentKind.DOCUMENT


def _shared(model: MessageModel | GroupMessageModel) -> SharedRef:
    return SharedRef.from_columns(
        model.shared_post_id,
        model.shared_project_id,
        model.shared_user_id,
        strict=False,
    )


def model_to_entity(model: MessageModel) -> Message:
    return Message(
        id=model.id,
        scope=MessageScope.direct(model.receiver_id),
        sender_id=model.sender_id,
        body=model.message,
        attachment_url=model.attachment_url,
        attachment_kind=_attachment_kind(model.attachment_type),
        shared=_shared(model),
        created_at=model.created_at,
    )


def entity_to_model(entity: Message) -> MessageModel:
    return MessageModel(
        id=entity.id,
        sender_id=entity.sender_id,
        receiver_id=entity.scope.target_id,
        message=entity.body,
        attachment_url=entity.attachment_url,
        attachment_type=entity.attachment_kind.value if entity.attachment_kind else None,
        created_at=entity.created_at,
        **entity.shared.to_columns(),
    )


def group_model_to_entity(model: GroupMessageModel) -> Message:
    return Message(
        id=model.id,
        scope=MessageScope.group(model.group_id),
        sender_id=model.sender_id,
        body=model.content,
        attachment_url=model.media_url,
        attachment_kind=_attachment_kind(model.type),
        shared=_shared(model),
        created_at=model.created_at,
    )


def entity_to_group_model(entity: Message) -> GroupMessageModel:
    return GroupMessageModel(
        id=entity.id,
        group_id=entity.scope.target_id,
        sender_id=entity.sender_id,
        content=entity.body,
        media_url=entity.attachment_url,
        type=entity.attachment_kind.value if entity.attachment_kind else TEXT_TYPE,
        created_at=entity.created_at,
        **entity.shared.to_columns(),
    )
