from __future__ import annotations

import uuid
from datetime import datetime, timezone

from campus_chat.application.dto.message import SendMessageDTO
from campus_chat.application.dto.principal import Principal
from campus_chat.application.exceptions import ValidationError
from campus_chat.application.policies.permissions import (
    assert_group_member,
    assert_sender,
    require_viewer,
)
from campus_chat.application.row_changes import record_message_change
from campus_chat.application.uow import UnitOfWork
from campus_chat.domain.entities.message import Message
from campus_chat.domain.value_objects.enums import ChangeType
from campus_chat.domain.value_objects.scope import MessageScope
from campus_chat.services.message_service import EMPTY_MESSAGE


async def list_group_messages(
    principal: Principal | None,
    group_id: uuid.UUID,
    uow: UnitOfWork,
) -> list[Message]:
    viewer = require_viewer(principal)
    await assert_group_member(viewer, group_id, uow.groups, uow.members)
    return await uow.group_messages.list_for_group(group_id)


async def send_group_message(
    principal: Principal | None,
    group_id: uuid.UUID,
    payload: SendMessageDTO,
    uow: UnitOfWork,
) -> Message:
    viewer = require_viewer(principal)
    if payload.is_empty:
        raise ValidationError(EMPTY_MESSAGE)
    await assert_group_member(viewer, group_id, uow.groups, uow.members)

    msg = Message(
        id=uuid.uuid4(),
        scope=MessageScope.group(group_id),
        sender_id=viewer.user_id,
        body=payload.body or "",
        attachment_url=payload.attachment.url if payload.attachment else None,
        attachment_kind=payload.attachment.kind if payload.attachment else None,
        shared=payload.shared,
        created_at=datetime.now(timezone.utc),
    )
    msg = await uow.group_messages_w.create(msg)
    await record_message_change(uow, msg, ChangeType.INSERT)
    await uow.commit()
    return msg


async def delete_group_message(
    principal: Principal | None,
    message_id: uuid.UUID,
    uow: UnitOfWork,
) -> Message:
    viewer = require_viewer(principal)
    message = assert_sender(viewer, await uow.group_messages.get_by_id(message_id))

    await uow.group_messages_w.delete(message.id)
    await record_message_change(uow, message, ChangeType.DELETE)
    await uow.commit()
    return message
