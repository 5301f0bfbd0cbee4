from __future__ import annotations

import uuid
from datetime import timedelta

import pytest

from campus_chat.application.dto.message import Attachment, SendMessageDTO
from campus_chat.application.exceptions import (
    ForbiddenError,
    NotAuthenticatedError,
    NotFoundError,
    ValidationError,
)
from campus_chat.application.row_changes import ROW_CHANGED
from campus_chat.domain.value_objects.enums import AttachmentKind
from campus_chat.domain.value_objects.shared_ref import SharedRef
from campus_chat.services import message_service
from tests.conftest import T0, FakeUoW, make_message


@pytest.mark.asyncio
async def test_send_then_list_contains_message(alice, bob):
    uow = FakeUoW()

    sent = await message_service.send_message(alice, bob.user_id, SendMessageDTO(body="hi"), uow)
    thread = await message_service.list_messages(bob, alice.user_id, uow)

    assert [m.id for m in thread] == [sent.id]
    assert sent.sender_id == alice.user_id
    assert sent.partner_of(alice.user_id) == bob.user_id
    assert uow._committed is True


@pytest.mark.asyncio
async def test_thread_is_oldest_first_and_excludes_other_pairs(alice, bob):
    uow = FakeUoW()
    later = make_message(
        sender_id=bob.user_id, receiver_id=alice.user_id, body="second",
        created_at=T0 + timedelta(seconds=5),
    )
    earlier = make_message(sender_id=alice.user_id, receiver_id=bob.user_id, body="first")
    other = make_message(sender_id=alice.user_id, body="elsewhere")
    uow.store.messages += [later, other, earlier]

    thread = await message_service.list_messages(alice, bob.user_id, uow)

    assert [m.body for m in thread] == ["first", "second"]


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [None, "", "   \n"])
async def test_empty_message_rejected(alice, bob, body):
    uow = FakeUoW()

    with pytest.raises(ValidationError):
        await message_service.send_message(alice, bob.user_id, SendMessageDTO(body=body), uow)

    assert uow.store.messages == []
    assert uow._committed is False


@pytest.mark.asyncio
async def test_attachment_or_share_without_text_is_allowed(alice, bob):
    uow = FakeUoW()

    with_file = await message_service.send_message(
        alice, bob.user_id,
        SendMessageDTO(attachment=Attachment(url="https://x/a.png", kind=AttachmentKind.IMAGE)),
        uow,
    )
    with_share = await message_service.send_message(
        alice, bob.user_id, SendMessageDTO(shared=SharedRef.post(uuid.uuid4())), uow,
    )

    assert with_file.attachment_kind == AttachmentKind.IMAGE
    assert with_share.shared.kind == "post"


@pytest.mark.asyncio
async def test_send_requires_viewer(bob):
    with pytest.raises(NotAuthenticatedError):
        await message_service.send_message(None, bob.user_id, SendMessageDTO(body="hi"), FakeUoW())


@pytest.mark.asyncio
async def test_send_writes_row_change(alice, bob):
    uow = FakeUoW()

    msg = await message_service.send_message(alice, bob.user_id, SendMessageDTO(body="hi"), uow)

    assert len(uow.store.outbox) == 1
    record = uow.store.outbox[0]
    assert record["event_type"] == ROW_CHANGED
    assert record["payload"]["table"] == "messages"
    assert record["payload"]["type"] == "INSERT"
    assert record["payload"]["record"]["id"] == str(msg.id)
    assert record["payload"]["record"]["receiver_id"] == str(bob.user_id)


@pytest.mark.asyncio
async def test_only_sender_can_delete(alice, bob):
    uow = FakeUoW()
    msg = await message_service.send_message(alice, bob.user_id, SendMessageDTO(body="hi"), uow)

    with pytest.raises(ForbiddenError):
        await message_service.delete_message(bob, msg.id, uow)
    assert len(uow.store.messages) == 1

    await message_service.delete_message(alice, msg.id, uow)
    assert uow.store.messages == []
    assert uow.store.outbox[-1]["payload"]["type"] == "DELETE"
    assert uow.store.outbox[-1]["payload"]["old_record"]["id"] == str(msg.id)


@pytest.mark.asyncio
async def test_delete_missing_message(alice):
    with pytest.raises(NotFoundError):
        await message_service.delete_message(alice, uuid.uuid4(), FakeUoW())
