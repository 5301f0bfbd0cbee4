"""Row-change events written to the outbox after each store mutation."""
from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from campus_chat.application.uow import UnitOfWork
from campus_chat.domain.entities.message import Message
from campus_chat.domain.events.row_changed import RowChanged
from campus_chat.domain.value_objects.enums import ChangeType

ROW_CHANGED = "db.row_changed"

MESSAGES_TABLE = "messages"
GROUP_MESSAGES_TABLE = "group_messages"
GROUP_MEMBERS_TABLE = "group_members"


def _jsonable(value: Any) -> Any:
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def message_record(message: Message) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": message.id,
        "sender_id": message.sender_id,
        "created_at": message.created_at,
        **message.shared.to_columns(),
    }
    if message.scope.is_direct:
        record["receiver_id"] = message.scope.target_id
    else:
        record["group_id"] = message.scope.target_id
    return {key: _jsonable(value) for key, value in record.items()}


def message_table(message: Message) -> str:
    return MESSAGES_TABLE if message.scope.is_direct else GROUP_MESSAGES_TABLE


def to_payload(change: RowChanged) -> dict[str, Any]:
    return {
        "table": change.table,
        "type": change.type.value,
        "record": {k: _jsonable(v) for k, v in change.record.items()},
        "old_record": {k: _jsonable(v) for k, v in change.old_record.items()},
    }


def from_payload(payload: dict[str, Any]) -> RowChanged:
    return RowChanged(
        table=payload["table"],
        type=ChangeType(payload["type"]),
        record=payload.get("record") or {},
        old_record=payload.get("old_record") or {},
    )


async def record_message_change(
    uow: UnitOfWork, message: Message, change_type: ChangeType,
) -> None:
    record = message_record(message)
    if change_type == ChangeType.DELETE:
        change = RowChanged(message_table(message), change_type, old_record=record)
    else:
        change = RowChanged(message_table(message), change_type, record=record)
    await uow.outbox.add(ROW_CHANGED, to_payload(change))


async def record_membership_change(
    uow: UnitOfWork, group_id: UUID, user_id: UUID, change_type: ChangeType,
) -> None:
    record = {"group_id": str(group_id), "user_id": str(user_id)}
    if change_type == ChangeType.DELETE:
        change = RowChanged(GROUP_MEMBERS_TABLE, change_type, old_record=record)
    else:
        change = RowChanged(GROUP_MEMBERS_TABLE, change_type, record=record)
    await uow.outbox.add(ROW_CHANGED, to_payload(change))
