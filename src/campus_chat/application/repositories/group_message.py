from __future__ import annotations

from typing import Protocol
from uuid import UUID

from campus_chat.domain.entities.message import Message


class GroupMessageReader(Protocol):
    async def get_by_id(self, message_id: UUID) -> Message | None: ...

    async def list_for_group(self, group_id: UUID) -> list[Message]:
        """Oldest first."""
        ...


class GroupMessageWriter(Protocol):
    async def create(self, message: Message) -> Message: ...

    async def delete(self, message_id: UUID) -> None: ...
