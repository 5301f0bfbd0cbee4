from __future__ import annotations

from typing import Protocol
from uuid import UUID

from campus_chat.domain.entities.message import Message


class MessageReader(Protocol):
    async def get_by_id(self, message_id: UUID) -> Message | None: ...

    async def list_for_user(self, user_id: UUID) -> list[Message]:
        """All direct messages sent or received by the user, newest first."""
        ...

    async def list_between(self, user_id: UUID, partner_id: UUID) -> list[Message]:
        """Messages of the unordered pair, oldest first."""
        ...


class MessageWriter(Protocol):
    async def create(self, message: Message) -> Message: ...

    async def delete(self, message_id: UUID) -> None: ...
