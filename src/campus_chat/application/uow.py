from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Protocol

from campus_chat.application.repositories.follow import FollowReader, FollowWriter
from campus_chat.application.repositories.group import (
    GroupReader,
    GroupWriter,
    MemberReader,
    MemberWriter,
)
from campus_chat.application.repositories.group_message import (
    GroupMessageReader,
    GroupMessageWriter,
)
from campus_chat.application.repositories.interaction import (
    InteractionReader,
    InteractionWriter,
)
from campus_chat.application.repositories.message import MessageReader, MessageWriter
from campus_chat.application.repositories.outbox import OutboxWriter
from campus_chat.application.repositories.profile import ProfileReader


class UnitOfWork(Protocol):
    messages: MessageReader
    messages_w: MessageWriter
    group_messages: GroupMessageReader
    group_messages_w: GroupMessageWriter
    groups: GroupReader
    groups_w: GroupWriter
    members: MemberReader
    members_w: MemberWriter
    interactions: InteractionReader
    interactions_w: InteractionWriter
    profiles: ProfileReader
    follows: FollowReader
    follows_w: FollowWriter
    outbox: OutboxWriter

    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...
    async def flush(self) -> None: ...


# Opens a fresh unit of work per query; used by long-lived sessions.
UoWFactory = Callable[[], AbstractAsyncContextManager[UnitOfWork]]
