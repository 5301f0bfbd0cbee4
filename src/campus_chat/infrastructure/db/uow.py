from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from types import TracebackType
from typing import Self

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from campus_chat.application.exceptions import StoreUnavailableError
from campus_chat.infrastructure.db.repositories.follow import FollowReaderRepo, FollowWriterRepo
from campus_chat.infrastructure.db.repositories.group import (
    GroupReaderRepo,
    GroupWriterRepo,
    MemberReaderRepo,
    MemberWriterRepo,
)
from campus_chat.infrastructure.db.repositories.group_message import (
    GroupMessageReaderRepo,
    GroupMessageWriterRepo,
)
from campus_chat.infrastructure.db.repositories.interaction import (
    InteractionReaderRepo,
    InteractionWriterRepo,
)
from campus_chat.infrastructure.db.repositories.message import (
    MessageReaderRepo,
    MessageWriterRepo,
)
from campus_chat.infrastructure.db.repositories.outbox import OutboxWriterRepo
from campus_chat.infrastructure.db.repositories.profile import ProfileReaderRepo
from campus_chat.infrastructure.db.session import AsyncSessionLocal


class SqlAlchemyUoW:
    """Concrete Unit-of-Work backed by a single AsyncSession."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self.messages = MessageReaderRepo(session)
        self.messages_w = MessageWriterRepo(session)
        self.group_messages = GroupMessageReaderRepo(session)
        self.group_messages_w = GroupMessageWriterRepo(session)
        self.groups = GroupReaderRepo(session)
        self.groups_w = GroupWriterRepo(session)
        self.members = MemberReaderRepo(session)
        self.members_w = MemberWriterRepo(session)
        self.interactions = InteractionReaderRepo(session)
        self.interactions_w = InteractionWriterRepo(session)
        self.profiles = ProfileReaderRepo(session)
        self.follows = FollowReaderRepo(session)
        self.follows_w = FollowWriterRepo(session)
        self.outbox = OutboxWriterRepo(session)

    async def flush(self) -> None:
        await self._session.flush()

    async def commit(self) -> None:
        try:
            await self._session.commit()
        except (SQLAlchemyError, OSError) as exc:
            raise StoreUnavailableError("Store unavailable") from exc

    async def rollback(self) -> None:
        await self._session.rollback()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if exc_type is not None:
            await self.rollback()


@asynccontextmanager
async def session_uow() -> AsyncIterator[SqlAlchemyUoW]:
    """Fresh session and unit of work; used where no request scope exists."""
    async with AsyncSessionLocal() as session:
        async with SqlAlchemyUoW(session) as uow:
            yield uow
