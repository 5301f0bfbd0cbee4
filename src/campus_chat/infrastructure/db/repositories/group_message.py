from __future__ import annotations

from uuid import UUID

from sqlalchemy import delete, select

from campus_chat.domain.entities.message import Message
from campus_chat.infrastructure.db.mappers import message as mapper
from campus_chat.infrastructure.db.models.message import GroupMessageModel
from campus_chat.infrastructure.db.repositories._base import BaseRepo


class GroupMessageReaderRepo(BaseRepo):
    async def get_by_id(self, message_id: UUID) -> Message | None:
        result = await self._execute(
            select(GroupMessageModel).where(GroupMessageModel.id == message_id)
        )
        model = result.scalar_one_or_none()
        return mapper.group_model_to_entity(model) if model else None

    async def list_for_group(self, group_id: UUID) -> list[Message]:
        stmt = (
            select(GroupMessageModel)
            .where(GroupMessageModel.group_id == group_id)
            .order_by(GroupMessageModel.created_at.asc(), GroupMessageModel.id.asc())
        )
        result = await self._execute(stmt)
        return [mapper.group_model_to_entity(m) for m in result.scalars().all()]


class GroupMessageWriterRepo(BaseRepo):
    async def create(self, message: Message) -> Message:
        model = mapper.entity_to_group_model(message)
        self._session.add(model)
        await self._flush()
        return mapper.group_model_to_entity(model)

    async def delete(self, message_id: UUID) -> None:
        await self._execute(delete(GroupMessageModel).where(GroupMessageModel.id == message_id))
