from __future__ import annotations

from uuid import UUID

from sqlalchemy import and_, delete, or_, select

from campus_chat.domain.entities.message import Message
from campus_chat.infrastructure.db.mappers import message as mapper
from campus_chat.infrastructure.db.models.message import MessageModel
from campus_chat.infrastructure.db.repositories._base import BaseRepo


class MessageReaderRepo(BaseRepo):
    async def get_by_id(self, message_id: UUID) -> Message | None:
        result = await self._execute(select(MessageModel).where(MessageModel.id == message_id))
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None

    async def list_for_user(self, user_id: UUID) -> list[Message]:
        """Every message the user sent or received, newest first."""
        stmt = (
            select(MessageModel)
            .where(or_(MessageModel.sender_id == user_id, MessageModel.receiver_id == user_id))
            .order_by(MessageModel.created_at.desc(), MessageModel.id.desc())
        )
        result = await self._execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]

    async def list_between(self, user_id: UUID, partner_id: UUID) -> list[Message]:
        """Thread of the unordered pair, oldest first."""
        stmt = (
            select(MessageModel)
            .where(
                or_(
                    and_(MessageModel.sender_id == user_id, MessageModel.receiver_id == partner_id),
                    and_(MessageModel.sender_id == partner_id, MessageModel.receiver_id == user_id),
                )
            )
            .order_by(MessageModel.created_at.asc(), MessageModel.id.asc())
        )
        result = await self._execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]


class MessageWriterRepo(BaseRepo):
    async def create(self, message: Message) -> Message:
        model = mapper.entity_to_model(message)
        self._session.add(model)
        await self._flush()
        return mapper.model_to_entity(model)

    async def delete(self, message_id: UUID) -> None:
        await self._execute(delete(MessageModel).where(MessageModel.id == message_id))
