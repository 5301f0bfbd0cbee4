from __future__ import annotations

from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert

from campus_chat.application.repositories.interaction import EntityTarget
from campus_chat.domain.value_objects.enums import InteractionKind
from campus_chat.infrastructure.db.models.interaction import (
    BookmarkModel,
    CommentModel,
    LikeModel,
)
from campus_chat.infrastructure.db.repositories._base import BaseRepo

_MODELS: dict[InteractionKind, type[LikeModel] | type[BookmarkModel]] = {
    InteractionKind.LIKE: LikeModel,
    InteractionKind.BOOKMARK: BookmarkModel,
}


class InteractionReaderRepo(BaseRepo):
    async def count(self, kind: InteractionKind, target: EntityTarget) -> int:
        model = _MODELS[kind]
        stmt = (
            select(func.count())
            .select_from(model)
            .where(getattr(model, target.column) == target.entity_id)
        )
        result = await self._execute(stmt)
        return int(result.scalar_one())

    async def has_acted(self, kind: InteractionKind, target: EntityTarget, user_id: UUID) -> bool:
        model = _MODELS[kind]
        stmt = (
            select(model.id)
            .where(getattr(model, target.column) == target.entity_id, model.user_id == user_id)
            .limit(1)
        )
        result = await self._execute(stmt)
        return result.scalar_one_or_none() is not None

    async def count_comments(self, target: EntityTarget) -> int:
        stmt = (
            select(func.count())
            .select_from(CommentModel)
            .where(getattr(CommentModel, target.column) == target.entity_id)
        )
        result = await self._execute(stmt)
        return int(result.scalar_one())


class InteractionWriterRepo(BaseRepo):
    async def add(self, kind: InteractionKind, target: EntityTarget, user_id: UUID) -> None:
        model = _MODELS[kind]
        stmt = (
            pg_insert(model)
            .values(**{target.column: target.entity_id, "user_id": user_id})
            .on_conflict_do_nothing(index_elements=[target.column, "user_id"])
        )
        await self._execute(stmt)

    async def remove(self, kind: InteractionKind, target: EntityTarget, user_id: UUID) -> None:
        model = _MODELS[kind]
        stmt = delete(model).where(
            getattr(model, target.column) == target.entity_id,
            model.user_id == user_id,
        )
        await self._execute(stmt)
