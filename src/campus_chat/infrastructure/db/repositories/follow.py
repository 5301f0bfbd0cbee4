from __future__ import annotations

from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert

from campus_chat.infrastructure.db.models.follow import FollowModel
from campus_chat.infrastructure.db.repositories._base import BaseRepo


class FollowReaderRepo(BaseRepo):
    async def is_following(self, follower_id: UUID, following_id: UUID) -> bool:
        stmt = select(FollowModel.follower_id).where(
            FollowModel.follower_id == follower_id,
            FollowModel.following_id == following_id,
        )
        result = await self._execute(stmt)
        return result.scalar_one_or_none() is not None

    async def list_following(self, user_id: UUID) -> list[UUID]:
        stmt = (
            select(FollowModel.following_id)
            .where(FollowModel.follower_id == user_id)
            .order_by(FollowModel.created_at.desc())
        )
        result = await self._execute(stmt)
        return list(result.scalars().all())

    async def list_followers(self, user_id: UUID) -> list[UUID]:
        stmt = (
            select(FollowModel.follower_id)
            .where(FollowModel.following_id == user_id)
            .order_by(FollowModel.created_at.desc())
        )
        result = await self._execute(stmt)
        return list(result.scalars().all())


class FollowWriterRepo(BaseRepo):
    async def add(self, follower_id: UUID, following_id: UUID) -> None:
        stmt = (
            pg_insert(FollowModel)
            .values(follower_id=follower_id, following_id=following_id)
            .on_conflict_do_nothing(index_elements=["follower_id", "following_id"])
        )
        await self._execute(stmt)

    async def remove(self, follower_id: UUID, following_id: UUID) -> None:
        stmt = delete(FollowModel).where(
            FollowModel.follower_id == follower_id,
            FollowModel.following_id == following_id,
        )
        await self._execute(stmt)
