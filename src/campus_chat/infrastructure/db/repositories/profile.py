from __future__ import annotations

from uuid import UUID

from sqlalchemy import select

from campus_chat.domain.entities.profile import PostPreview, ProjectPreview, UserProfile
from campus_chat.infrastructure.db.mappers import profile as mapper
from campus_chat.infrastructure.db.models.profile import PostModel, ProjectModel, UserModel
from campus_chat.infrastructure.db.repositories._base import BaseRepo


class ProfileReaderRepo(BaseRepo):
    async def get_user(self, user_id: UUID) -> UserProfile | None:
        result = await self._execute(select(UserModel).where(UserModel.id == user_id))
        model = result.scalar_one_or_none()
        return mapper.user_to_entity(model) if model else None

    async def get_users(self, user_ids: list[UUID]) -> dict[UUID, UserProfile]:
        if not user_ids:
            return {}
        result = await self._execute(select(UserModel).where(UserModel.id.in_(user_ids)))
        return {m.id: mapper.user_to_entity(m) for m in result.scalars().all()}

    async def get_post(self, post_id: UUID) -> PostPreview | None:
        result = await self._execute(select(PostModel).where(PostModel.id == post_id))
        model = result.unique().scalar_one_or_none()
        return mapper.post_to_entity(model) if model else None

    async def get_project(self, project_id: UUID) -> ProjectPreview | None:
        result = await self._execute(select(ProjectModel).where(ProjectModel.id == project_id))
        model = result.unique().scalar_one_or_none()
        return mapper.project_to_entity(model) if model else None
