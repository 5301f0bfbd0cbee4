from __future__ import annotations

from typing import Protocol
from uuid import UUID

from campus_chat.domain.entities.profile import PostPreview, ProjectPreview, UserProfile


class ProfileReader(Protocol):
    async def get_user(self, user_id: UUID) -> UserProfile | None: ...

    async def get_users(self, user_ids: list[UUID]) -> dict[UUID, UserProfile]: ...

    async def get_post(self, post_id: UUID) -> PostPreview | None: ...

    async def get_project(self, project_id: UUID) -> ProjectPreview | None: ...
