from __future__ import annotations

from typing import Protocol
from uuid import UUID


class FollowReader(Protocol):
    async def is_following(self, follower_id: UUID, following_id: UUID) -> bool: ...

    async def list_following(self, user_id: UUID) -> list[UUID]: ...

    async def list_followers(self, user_id: UUID) -> list[UUID]: ...


class FollowWriter(Protocol):
    async def add(self, follower_id: UUID, following_id: UUID) -> None: ...

    async def remove(self, follower_id: UUID, following_id: UUID) -> None: ...
