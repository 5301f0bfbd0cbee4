"""Lazy previews for posts, projects and profiles forwarded into chat."""
from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable
from uuid import UUID

from campus_chat.application import query_keys
from campus_chat.application.cache import QueryCache
from campus_chat.application.repositories.profile import ProfileReader
from campus_chat.domain.entities.message import Message
from campus_chat.domain.entities.shared import SharedPreview, Unavailable
from campus_chat.domain.value_objects.enums import SharedKind
from campus_chat.domain.value_objects.shared_ref import SharedRef

logger = logging.getLogger(__name__)


class SharedEntityResolver:
    """Resolves a message's shared reference, fetching each entity once per cache.

    A reference whose target no longer exists resolves to ``Unavailable``
    instead of raising. Store failures still propagate.
    """

    def __init__(self, profiles: ProfileReader, cache: QueryCache | None = None) -> None:
        self._profiles = profiles
        self._cache = cache if cache is not None else QueryCache()
        self._loaders: dict[SharedKind, Callable[[UUID], Awaitable[object | None]]] = {
            SharedKind.POST: profiles.get_post,
            SharedKind.PROJECT: profiles.get_project,
            SharedKind.USER: profiles.get_user,
        }

    async def resolve(self, message: Message) -> SharedPreview | None:
        return await self.resolve_ref(message.shared)

    async def resolve_ref(self, ref: SharedRef) -> SharedPreview | None:
        if ref.is_empty:
            return None
        assert ref.id is not None
        key = query_keys.shared_entity(ref.kind, ref.id)
        return await self._cache.fetch(key, lambda: self._load(ref.kind, ref.id))

    async def resolve_many(self, messages: Iterable[Message]) -> dict[UUID, SharedPreview]:
        """Map message id to preview for every message that carries a reference."""
        previews: dict[UUID, SharedPreview] = {}
        for message in messages:
            preview = await self.resolve(message)
            if preview is not None:
                previews[message.id] = preview
        return previews

    def forget(self, ref: SharedRef | None = None) -> None:
        """Drop cached previews so the next render re-reads them."""
        if ref is None or ref.is_empty:
            self._cache.invalidate(("shared",))
        else:
            assert ref.id is not None
            self._cache.invalidate(query_keys.shared_entity(ref.kind, ref.id))

    async def _load(self, kind: SharedKind, entity_id: UUID) -> SharedPreview:
        entity = await self._loaders[kind](entity_id)
        if entity is None:
            logger.debug("Shared %s %s no longer exists", kind, entity_id)
            return Unavailable(kind=kind, id=entity_id)
        return entity  # type: ignore[return-value]
