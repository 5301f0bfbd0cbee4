"""Optimistic like/bookmark counters over the session cache."""
from __future__ import annotations

import logging
from uuid import UUID

from campus_chat.application import query_keys
from campus_chat.application.cache import QueryCache, QueryKey
from campus_chat.application.dto.principal import Principal
from campus_chat.application.exceptions import AppError
from campus_chat.application.policies.permissions import require_viewer
from campus_chat.application.uow import UoWFactory
from campus_chat.domain.entities.interaction import InteractionState
from campus_chat.domain.value_objects.enums import EntityKind, InteractionKind
from campus_chat.services import interaction_service

logger = logging.getLogger(__name__)


class InteractionCounter:
    """Like or bookmark state of one post or project, as seen by the viewer.

    ``toggle`` patches the cache before the write, restores the snapshot if
    the write fails and re-fetches afterwards either way.
    """

    def __init__(
        self,
        principal: Principal | None,
        kind: InteractionKind,
        entity: EntityKind,
        entity_id: UUID,
        uow_factory: UoWFactory,
        cache: QueryCache,
    ) -> None:
        self._principal = principal
        self.kind = kind
        self.entity = entity
        self.entity_id = entity_id
        self._uow_factory = uow_factory
        self._cache = cache

    @property
    def key(self) -> QueryKey:
        return query_keys.interaction(self.kind, self.entity, self.entity_id)

    async def state(self, *, force: bool = False) -> InteractionState:
        return await self._cache.fetch(self.key, self._load, force=force)

    async def toggle(self) -> InteractionState:
        viewer = require_viewer(self._principal)

        snapshot: InteractionState | None = self._cache.get(self.key)
        if snapshot is None:
            snapshot = await self.state()
        optimistic = snapshot.toggled()
        self._cache.set(self.key, optimistic)

        try:
            async with self._uow_factory() as uow:
                await interaction_service.set_interaction(
                    viewer, self.kind, self.entity, self.entity_id,
                    optimistic.viewer_has_acted, uow,
                )
        except Exception:
            self._cache.set(self.key, snapshot)
            raise
        finally:
            await self._settle()
        return optimistic

    async def _settle(self) -> None:
        try:
            await self.state(force=True)
        except AppError as exc:
            logger.warning("Could not re-read %r after toggle: %s", self.key, exc.detail)

    async def _load(self) -> InteractionState:
        async with self._uow_factory() as uow:
            return await interaction_service.get_state(
                self._principal, self.kind, self.entity, self.entity_id, uow,
            )
