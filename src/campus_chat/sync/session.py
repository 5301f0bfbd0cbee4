from __future__ import annotations

import logging
from types import TracebackType
from uuid import UUID

from campus_chat.application import query_keys
from campus_chat.application.cache import QueryCache
from campus_chat.application.dto.principal import Principal
from campus_chat.application.policies.permissions import require_viewer
from campus_chat.application.ports.realtime import ChangeFeed, Subscription
from campus_chat.application.row_changes import MESSAGES_TABLE
from campus_chat.application.uow import UoWFactory
from campus_chat.domain.entities.conversation import ConversationSummary
from campus_chat.domain.entities.message import Message
from campus_chat.domain.entities.shared import SharedPreview
from campus_chat.domain.events.row_changed import RowChanged
from campus_chat.domain.value_objects.enums import ChangeType, EntityKind, InteractionKind
from campus_chat.services import conversation_service, interaction_service
from campus_chat.services.shared_entity_resolver import SharedEntityResolver
from campus_chat.sync.channels import (
    DirectMessageChannel,
    GroupMessageChannel,
    MessageChannel,
    OnRefresh,
)
from campus_chat.sync.counters import InteractionCounter

logger = logging.getLogger(__name__)


class ChatSession:
    """Everything one viewer has open: cache, threads, counters, inbox.

    Owns every subscription it creates and closes each of them exactly once
    in ``close``.
    """

    def __init__(
        self,
        principal: Principal | None,
        uow_factory: UoWFactory,
        feed: ChangeFeed,
        *,
        cache: QueryCache | None = None,
    ) -> None:
        self.viewer = require_viewer(principal)
        self.cache = cache if cache is not None else QueryCache()
        self._uow_factory = uow_factory
        self._feed = feed
        self._direct: dict[UUID, DirectMessageChannel] = {}
        self._groups: dict[UUID, GroupMessageChannel] = {}
        self._counters: dict[tuple[InteractionKind, EntityKind, UUID], InteractionCounter] = {}
        self._inbox: Subscription | None = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def conversations(self, *, force: bool = False) -> list[ConversationSummary]:
        if self._inbox is None and not self._closed:
            self._inbox = self._feed.subscribe(
                MESSAGES_TABLE,
                self._on_inbox_change,
                filters={"receiver_id": self.viewer.user_id},
                events=[ChangeType.INSERT],
            )
        return await self.cache.fetch(
            query_keys.conversations(self.viewer.user_id), self._load_conversations, force=force,
        )

    async def direct(
        self, partner_id: UUID, *, on_refresh: OnRefresh | None = None,
    ) -> DirectMessageChannel:
        """Open (or return the already open) thread with ``partner_id``."""
        self._ensure_open()
        channel = self._direct.get(partner_id)
        if channel is None:
            channel = DirectMessageChannel(
                self.viewer, partner_id, self._uow_factory, self._feed, self.cache,
                on_refresh=on_refresh,
            )
            await channel.open()
            self._direct[partner_id] = channel
        return channel

    async def group(
        self, group_id: UUID, *, on_refresh: OnRefresh | None = None,
    ) -> GroupMessageChannel:
        self._ensure_open()
        channel = self._groups.get(group_id)
        if channel is None:
            channel = GroupMessageChannel(
                self.viewer, group_id, self._uow_factory, self._feed, self.cache,
                on_refresh=on_refresh,
            )
            await channel.open()
            self._groups[group_id] = channel
        return channel

    def leave_direct(self, partner_id: UUID) -> None:
        channel = self._direct.pop(partner_id, None)
        if channel is not None:
            channel.close()

    def leave_group(self, group_id: UUID) -> None:
        channel = self._groups.pop(group_id, None)
        if channel is not None:
            channel.close()

    def counter(
        self, kind: InteractionKind, entity: EntityKind, entity_id: UUID,
    ) -> InteractionCounter:
        key = (kind, entity, entity_id)
        if key not in self._counters:
            self._counters[key] = InteractionCounter(
                self.viewer, kind, entity, entity_id, self._uow_factory, self.cache,
            )
        return self._counters[key]

    async def comments_count(self, entity: EntityKind, entity_id: UUID) -> int:
        async def load() -> int:
            async with self._uow_factory() as uow:
                return await interaction_service.count_comments(entity, entity_id, uow)

        return await self.cache.fetch(query_keys.comments_count(entity, entity_id), load)

    async def shared_previews(self, messages: list[Message]) -> dict[UUID, SharedPreview]:
        async with self._uow_factory() as uow:
            resolver = SharedEntityResolver(uow.profiles, self.cache)
            return await resolver.resolve_many(messages)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        channels: list[MessageChannel] = [*self._direct.values(), *self._groups.values()]
        for channel in channels:
            channel.close()
        self._direct.clear()
        self._groups.clear()
        if self._inbox is not None:
            self._inbox.close()
            self._inbox = None
        self._counters.clear()
        logger.debug("Closed chat session for %s (%d channels)", self.viewer.user_id, len(channels))

    async def __aenter__(self) -> ChatSession:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("Chat session is closed")

    async def _on_inbox_change(self, change: RowChanged) -> None:
        self.cache.invalidate(query_keys.conversations(self.viewer.user_id))

    async def _load_conversations(self) -> list[ConversationSummary]:
        async with self._uow_factory() as uow:
            return await conversation_service.list_conversations(self.viewer, uow)
