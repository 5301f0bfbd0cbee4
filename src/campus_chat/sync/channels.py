"""Live message threads: a cached message list kept fresh by the change feed.

A channel never trusts the change payload as message content. Any relevant
event only invalidates the thread's cache key and triggers a re-fetch.
"""
from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from types import TracebackType
from uuid import UUID

from campus_chat.application import query_keys
from campus_chat.application.cache import QueryCache, QueryKey
from campus_chat.application.dto.message import SendMessageDTO
from campus_chat.application.dto.principal import Principal
from campus_chat.application.policies.permissions import require_viewer
from campus_chat.application.ports.realtime import ChangeFeed, Subscription
from campus_chat.application.row_changes import GROUP_MESSAGES_TABLE, MESSAGES_TABLE
from campus_chat.application.uow import UnitOfWork, UoWFactory
from campus_chat.domain.entities.message import Message
from campus_chat.domain.events.row_changed import RowChanged
from campus_chat.domain.value_objects.enums import ChangeType
from campus_chat.services import group_message_service, message_service

logger = logging.getLogger(__name__)

OnRefresh = Callable[[list[Message]], Awaitable[None]]


class MessageChannel:
    def __init__(
        self,
        principal: Principal | None,
        uow_factory: UoWFactory,
        feed: ChangeFeed,
        cache: QueryCache,
        *,
        on_refresh: OnRefresh | None = None,
    ) -> None:
        self._viewer = require_viewer(principal)
        self._uow_factory = uow_factory
        self._feed = feed
        self._cache = cache
        self._on_refresh = on_refresh
        self._subscription: Subscription | None = None
        self._closed = False

    # Subclass hooks

    @property
    def key(self) -> QueryKey:
        raise NotImplementedError

    def _subscribe(self) -> Subscription:
        raise NotImplementedError

    def _is_relevant(self, change: RowChanged) -> bool:
        return True

    async def _list(self, uow: UnitOfWork) -> list[Message]:
        raise NotImplementedError

    async def _send(self, uow: UnitOfWork, payload: SendMessageDTO) -> Message:
        raise NotImplementedError

    async def _delete(self, uow: UnitOfWork, message_id: UUID) -> Message:
        raise NotImplementedError

    def _written_keys(self) -> list[QueryKey]:
        return [self.key]

    # Lifecycle

    @property
    def closed(self) -> bool:
        return self._closed

    async def open(self) -> list[Message]:
        """Subscribe, then load the thread. Fails closed when the load fails."""
        if self._closed:
            raise RuntimeError("Channel is closed")
        if self._subscription is None:
            self._subscription = self._subscribe()
        try:
            return await self.messages()
        except Exception:
            self.close()
            raise

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None

    async def __aenter__(self) -> MessageChannel:
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # Reads

    async def messages(self, *, force: bool = False) -> list[Message]:
        return await self._cache.fetch(self.key, self._load, force=force)

    async def refresh(self) -> list[Message]:
        self._cache.invalidate(self.key)
        messages = await self.messages()
        if self._on_refresh is not None:
            await self._on_refresh(messages)
        return messages

    async def _load(self) -> list[Message]:
        async with self._uow_factory() as uow:
            return await self._list(uow)

    async def _on_change(self, change: RowChanged) -> None:
        if self._closed or not self._is_relevant(change):
            return
        logger.debug("%s change on %s, refreshing %r", change.type, change.table, self.key)
        await self.refresh()

    # Writes

    async def send(self, payload: SendMessageDTO) -> Message:
        try:
            async with self._uow_factory() as uow:
                message = await self._send(uow, payload)
        finally:
            self._invalidate_written()
        await self.refresh()
        return message

    async def delete(self, message_id: UUID) -> Message:
        try:
            async with self._uow_factory() as uow:
                message = await self._delete(uow, message_id)
        finally:
            self._invalidate_written()
        await self.refresh()
        return message

    def _invalidate_written(self) -> None:
        for key in self._written_keys():
            self._cache.invalidate(key)


class DirectMessageChannel(MessageChannel):
    """1:1 thread between the viewer and ``partner_id``.

    Listens for inserts addressed to the viewer and refreshes only when the
    insert came from the open partner.
    """

    def __init__(
        self,
        principal: Principal | None,
        partner_id: UUID,
        uow_factory: UoWFactory,
        feed: ChangeFeed,
        cache: QueryCache,
        *,
        on_refresh: OnRefresh | None = None,
    ) -> None:
        super().__init__(principal, uow_factory, feed, cache, on_refresh=on_refresh)
        self.partner_id = partner_id

    @property
    def key(self) -> QueryKey:
        return query_keys.chat(self.partner_id)

    def _subscribe(self) -> Subscription:
        return self._feed.subscribe(
            MESSAGES_TABLE,
            self._on_change,
            filters={"receiver_id": self._viewer.user_id},
            events=[ChangeType.INSERT],
        )

    def _is_relevant(self, change: RowChanged) -> bool:
        return str(change.value("sender_id")) == str(self.partner_id)

    async def _list(self, uow: UnitOfWork) -> list[Message]:
        return await message_service.list_messages(self._viewer, self.partner_id, uow)

    async def _send(self, uow: UnitOfWork, payload: SendMessageDTO) -> Message:
        return await message_service.send_message(self._viewer, self.partner_id, payload, uow)

    async def _delete(self, uow: UnitOfWork, message_id: UUID) -> Message:
        return await message_service.delete_message(self._viewer, message_id, uow)

    def _written_keys(self) -> list[QueryKey]:
        return [self.key, query_keys.conversations(self._viewer.user_id)]


class GroupMessageChannel(MessageChannel):
    """Group thread. Every change on the group's rows triggers a refresh."""

    def __init__(
        self,
        principal: Principal | None,
        group_id: UUID,
        uow_factory: UoWFactory,
        feed: ChangeFeed,
        cache: QueryCache,
        *,
        on_refresh: OnRefresh | None = None,
    ) -> None:
        super().__init__(principal, uow_factory, feed, cache, on_refresh=on_refresh)
        self.group_id = group_id

    @property
    def key(self) -> QueryKey:
        return query_keys.group_chat(self.group_id)

    def _subscribe(self) -> Subscription:
        return self._feed.subscribe(
            GROUP_MESSAGES_TABLE,
            self._on_change,
            filters={"group_id": self.group_id},
        )

    async def _list(self, uow: UnitOfWork) -> list[Message]:
        return await group_message_service.list_group_messages(self._viewer, self.group_id, uow)

    async def _send(self, uow: UnitOfWork, payload: SendMessageDTO) -> Message:
        return await group_message_service.send_group_message(
            self._viewer, self.group_id, payload, uow,
        )

    async def _delete(self, uow: UnitOfWork, message_id: UUID) -> Message:
        return await group_message_service.delete_group_message(self._viewer, message_id, uow)
