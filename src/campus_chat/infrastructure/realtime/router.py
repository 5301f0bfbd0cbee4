"""In-process change feed: fans row-change events out to local subscriptions."""
from __future__ import annotations

import logging
from collections.abc import Collection, Mapping
from typing import Any

from campus_chat.application.ports.realtime import OnChange
from campus_chat.domain.events.row_changed import RowChanged
from campus_chat.domain.value_objects.enums import ChangeType

logger = logging.getLogger(__name__)


class RouterSubscription:
    def __init__(
        self,
        router: ChangeRouter,
        table: str,
        on_change: OnChange,
        filters: Mapping[str, Any],
        events: frozenset[ChangeType] | None,
    ) -> None:
        self._router = router
        self.table = table
        self.on_change = on_change
        # Values compared as strings; payloads arrive JSON-decoded.
        self.filters = {column: str(value) for column, value in filters.items()}
        self.events = events
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._router._remove(self)

    def matches(self, change: RowChanged) -> bool:
        if change.table != self.table:
            return False
        if self.events is not None and change.type not in self.events:
            return False
        return all(str(change.value(column)) == value for column, value in self.filters.items())


class ChangeRouter:
    """ChangeFeed implementation fed by ``dispatch``.

    Callbacks run sequentially; a failing callback is logged and does not
    stop delivery to the others.
    """

    def __init__(self) -> None:
        self._subscriptions: dict[str, list[RouterSubscription]] = {}

    def subscribe(
        self,
        table: str,
        on_change: OnChange,
        *,
        filters: Mapping[str, Any] | None = None,
        events: Collection[ChangeType] | None = None,
    ) -> RouterSubscription:
        sub = RouterSubscription(
            self, table, on_change, filters or {},
            frozenset(events) if events is not None else None,
        )
        self._subscriptions.setdefault(table, []).append(sub)
        logger.debug("Subscribed to %s %s (events=%s)", table, sub.filters, events)
        return sub

    async def dispatch(self, change: RowChanged) -> int:
        """Deliver to every matching open subscription; returns how many ran."""
        delivered = 0
        for sub in list(self._subscriptions.get(change.table, ())):
            if sub.closed or not sub.matches(change):
                continue
            try:
                await sub.on_change(change)
            except Exception:
                logger.exception("Change callback failed for %s %s", change.table, change.type)
            delivered += 1
        return delivered

    @property
    def subscription_count(self) -> int:
        return sum(len(subs) for subs in self._subscriptions.values())

    def _remove(self, sub: RouterSubscription) -> None:
        subs = self._subscriptions.get(sub.table)
        if not subs:
            return
        try:
            subs.remove(sub)
        except ValueError:
            return
        if not subs:
            del self._subscriptions[sub.table]
