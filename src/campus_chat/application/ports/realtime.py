from __future__ import annotations

from collections.abc import Awaitable, Callable, Collection, Mapping
from typing import Any, Protocol

from campus_chat.domain.events.row_changed import RowChanged
from campus_chat.domain.value_objects.enums import ChangeType

OnChange = Callable[[RowChanged], Awaitable[None]]


class Subscription(Protocol):
    """Handle returned by ChangeFeed.subscribe. ``close`` is idempotent."""

    @property
    def closed(self) -> bool: ...

    def close(self) -> None: ...


class ChangeFeed(Protocol):
    """At-least-once, possibly out-of-order row change notifications."""

    def subscribe(
        self,
        table: str,
        on_change: OnChange,
        *,
        filters: Mapping[str, Any] | None = None,
        events: Collection[ChangeType] | None = None,
    ) -> Subscription: ...
