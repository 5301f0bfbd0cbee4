"""Client-side query cache shared by the views of one chat session."""
from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Hashable
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

QueryKey = tuple[Hashable, ...]
T = TypeVar("T")


class QueryCache:
    """Keyed result cache with prefix invalidation and in-place patching.

    Every key carries a version that is bumped on ``set``, ``patch`` and
    ``invalidate``; a fetch started before one of those does not overwrite
    the newer state when it completes.
    """

    def __init__(self) -> None:
        self._entries: dict[QueryKey, Any] = {}
        self._versions: dict[QueryKey, int] = {}

    def __contains__(self, key: QueryKey) -> bool:
        return key in self._entries

    def get(self, key: QueryKey, default: Any = None) -> Any:
        return self._entries.get(key, default)

    def set(self, key: QueryKey, value: Any) -> None:
        self._entries[key] = value
        self._bump(key)

    def patch(self, key: QueryKey, updater: Callable[[Any], Any]) -> Any:
        """Replace the entry with ``updater(current)``; current is None when absent."""
        value = updater(self._entries.get(key))
        self.set(key, value)
        return value

    def invalidate(self, prefix: QueryKey) -> int:
        """Drop every entry whose key starts with ``prefix``."""
        n = len(prefix)
        stale = [key for key in self._entries if key[:n] == prefix]
        for key in stale:
            del self._entries[key]
        for key in {*stale, *(key for key in self._versions if key[:n] == prefix)}:
            self._bump(key)
        if stale:
            logger.debug("Invalidated %d cache entries for %r", len(stale), prefix)
        return len(stale)

    async def fetch(
        self,
        key: QueryKey,
        loader: Callable[[], Awaitable[T]],
        *,
        force: bool = False,
    ) -> T:
        """Return the cached value or load it. Failed loads are never cached."""
        if not force and key in self._entries:
            return self._entries[key]
        version = self._versions.setdefault(key, 0)
        value = await loader()
        if self._versions.get(key, 0) == version:
            self._entries[key] = value
        return value

    def clear(self) -> None:
        self._entries.clear()
        self._versions.clear()

    def _bump(self, key: QueryKey) -> None:
        self._versions[key] = self._versions.get(key, 0) + 1
