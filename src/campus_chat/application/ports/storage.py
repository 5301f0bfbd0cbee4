from __future__ import annotations

from typing import Protocol


class ObjectStorage(Protocol):
    async def upload(
        self,
        bucket: str,
        path: str,
        data: bytes,
        *,
        content_type: str | None = None,
    ) -> str:
        """Store bytes and return the stored path."""
        ...

    def public_url(self, bucket: str, path: str) -> str: ...
