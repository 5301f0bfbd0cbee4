"""Supabase Storage REST adapter for the ObjectStorage port."""
from __future__ import annotations

import logging
from urllib.parse import quote

import httpx

from campus_chat.application.exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)


class SupabaseStorage:
    """Uploads with the service key and builds public object URLs."""

    def __init__(
        self,
        supabase_url: str,
        service_key: str,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._base_url = supabase_url.rstrip("/")
        self._storage_url = f"{self._base_url}/storage/v1"
        self._headers = {
            "Authorization": f"Bearer {service_key}",
            "apikey": service_key,
        }
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def upload(
        self,
        bucket: str,
        path: str,
        data: bytes,
        *,
        content_type: str | None = None,
    ) -> str:
        url = f"{self._storage_url}/object/{bucket}/{quote(path)}"
        headers = {**self._headers, "Content-Type": content_type or "application/octet-stream"}
        try:
            response = await self._client.post(url, headers=headers, content=data)
        except httpx.HTTPError as exc:
            logger.warning("Storage upload to %s/%s failed: %s", bucket, path, exc)
            raise StoreUnavailableError("Object storage unavailable") from exc

        if response.status_code not in (200, 201):
            logger.warning(
                "Storage upload to %s/%s rejected: %d %s",
                bucket, path, response.status_code, response.text,
            )
            raise StoreUnavailableError(f"Upload failed with status {response.status_code}")
        return path

    def public_url(self, bucket: str, path: str) -> str:
        return f"{self._storage_url}/object/public/{bucket}/{quote(path)}"

    async def aclose(self) -> None:
        await self._client.aclose()
