from __future__ import annotations

import logging
from uuid import UUID

import httpx

from campus_chat.application.dto.verification import VerificationResult
from campus_chat.application.exceptions import StoreUnavailableError
from campus_chat.domain.value_objects.enums import VerificationStatus

logger = logging.getLogger(__name__)


class HttpDocumentVerifier:
    """Calls the document verification function over HTTP."""

    def __init__(
        self,
        function_url: str,
        service_key: str,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = 60.0,
    ) -> None:
        self._function_url = function_url
        self._headers = {
            "Authorization": f"Bearer {service_key}",
            "apikey": service_key,
        }
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def verify(
        self,
        document_path: str,
        user_id: UUID,
        *,
        user_type: str | None = None,
        provided_email: str | None = None,
    ) -> VerificationResult:
        body = {
            "document_path": document_path,
            "user_id": str(user_id),
            "user_type": user_type,
            "provided_email": provided_email,
        }
        try:
            response = await self._client.post(self._function_url, headers=self._headers, json=body)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Verification call for user %s failed: %s", user_id, exc)
            raise StoreUnavailableError("Verification service unavailable") from exc

        try:
            status = VerificationStatus(data.get("status"))
        except ValueError:
            status = VerificationStatus.PENDING
        return VerificationResult(status=status, match_score=float(data.get("match_score") or 0))

    async def aclose(self) -> None:
        await self._client.aclose()
