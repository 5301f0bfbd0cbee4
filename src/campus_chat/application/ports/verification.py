from __future__ import annotations

from typing import Protocol
from uuid import UUID

from campus_chat.application.dto.verification import VerificationResult


class DocumentVerifier(Protocol):
    async def verify(
        self,
        document_path: str,
        user_id: UUID,
        *,
        user_type: str | None = None,
        provided_email: str | None = None,
    ) -> VerificationResult: ...
