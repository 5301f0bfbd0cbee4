from __future__ import annotations

import logging

from campus_chat.application.dto.principal import Principal
from campus_chat.application.dto.verification import VerificationResult
from campus_chat.application.exceptions import ValidationError
from campus_chat.application.policies.permissions import require_viewer
from campus_chat.application.ports.clock import SYSTEM_CLOCK, Clock
from campus_chat.application.ports.storage import ObjectStorage
from campus_chat.application.ports.verification import DocumentVerifier
from campus_chat.services.attachment_service import object_path

logger = logging.getLogger(__name__)

VERIFICATION_BUCKET = "verification-documents"


async def submit_verification(
    principal: Principal | None,
    filename: str,
    content_type: str | None,
    data: bytes,
    storage: ObjectStorage,
    verifier: DocumentVerifier,
    *,
    user_type: str | None = None,
    email: str | None = None,
    bucket: str = VERIFICATION_BUCKET,
    clock: Clock | None = None,
) -> VerificationResult:
    viewer = require_viewer(principal)
    if not data:
        raise ValidationError("Document is empty")

    path = object_path(viewer.user_id, filename, clock or SYSTEM_CLOCK)
    stored = await storage.upload(bucket, path, data, content_type=content_type)

    result = await verifier.verify(
        stored, viewer.user_id, user_type=user_type, provided_email=email or viewer.email,
    )
    logger.info(
        "Verification for user %s: %s (score %.2f)",
        viewer.user_id, result.status, result.match_score,
    )
    return result
