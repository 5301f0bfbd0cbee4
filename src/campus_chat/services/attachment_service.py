"""Chat attachment uploads."""
from __future__ import annotations

import logging
import os

from campus_chat.application.dto.message import Attachment
from campus_chat.application.dto.principal import Principal
from campus_chat.application.exceptions import ValidationError
from campus_chat.application.policies.permissions import require_viewer
from campus_chat.application.ports.clock import SYSTEM_CLOCK, Clock, epoch_millis
from campus_chat.application.ports.storage import ObjectStorage
from campus_chat.domain.value_objects.enums import AttachmentKind
from campus_chat.domain.value_objects.scope import MessageScope

logger = logging.getLogger(__name__)

ATTACHMENTS_BUCKET = "chat-attachments"

_ARCHIVE_TYPES = frozenset({
    "application/zip",
    "application/x-zip-compressed",
    "application/x-zip",
})


def classify_attachment(filename: str, content_type: str | None) -> AttachmentKind:
    content_type = (content_type or "").lower()
    if content_type.startswith("image/"):
        return AttachmentKind.IMAGE
    if content_type.startswith("video/"):
        return AttachmentKind.VIDEO
    if content_type in _ARCHIVE_TYPES or filename.lower().endswith(".zip"):
        return AttachmentKind.ARCHIVE
    return AttachmentKind.DOCUMENT


def object_path(owner: object, filename: str, clock: Clock) -> str:
    """``<owner>/<epoch millis>.<ext>``; the extension is dropped when there is none."""
    millis = epoch_millis(clock)
    ext = os.path.splitext(filename)[1].lstrip(".").lower()
    return f"{owner}/{millis}.{ext}" if ext else f"{owner}/{millis}"


async def upload_attachment(
    principal: Principal | None,
    filename: str,
    content_type: str | None,
    data: bytes,
    storage: ObjectStorage,
    *,
    scope: MessageScope | None = None,
    bucket: str = ATTACHMENTS_BUCKET,
    clock: Clock | None = None,
) -> Attachment:
    """Store the file and return its public URL with the classified kind.

    Group attachments are stored under the group id, everything else under
    the uploader.
    """
    viewer = require_viewer(principal)
    if not data:
        raise ValidationError("Attachment is empty")

    owner = scope.target_id if scope is not None and not scope.is_direct else viewer.user_id
    path = object_path(owner, filename, clock or SYSTEM_CLOCK)
    stored = await storage.upload(bucket, path, data, content_type=content_type)
    logger.info("Uploaded attachment %s (%d bytes)", stored, len(data))

    return Attachment(
        url=storage.public_url(bucket, stored),
        kind=classify_attachment(filename, content_type),
    )
