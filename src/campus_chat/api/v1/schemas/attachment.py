from __future__ import annotations

from pydantic import BaseModel

from campus_chat.domain.value_objects.enums import AttachmentKind, VerificationStatus


class AttachmentResponse(BaseModel):
    url: str
    kind: AttachmentKind

    model_config = {"from_attributes": True}


class VerificationResponse(BaseModel):
    status: VerificationStatus
    match_score: float

    model_config = {"from_attributes": True}
