from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, File, Form, UploadFile

from campus_chat.api.deps import OptionalPrincipal, StorageDep, UoWDep, VerifierDep
from campus_chat.api.v1.schemas.attachment import AttachmentResponse, VerificationResponse
from campus_chat.application.policies.permissions import assert_group_member, require_viewer
from campus_chat.config import settings
from campus_chat.domain.value_objects.scope import MessageScope
from campus_chat.services import attachment_service, verification_service

router = APIRouter(prefix="/api/v1", tags=["uploads"])


@router.post("/attachments", response_model=AttachmentResponse, status_code=201)
async def upload_attachment(
    principal: OptionalPrincipal,
    storage: StorageDep,
    uow: UoWDep,
    file: UploadFile = File(...),
    group_id: UUID | None = Form(None),
) -> AttachmentResponse:
    scope = None
    if group_id is not None:
        await assert_group_member(require_viewer(principal), group_id, uow.groups, uow.members)
        scope = MessageScope.group(group_id)

    attachment = await attachment_service.upload_attachment(
        principal,
        file.filename or "file",
        file.content_type,
        await file.read(),
        storage,
        scope=scope,
        bucket=settings.ATTACHMENTS_BUCKET,
    )
    return AttachmentResponse.model_validate(attachment)


@router.post("/verification", response_model=VerificationResponse)
async def submit_verification(
    principal: OptionalPrincipal,
    storage: StorageDep,
    verifier: VerifierDep,
    file: UploadFile = File(...),
    user_type: str | None = Form(None),
    email: str | None = Form(None),
) -> VerificationResponse:
    result = await verification_service.submit_verification(
        principal,
        file.filename or "document",
        file.content_type,
        await file.read(),
        storage,
        verifier,
        user_type=user_type,
        email=email,
        bucket=settings.VERIFICATION_BUCKET,
    )
    return VerificationResponse.model_validate(result)
