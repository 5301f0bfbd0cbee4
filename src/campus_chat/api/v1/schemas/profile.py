from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel


class ProfileResponse(BaseModel):
    id: UUID
    name: str | None
    college: str | None
    profile_photo: str | None
    branch: str | None = None
    verification_status: str | None = None

    model_config = {"from_attributes": True}
