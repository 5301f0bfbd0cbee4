from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True, slots=True)
class UserProfile:
    id: UUID
    name: str | None
    college: str | None
    profile_photo: str | None
    branch: str | None = None
    verification_status: str | None = None


@dataclass(frozen=True, slots=True)
class PostPreview:
    id: UUID
    caption: str | None
    media_url: str | None
    author: UserProfile | None
    created_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class ProjectPreview:
    id: UUID
    title: str | None
    description: str | None
    zip_file_url: str | None
    author: UserProfile | None
    created_at: datetime | None = None
