from __future__ import annotations

from enum import StrEnum


class ScopeKind(StrEnum):
    DIRECT = "direct"
    GROUP = "group"


class AttachmentKind(StrEnum):
    IMAGE = "image"
    VIDEO = "video"
    DOCUMENT = "document"
    ARCHIVE = "archive"
    STICKER = "sticker"

    @classmethod
    def _missing_(cls, value: object) -> AttachmentKind | None:
        # Older clients stored archives as "zip"
        if value == "zip":
            return cls.ARCHIVE
        return None


class SharedKind(StrEnum):
    NONE = "none"
    POST = "post"
    PROJECT = "project"
    USER = "user"


class EntityKind(StrEnum):
    POST = "post"
    PROJECT = "project"


class InteractionKind(StrEnum):
    LIKE = "like"
    BOOKMARK = "bookmark"


class GroupVisibility(StrEnum):
    MY_COLLEGE = "my-college"
    OTHER_COLLEGES = "other-colleges"


class MemberRole(StrEnum):
    ADMIN = "admin"
    MEMBER = "member"


class ChangeType(StrEnum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class VerificationStatus(StrEnum):
    VERIFIED = "verified"
    LIMITED_ACCESS = "limited_access"
    PENDING = "pending"
