"""Tagged reference to a post, project or profile forwarded into a chat.

Persisted as three nullable columns (shared_post_id, shared_project_id,
shared_user_id); at most one of them may be set.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from uuid import UUID

from campus_chat.domain.value_objects.enums import SharedKind

logger = logging.getLogger(__name__)

_COLUMN_BY_KIND: dict[SharedKind, str] = {
    SharedKind.POST: "shared_post_id",
    SharedKind.PROJECT: "shared_project_id",
    SharedKind.USER: "shared_user_id",
}


@dataclass(frozen=True, slots=True)
class SharedRef:
    kind: SharedKind = SharedKind.NONE
    id: UUID | None = None

    def __post_init__(self) -> None:
        if (self.kind == SharedKind.NONE) != (self.id is None):
            raise ValueError("SharedRef kind and id must be set together")

    @classmethod
    def none(cls) -> SharedRef:
        return cls()

    @classmethod
    def post(cls, post_id: UUID) -> SharedRef:
        return cls(SharedKind.POST, post_id)

    @classmethod
    def project(cls, project_id: UUID) -> SharedRef:
        return cls(SharedKind.PROJECT, project_id)

    @classmethod
    def user(cls, user_id: UUID) -> SharedRef:
        return cls(SharedKind.USER, user_id)

    @property
    def is_empty(self) -> bool:
        return self.kind == SharedKind.NONE

    @classmethod
    def from_columns(
        cls,
        shared_post_id: UUID | None,
        shared_project_id: UUID | None,
        shared_user_id: UUID | None,
        *,
        strict: bool = True,
    ) -> SharedRef:
        """Build a reference from the stored columns.

        With ``strict`` more than one populated column raises ValueError.
        Otherwise the first of post, project, user wins.
        """
        populated = [
            (kind, value)
            for kind, value in (
                (SharedKind.POST, shared_post_id),
                (SharedKind.PROJECT, shared_project_id),
                (SharedKind.USER, shared_user_id),
            )
            if value is not None
        ]
        if not populated:
            return cls()
        if len(populated) > 1:
            if strict:
                raise ValueError("At most one shared reference may be set")
            logger.warning(
                "Message carries %d shared references, using %s",
                len(populated), populated[0][0],
            )
        kind, value = populated[0]
        return cls(kind, value)

    def to_columns(self) -> dict[str, UUID | None]:
        columns: dict[str, UUID | None] = {name: None for name in _COLUMN_BY_KIND.values()}
        if not self.is_empty:
            columns[_COLUMN_BY_KIND[self.kind]] = self.id
        return columns
