from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from campus_chat.domain.entities.profile import PostPreview, ProjectPreview, UserProfile
from campus_chat.domain.value_objects.enums import SharedKind

_UNAVAILABLE_LABELS: dict[SharedKind, str] = {
    SharedKind.POST: "Post unavailable",
    SharedKind.PROJECT: "Project unavailable",
    SharedKind.USER: "User unavailable",
}


@dataclass(frozen=True, slots=True)
class Unavailable:
    """Placeholder for shared content that no longer exists."""

    kind: SharedKind
    id: UUID

    @property
    def label(self) -> str:
        return _UNAVAILABLE_LABELS.get(self.kind, "Content unavailable")


SharedPreview = PostPreview | ProjectPreview | UserProfile | Unavailable
