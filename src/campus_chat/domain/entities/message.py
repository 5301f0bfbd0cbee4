from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from campus_chat.domain.value_objects.enums import AttachmentKind
from campus_chat.domain.value_objects.scope import MessageScope
from campus_chat.domain.value_objects.shared_ref import SharedRef


@dataclass(frozen=True, slots=True)
class Message:
    """A chat message, direct or group, normalized to one shape."""

    id: UUID
    scope: MessageScope
    sender_id: UUID
    body: str | None
    attachment_url: str | None
    attachment_kind: AttachmentKind | None
    created_at: datetime
    shared: SharedRef = field(default_factory=SharedRef.none)

    def partner_of(self, viewer_id: UUID) -> UUID:
        """Return the other endpoint of a direct message."""
        if not self.scope.is_direct:
            raise ValueError("Group messages have no single partner")
        if self.sender_id == viewer_id:
            return self.scope.target_id
        return self.sender_id

    def involves(self, user_id: UUID) -> bool:
        return self.sender_id == user_id or (
            self.scope.is_direct and self.scope.target_id == user_id
        )
