from __future__ import annotations

from dataclasses import dataclass, field

from campus_chat.domain.value_objects.enums import AttachmentKind
from campus_chat.domain.value_objects.shared_ref import SharedRef


@dataclass(frozen=True, slots=True)
class Attachment:
    url: str
    kind: AttachmentKind


@dataclass(frozen=True, slots=True)
class SendMessageDTO:
    body: str | None = None
    attachment: Attachment | None = None
    shared: SharedRef = field(default_factory=SharedRef.none)

    @property
    def is_empty(self) -> bool:
        return not (self.body or "").strip() and self.attachment is None and self.shared.is_empty
