from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from campus_chat.domain.value_objects.enums import ScopeKind


@dataclass(frozen=True, slots=True)
class MessageScope:
    """Where a message lives: a receiver for direct chat, a group otherwise."""

    kind: ScopeKind
    target_id: UUID

    @classmethod
    def direct(cls, receiver_id: UUID) -> MessageScope:
        return cls(ScopeKind.DIRECT, receiver_id)

    @classmethod
    def group(cls, group_id: UUID) -> MessageScope:
        return cls(ScopeKind.GROUP, group_id)

    @property
    def is_direct(self) -> bool:
        return self.kind == ScopeKind.DIRECT
