from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from campus_chat.domain.value_objects.enums import EntityKind, InteractionKind

ENTITY_COLUMNS: dict[EntityKind, str] = {
    EntityKind.POST: "post_id",
    EntityKind.PROJECT: "project_id",
}

INTERACTION_TABLES: dict[InteractionKind, str] = {
    InteractionKind.LIKE: "likes",
    InteractionKind.BOOKMARK: "bookmarks",
}


@dataclass(frozen=True, slots=True)
class EntityTarget:
    """A post or project together with the column that references it."""

    kind: EntityKind
    entity_id: UUID
    column: str

    @classmethod
    def of(cls, kind: EntityKind, entity_id: UUID) -> EntityTarget:
        return cls(kind=kind, entity_id=entity_id, column=ENTITY_COLUMNS[kind])


class InteractionReader(Protocol):
    async def count(self, kind: InteractionKind, target: EntityTarget) -> int: ...

    async def has_acted(
        self, kind: InteractionKind, target: EntityTarget, user_id: UUID,
    ) -> bool: ...

    async def count_comments(self, target: EntityTarget) -> int: ...


class InteractionWriter(Protocol):
    async def add(
        self, kind: InteractionKind, target: EntityTarget, user_id: UUID,
    ) -> None: ...

    async def remove(
        self, kind: InteractionKind, target: EntityTarget, user_id: UUID,
    ) -> None: ...
