"""The only place cache keys are built."""
from __future__ import annotations

from uuid import UUID

from campus_chat.application.cache import QueryKey
from campus_chat.domain.value_objects.enums import EntityKind, InteractionKind, SharedKind

_INTERACTION_PREFIX: dict[InteractionKind, str] = {
    InteractionKind.LIKE: "likes",
    InteractionKind.BOOKMARK: "bookmarks",
}


def conversations(viewer_id: UUID) -> QueryKey:
    return ("conversations", viewer_id)


def chat(partner_id: UUID) -> QueryKey:
    return ("chat", partner_id)


def group_chat(group_id: UUID) -> QueryKey:
    return ("group-chat", group_id)


def interaction(kind: InteractionKind, entity: EntityKind, entity_id: UUID) -> QueryKey:
    return (_INTERACTION_PREFIX[kind], entity.value, entity_id)


def comments_count(entity: EntityKind, entity_id: UUID) -> QueryKey:
    return ("comments-count", entity.value, entity_id)


def shared_entity(kind: SharedKind, entity_id: UUID) -> QueryKey:
    return ("shared", kind.value, entity_id)
