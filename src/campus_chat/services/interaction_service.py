from __future__ import annotations

import uuid

from campus_chat.application.dto.principal import Principal
from campus_chat.application.policies.permissions import require_viewer
from campus_chat.application.repositories.interaction import EntityTarget
from campus_chat.application.uow import UnitOfWork
from campus_chat.domain.entities.interaction import InteractionState
from campus_chat.domain.value_objects.enums import EntityKind, InteractionKind


async def get_state(
    principal: Principal | None,
    kind: InteractionKind,
    entity: EntityKind,
    entity_id: uuid.UUID,
    uow: UnitOfWork,
) -> InteractionState:
    """Count for anyone; ``viewer_has_acted`` only when there is a viewer."""
    target = EntityTarget.of(entity, entity_id)
    count = await uow.interactions.count(kind, target)
    acted = False
    if principal is not None:
        acted = await uow.interactions.has_acted(kind, target, principal.user_id)
    return InteractionState(count=count, viewer_has_acted=acted)


async def set_interaction(
    principal: Principal | None,
    kind: InteractionKind,
    entity: EntityKind,
    entity_id: uuid.UUID,
    acted: bool,
    uow: UnitOfWork,
) -> None:
    """Add the row when ``acted`` else remove it. Both directions are idempotent."""
    viewer = require_viewer(principal)
    target = EntityTarget.of(entity, entity_id)
    if acted:
        await uow.interactions_w.add(kind, target, viewer.user_id)
    else:
        await uow.interactions_w.remove(kind, target, viewer.user_id)
    await uow.commit()


async def toggle(
    principal: Principal | None,
    kind: InteractionKind,
    entity: EntityKind,
    entity_id: uuid.UUID,
    uow: UnitOfWork,
) -> InteractionState:
    """Add if absent, remove if present; return the state after the write."""
    viewer = require_viewer(principal)
    target = EntityTarget.of(entity, entity_id)
    acted = await uow.interactions.has_acted(kind, target, viewer.user_id)
    await set_interaction(viewer, kind, entity, entity_id, not acted, uow)
    return await get_state(viewer, kind, entity, entity_id, uow)


async def count_comments(
    entity: EntityKind,
    entity_id: uuid.UUID,
    uow: UnitOfWork,
) -> int:
    return await uow.interactions.count_comments(EntityTarget.of(entity, entity_id))
