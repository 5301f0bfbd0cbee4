from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter

from campus_chat.api.deps import OptionalPrincipal, UoWDep
from campus_chat.api.v1.schemas.interaction import (
    CountResponse,
    InteractionStateResponse,
    SetInteractionRequest,
)
from campus_chat.domain.value_objects.enums import EntityKind, InteractionKind
from campus_chat.services import interaction_service

router = APIRouter(prefix="/api/v1/interactions", tags=["interactions"])


@router.get("/{entity}/{entity_id}/comments/count", response_model=CountResponse)
async def count_comments(
    entity: EntityKind,
    entity_id: UUID,
    uow: UoWDep,
) -> CountResponse:
    return CountResponse(count=await interaction_service.count_comments(entity, entity_id, uow))


@router.get("/{entity}/{entity_id}/{kind}", response_model=InteractionStateResponse)
async def get_state(
    entity: EntityKind,
    entity_id: UUID,
    kind: InteractionKind,
    principal: OptionalPrincipal,
    uow: UoWDep,
) -> InteractionStateResponse:
    state = await interaction_service.get_state(principal, kind, entity, entity_id, uow)
    return InteractionStateResponse.model_validate(state)


@router.put("/{entity}/{entity_id}/{kind}", response_model=InteractionStateResponse)
async def set_interaction(
    entity: EntityKind,
    entity_id: UUID,
    kind: InteractionKind,
    body: SetInteractionRequest,
    principal: OptionalPrincipal,
    uow: UoWDep,
) -> InteractionStateResponse:
    await interaction_service.set_interaction(principal, kind, entity, entity_id, body.acted, uow)
    state = await interaction_service.get_state(principal, kind, entity, entity_id, uow)
    return InteractionStateResponse.model_validate(state)


@router.post("/{entity}/{entity_id}/{kind}/toggle", response_model=InteractionStateResponse)
async def toggle(
    entity: EntityKind,
    entity_id: UUID,
    kind: InteractionKind,
    principal: OptionalPrincipal,
    uow: UoWDep,
) -> InteractionStateResponse:
    state = await interaction_service.toggle(principal, kind, entity, entity_id, uow)
    return InteractionStateResponse.model_validate(state)
