from __future__ import annotations

import uuid

from campus_chat.application.dto.principal import Principal
from campus_chat.application.exceptions import ConflictError, ValidationError
from campus_chat.application.policies.permissions import require_viewer
from campus_chat.application.uow import UnitOfWork


async def follow(
    principal: Principal | None,
    user_id: uuid.UUID,
    uow: UnitOfWork,
) -> None:
    viewer = require_viewer(principal)
    if user_id == viewer.user_id:
        raise ValidationError("You cannot follow yourself")
    if await uow.follows.is_following(viewer.user_id, user_id):
        raise ConflictError("Already following this user")

    await uow.follows_w.add(viewer.user_id, user_id)
    await uow.commit()


async def unfollow(
    principal: Principal | None,
    user_id: uuid.UUID,
    uow: UnitOfWork,
) -> None:
    viewer = require_viewer(principal)
    await uow.follows_w.remove(viewer.user_id, user_id)
    await uow.commit()


async def is_following(
    principal: Principal | None,
    user_id: uuid.UUID,
    uow: UnitOfWork,
) -> bool:
    viewer = require_viewer(principal)
    return await uow.follows.is_following(viewer.user_id, user_id)


async def is_mutual(
    principal: Principal | None,
    user_id: uuid.UUID,
    uow: UnitOfWork,
) -> bool:
    viewer = require_viewer(principal)
    return await uow.follows.is_following(viewer.user_id, user_id) and (
        await uow.follows.is_following(user_id, viewer.user_id)
    )
