from __future__ import annotations

from campus_chat.application.dto.message import SendMessageDTO
from campus_chat.application.dto.principal import Principal
from campus_chat.application.dto.sharing import ShareTargets
from campus_chat.application.exceptions import ValidationError
from campus_chat.application.policies.permissions import require_viewer
from campus_chat.application.uow import UnitOfWork
from campus_chat.domain.entities.message import Message
from campus_chat.domain.value_objects.enums import SharedKind
from campus_chat.domain.value_objects.scope import MessageScope
from campus_chat.domain.value_objects.shared_ref import SharedRef
from campus_chat.services import group_message_service, message_service

SHARE_CAPTIONS: dict[SharedKind, str] = {
    SharedKind.POST: "Shared a post",
    SharedKind.PROJECT: "Shared a project",
    SharedKind.USER: "Shared a profile",
}


async def share_entity(
    principal: Principal | None,
    target: MessageScope,
    shared: SharedRef,
    uow: UnitOfWork,
) -> Message:
    """Forward a post, project or profile into a direct or group thread."""
    viewer = require_viewer(principal)
    if shared.is_empty:
        raise ValidationError("Nothing to share")

    payload = SendMessageDTO(body=SHARE_CAPTIONS[shared.kind], shared=shared)
    if target.is_direct:
        return await message_service.send_message(viewer, target.target_id, payload, uow)
    return await group_message_service.send_group_message(viewer, target.target_id, payload, uow)


async def list_share_targets(
    principal: Principal | None,
    uow: UnitOfWork,
) -> ShareTargets:
    """Mutual follows plus every group the viewer belongs to."""
    viewer = require_viewer(principal)

    following = await uow.follows.list_following(viewer.user_id)
    followers = set(await uow.follows.list_followers(viewer.user_id))
    mutual = [user_id for user_id in following if user_id in followers]

    profiles = await uow.profiles.get_users(mutual) if mutual else {}
    users = [profiles[user_id] for user_id in mutual if user_id in profiles]

    group_ids = await uow.members.list_group_ids_for_user(viewer.user_id)
    groups = await uow.groups.list_by_ids(group_ids) if group_ids else []

    return ShareTargets(users=users, groups=groups)
