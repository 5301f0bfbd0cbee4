from __future__ import annotations

from uuid import UUID

from campus_chat.application.dto.principal import Principal
from campus_chat.application.policies.permissions import require_viewer
from campus_chat.application.ports.clock import SYSTEM_CLOCK, Clock
from campus_chat.application.uow import UnitOfWork
from campus_chat.domain.entities.conversation import ConversationSummary
from campus_chat.services._relative_time import format_distance


async def list_conversations(
    principal: Principal | None,
    uow: UnitOfWork,
    *,
    clock: Clock | None = None,
) -> list[ConversationSummary]:
    """Build the inbox: one entry per partner, taken from the latest message.

    Relies on the store returning messages newest first; the first message
    seen for a partner is the one kept.
    """
    viewer = require_viewer(principal)
    messages = await uow.messages.list_for_user(viewer.user_id)

    partner_ids = list(dict.fromkeys(m.partner_of(viewer.user_id) for m in messages))
    profiles = await uow.profiles.get_users(partner_ids) if partner_ids else {}
    now = (clock or SYSTEM_CLOCK).now()

    summaries: dict[UUID, ConversationSummary] = {}
    for msg in messages:
        partner_id = msg.partner_of(viewer.user_id)
        if partner_id in summaries:
            continue
        partner = profiles.get(partner_id)
        if partner is None:
            continue
        summaries[partner_id] = ConversationSummary(
            partner=partner,
            last_message_text=msg.body or "",
            last_message_at=msg.created_at,
            relative_time=format_distance(msg.created_at, now),
            unread=msg.sender_id != viewer.user_id,
        )
    return list(summaries.values())
