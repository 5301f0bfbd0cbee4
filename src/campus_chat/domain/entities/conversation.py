from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from campus_chat.domain.entities.profile import UserProfile


@dataclass(frozen=True, slots=True)
class ConversationSummary:
    """One row of the inbox, derived from the viewer's latest message with a partner.

    ``unread`` only means the partner sent the last message; there is no
    persisted read state behind it.
    """

    partner: UserProfile
    last_message_text: str
    last_message_at: datetime
    relative_time: str
    unread: bool
