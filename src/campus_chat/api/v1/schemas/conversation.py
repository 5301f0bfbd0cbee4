from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from campus_chat.api.v1.schemas.profile import ProfileResponse


class ConversationResponse(BaseModel):
    partner: ProfileResponse
    last_message_text: str
    last_message_at: datetime
    relative_time: str
    unread: bool

    model_config = {"from_attributes": True}
