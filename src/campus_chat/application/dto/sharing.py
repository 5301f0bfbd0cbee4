from __future__ import annotations

from dataclasses import dataclass, field

from campus_chat.domain.entities.group import Group
from campus_chat.domain.entities.profile import UserProfile


@dataclass(frozen=True, slots=True)
class ShareTargets:
    users: list[UserProfile] = field(default_factory=list)
    groups: list[Group] = field(default_factory=list)
