from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID

from campus_chat.domain.value_objects.enums import GroupVisibility


@dataclass(frozen=True, slots=True)
class CreateGroupDTO:
    name: str
    visibility: GroupVisibility
    description: str | None = None
    members: list[UUID] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class UpdateGroupDTO:
    name: str | None = None
    description: str | None = None
    image_url: str | None = None

    def changes(self) -> dict[str, str]:
        return {
            key: value
            for key, value in (
                ("name", self.name),
                ("description", self.description),
                ("image_url", self.image_url),
            )
            if value is not None
        }
