from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from campus_chat.domain.value_objects.enums import ChangeType


@dataclass(frozen=True, slots=True)
class RowChanged:
    """Row-level change notification. Used only as a cache-invalidation trigger."""

    table: str
    type: ChangeType
    record: dict[str, Any] = field(default_factory=dict)
    old_record: dict[str, Any] = field(default_factory=dict)

    def value(self, column: str) -> Any:
        """Look a column up in the new record, falling back to the old one (deletes)."""
        if column in self.record:
            return self.record[column]
        return self.old_record.get(column)
