from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True, slots=True)
class InteractionState:
    count: int = 0
    viewer_has_acted: bool = False

    def toggled(self) -> InteractionState:
        """Optimistic flip: adjust the count by one in the direction of the flip."""
        delta = -1 if self.viewer_has_acted else 1
        return replace(
            self,
            count=max(self.count + delta, 0),
            viewer_has_acted=not self.viewer_has_acted,
        )
