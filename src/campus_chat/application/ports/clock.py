from __future__ import annotations

from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    """Source of timezone-aware UTC timestamps."""

    def now(self) -> datetime: ...


class SystemClock:
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


SYSTEM_CLOCK = SystemClock()


def epoch_millis(clock: Clock) -> int:
    """Milliseconds since the Unix epoch; storage object names are built from it."""
    return int(clock.now().timestamp() * 1000)
