from __future__ import annotations

from dataclasses import dataclass

from campus_chat.domain.value_objects.enums import VerificationStatus


@dataclass(frozen=True, slots=True)
class VerificationResult:
    status: VerificationStatus
    match_score: float
