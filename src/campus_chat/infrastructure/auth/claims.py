from __future__ import annotations

from typing import Any
from uuid import UUID

import jwt

from campus_chat.application.dto.principal import Principal


def principal_from_claims(payload: dict[str, Any]) -> Principal:
    """Map verified token claims onto a Principal; ``sub`` must be a user UUID."""
    try:
        user_id = UUID(str(payload["sub"]))
    except (KeyError, ValueError) as exc:
        raise jwt.InvalidTokenError("Token subject is not a user id") from exc

    roles = payload.get("roles") or []
    role = payload.get("role")
    if role and role not in roles:
        roles = [*roles, role]
    return Principal(user_id=user_id, email=payload.get("email"), roles=list(roles))


def decode_options(audience: str | None) -> dict[str, Any]:
    return {} if audience else {"verify_aud": False}
