from __future__ import annotations

from typing import Protocol

from campus_chat.application.dto.principal import Principal


class TokenVerifier(Protocol):
    async def verify(self, token: str) -> Principal:
        """Return the viewer for a valid access token.

        Raises ``jwt.InvalidTokenError`` (or a subclass) for anything else,
        including tokens whose subject is not a user id.
        """
        ...
