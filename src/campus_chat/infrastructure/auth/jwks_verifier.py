from __future__ import annotations

import asyncio

import jwt
from jwt import PyJWKClient

from campus_chat.application.dto.principal import Principal
from campus_chat.infrastructure.auth.claims import decode_options, principal_from_claims


class JWKSVerifier:
    """Verify JWTs using a remote JWKS endpoint."""

    def __init__(self, jwks_url: str, *, audience: str | None = None) -> None:
        self._jwks_url = jwks_url
        self._jwk_client = PyJWKClient(jwks_url)
        self._audience = audience

    async def verify(self, token: str) -> Principal:
        # PyJWKClient fetches keys with blocking I/O
        signing_key = await asyncio.to_thread(self._jwk_client.get_signing_key_from_jwt, token)
        payload = jwt.decode(
            token,
            signing_key.key,
            algorithms=["RS256", "ES256"],
            audience=self._audience,
            options=decode_options(self._audience),
        )
        return principal_from_claims(payload)
