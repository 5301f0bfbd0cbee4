"""FastAPI dependency injection helpers."""
from __future__ import annotations

from typing import Annotated, AsyncIterator

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from campus_chat.application.dto.principal import Principal
from campus_chat.application.exceptions import NotAuthenticatedError
from campus_chat.application.ports.auth import TokenVerifier
from campus_chat.application.ports.storage import ObjectStorage
from campus_chat.application.ports.verification import DocumentVerifier
from campus_chat.config import settings
from campus_chat.infrastructure.auth.hs256_verifier import HS256Verifier
from campus_chat.infrastructure.auth.jwks_verifier import JWKSVerifier
from campus_chat.infrastructure.db.uow import SqlAlchemyUoW, session_uow

# Missing credentials are not an error here; services decide.
_bearer_scheme = HTTPBearer(auto_error=False)


async def get_uow() -> AsyncIterator[SqlAlchemyUoW]:
    async with session_uow() as uow:
        yield uow


UoWDep = Annotated[SqlAlchemyUoW, Depends(get_uow)]


def _get_verifier() -> TokenVerifier:
    if settings.JWT_VERIFY_MODE == "jwks":
        assert settings.JWKS_URL, "JWKS_URL must be set when JWT_VERIFY_MODE=jwks"
        return JWKSVerifier(settings.JWKS_URL, audience=settings.JWT_AUDIENCE)
    return HS256Verifier(settings.JWT_SECRET, settings.JWT_ALGORITHM, audience=settings.JWT_AUDIENCE)


_verifier: TokenVerifier | None = None


def get_verifier() -> TokenVerifier:
    global _verifier  # noqa: PLW0603
    if _verifier is None:
        _verifier = _get_verifier()
    return _verifier


async def authenticate(token: str | None) -> Principal | None:
    """Resolve a bearer token; no token means no viewer, a bad token is an error."""
    if not token:
        return None
    try:
        return await get_verifier().verify(token)
    except Exception as exc:
        raise NotAuthenticatedError(str(exc)) from exc


async def get_optional_principal(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer_scheme)],
) -> Principal | None:
    return await authenticate(credentials.credentials if credentials else None)


OptionalPrincipal = Annotated[Principal | None, Depends(get_optional_principal)]


def get_storage(request: Request) -> ObjectStorage:
    return request.app.state.storage


def get_document_verifier(request: Request) -> DocumentVerifier:
    return request.app.state.document_verifier


StorageDep = Annotated[ObjectStorage, Depends(get_storage)]
VerifierDep = Annotated[DocumentVerifier, Depends(get_document_verifier)]
