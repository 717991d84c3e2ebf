"""Caller identity dependency (bearer JWT from the external identity provider)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from docflow.domain.exceptions import AuthenticationException
from docflow.domain.value_objects.core import IdentityContext
from docflow.infrastructure.security.jwt import verify_token

_http_bearer = HTTPBearer(auto_error=False)


def identity_from_claims(payload: dict) -> IdentityContext:
    """Build IdentityContext from verified claims. Raises ValueError on bad claims."""
    try:
        role_level = int(payload["role_level"])
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError("Token claim role_level must be an integer") from e
    department_id = payload.get("department_id") or None
    return IdentityContext(
        actor_id=str(payload.get("sub") or ""),
        role_level=role_level,
        department_id=str(department_id) if department_id is not None else None,
    )


async def get_identity_optional(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
) -> IdentityContext | None:
    """Return the caller from the JWT if present and valid; else None."""
    if not credentials:
        return None
    try:
        return identity_from_claims(verify_token(credentials.credentials))
    except ValueError:
        return None


async def get_identity(
    identity: Annotated[IdentityContext | None, Depends(get_identity_optional)],
) -> IdentityContext:
    """Return the caller; raise AuthenticationException (401) if missing or invalid."""
    if identity is None:
        raise AuthenticationException("Not authenticated")
    return identity
