"""JWT verification for bearer tokens issued by the external identity provider.

Uses docflow.core.config for secret and algorithm. create_access_token exists
for scripts and tests; production tokens come from the identity provider.
"""

from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import JWTError, jwt

from docflow.core.config import get_settings

DEFAULT_TOKEN_TTL = timedelta(hours=1)


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """Create a JWT with the given claims (sub, role_level, department_id).

    Args:
        data: Claims to encode.
        expires_delta: Optional TTL; defaults to one hour.

    Returns:
        Encoded JWT string.
    """
    settings = get_settings()
    to_encode = data.copy()
    to_encode["exp"] = datetime.now(UTC) + (expires_delta or DEFAULT_TOKEN_TTL)
    encoded = jwt.encode(
        to_encode,
        settings.secret_key.get_secret_value(),
        algorithm=settings.algorithm,
    )
    return cast(str, encoded)


def verify_token(token: str) -> dict[str, Any]:
    """Verify and decode a JWT. Returns the payload.

    Enforces presence of exp, sub and role_level. Raises ValueError if the
    token is invalid, expired, or missing required claims.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except JWTError as e:
        raise ValueError(f"Invalid token: {e!s}") from e
    if not payload.get("sub"):
        raise ValueError("Token missing required claim: sub")
    if "role_level" not in payload:
        raise ValueError("Token missing required claim: role_level")
    return payload
