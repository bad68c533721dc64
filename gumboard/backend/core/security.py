"""
Security Utilities.

Caller identity for the notes API. Session management lives outside this
service; callers present a signed JWT whose `sub` claim is the user id.
"""

from datetime import timedelta
from typing import Any

from jose import JWTError, jwt

from gumboard.backend.core.config import get_app_config, get_settings
from gumboard.backend.core.exceptions import AuthenticationError
from gumboard.backend.core.logging import get_logger
from gumboard.backend.core.utils import utc_now

logger = get_logger(__name__)


def create_access_token(data: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: Payload data to encode (must include "sub" for API use)
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token
    """
    settings = get_settings()
    jwt_config = get_app_config().security.jwt
    to_encode = data.copy()

    if expires_delta:
        expire = utc_now() + expires_delta
    else:
        expire = utc_now() + timedelta(minutes=jwt_config.access_token_expire_minutes)

    to_encode.update({"exp": expire, "type": "access", "aud": jwt_config.audience})
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=jwt_config.algorithm)


def decode_token(token: str) -> dict[str, Any]:
    """
    Decode and validate a JWT token.

    Raises:
        AuthenticationError: If token is invalid or expired
    """
    settings = get_settings()
    jwt_config = get_app_config().security.jwt
    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[jwt_config.algorithm],
            audience=jwt_config.audience,
        )
    except JWTError as e:
        logger.warning("Token decode failed", extra={"error": str(e)})
        raise AuthenticationError("Invalid or expired token")


def resolve_user_id(authorization: str | None) -> str | None:
    """
    Resolve the caller's user id from an Authorization header value.

    Returns None for anonymous callers (no header). A header that is
    present but malformed, expired, or missing a subject is rejected.

    Raises:
        AuthenticationError: If a credential is present but unusable
    """
    if not authorization:
        return None

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Invalid authorization header")

    payload = decode_token(token.strip())
    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationError("Token has no subject")
    return str(user_id)
