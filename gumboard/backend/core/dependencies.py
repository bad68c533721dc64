"""
FastAPI Dependencies.

Shared dependencies for request handling.
"""

from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from gumboard.backend.core.database import get_db_session
from gumboard.backend.core.exceptions import AuthenticationError
from gumboard.backend.core.logging import get_logger
from gumboard.backend.core.security import resolve_user_id

logger = get_logger(__name__)

# Type alias for database session dependency
DbSession = Annotated[AsyncSession, Depends(get_db_session)]


async def get_optional_user_id(
    authorization: str | None = Header(None),
) -> str | None:
    """
    Caller's user id, or None for an anonymous request.

    An unusable credential (expired, malformed, wrong scheme) is treated
    as no credential, so public resources stay readable.
    """
    try:
        return resolve_user_id(authorization)
    except AuthenticationError as e:
        logger.warning("Ignoring unusable credential", extra={"reason": e.message})
        return None


async def get_current_user_id(
    authorization: str | None = Header(None),
) -> str:
    """Caller's user id; anonymous or unusable credentials are rejected with 401."""
    user_id = resolve_user_id(authorization)
    if user_id is None:
        raise AuthenticationError("Unauthorized")
    return user_id


OptionalUserId = Annotated[str | None, Depends(get_optional_user_id)]
CurrentUserId = Annotated[str, Depends(get_current_user_id)]
