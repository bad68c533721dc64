"""
Pagination Utilities.

Offset-based pagination for board note listings.

Query parameters are parsed leniently: malformed values fall back to
their defaults and out-of-range values are clamped instead of rejected.
The page cursor is derived per request and never persisted:

    has_more    = offset + limit < total
    next_offset = offset + limit if has_more else None
"""

from dataclasses import dataclass

from fastapi import Query

from gumboard.backend.schemas.base import PaginationInfo


# =============================================================================
# Page Window (request side)
# =============================================================================


@dataclass(frozen=True)
class PageWindow:
    """Effective limit/offset used for a list query."""

    limit: int
    offset: int


def _parse_int(raw: str | int | None, default: int) -> int:
    """Parse a query value as an integer, falling back to default."""
    if raw is None:
        return default
    try:
        return int(str(raw).strip())
    except ValueError:
        return default


def resolve_page_window(
    raw_limit: str | int | None,
    raw_offset: str | int | None,
    default_limit: int = 20,
    max_limit: int = 50,
) -> PageWindow:
    """
    Turn raw query values into an effective page window.

    Args:
        raw_limit: Client-supplied limit (any type, possibly malformed)
        raw_offset: Client-supplied offset (any type, possibly malformed)
        default_limit: Limit used when none or a malformed one is supplied
        max_limit: Hard cap; larger limits are silently clamped to it

    Returns:
        PageWindow with 1 <= limit <= max_limit and offset >= 0
    """
    limit = _parse_int(raw_limit, default_limit)
    limit = max(1, min(limit, max_limit))
    offset = max(0, _parse_int(raw_offset, 0))
    return PageWindow(limit=limit, offset=offset)


def get_page_window(
    limit: str | None = Query(
        default=None,
        description="Maximum number of notes to return (clamped to the configured cap)",
    ),
    offset: str | None = Query(
        default=None,
        description="Number of notes to skip",
    ),
) -> PageWindow:
    """
    FastAPI dependency for pagination parameters.

    Usage:
        @router.get("")
        async def list_items(window: PageWindow = Depends(get_page_window)):
            ...
    """
    from gumboard.backend.core.config import get_app_config

    pagination = get_app_config().application.pagination
    return resolve_page_window(
        limit,
        offset,
        default_limit=pagination.default_limit,
        max_limit=pagination.max_limit,
    )


# =============================================================================
# Page Cursor (response side)
# =============================================================================


@dataclass(frozen=True)
class PageCursor:
    """Pagination metadata for one page of results."""

    limit: int
    offset: int
    total: int
    has_more: bool
    next_offset: int | None

    @classmethod
    def from_window(cls, window: PageWindow, total: int) -> "PageCursor":
        has_more = window.offset + window.limit < total
        return cls(
            limit=window.limit,
            offset=window.offset,
            total=total,
            has_more=has_more,
            next_offset=window.offset + window.limit if has_more else None,
        )

    def to_info(self) -> PaginationInfo:
        return PaginationInfo(
            total=self.total,
            limit=self.limit,
            offset=self.offset,
            has_more=self.has_more,
            next_offset=self.next_offset,
        )
