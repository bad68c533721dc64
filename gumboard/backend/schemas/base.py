"""
Base Schemas.

Standard error envelope and the camelCase base model used by every
schema that goes over the wire.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from gumboard.backend.core.utils import utc_now


class CamelModel(BaseModel):
    """
    Base for wire schemas.

    Fields are snake_case in Python and camelCase in JSON. Both spellings
    are accepted on input; FastAPI serializes responses by alias.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ResponseMetadata(BaseModel):
    """Metadata included in error responses."""

    timestamp: datetime = Field(default_factory=utc_now)
    request_id: str | None = None


class ErrorDetail(BaseModel):
    """Error detail structure."""

    code: str
    message: str
    details: dict[str, Any] | None = None


class ErrorResponse(BaseModel):
    """Standard error response."""

    success: bool = False
    data: None = None
    error: ErrorDetail
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)


class PaginationInfo(CamelModel):
    """Offset pagination metadata returned with every page."""

    total: int
    limit: int
    offset: int
    has_more: bool
    next_offset: int | None = None
