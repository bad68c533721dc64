# Pydantic schemas package
from gumboard.backend.schemas.base import (
    CamelModel,
    ErrorDetail,
    ErrorResponse,
    PaginationInfo,
    ResponseMetadata,
)

__all__ = [
    "CamelModel",
    "ErrorDetail",
    "ErrorResponse",
    "PaginationInfo",
    "ResponseMetadata",
]
