"""Database models."""

from gumboard.backend.models.base import Base
from gumboard.backend.models.board import Board
from gumboard.backend.models.note import ChecklistItem, Note
from gumboard.backend.models.organization import Organization, User

__all__ = ["Base", "Board", "ChecklistItem", "Note", "Organization", "User"]
