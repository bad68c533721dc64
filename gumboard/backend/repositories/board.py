"""
Board Repository.
"""

from gumboard.backend.models.board import Board
from gumboard.backend.repositories.base import BaseRepository


class BoardRepository(BaseRepository[Board]):
    """Read access to boards for access and notification decisions."""

    model = Board
