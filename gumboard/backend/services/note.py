"""
Note Service.

Listing and creating notes on a board, with organization-based access
control. Creating a note yields a notification snapshot; delivery itself
happens after the request commits and never affects the result.
"""

import random
from collections.abc import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from gumboard.backend.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
)
from gumboard.backend.core.pagination import PageCursor, PageWindow
from gumboard.backend.models.board import Board
from gumboard.backend.models.note import Note
from gumboard.backend.models.organization import User
from gumboard.backend.repositories.board import BoardRepository
from gumboard.backend.repositories.note import NoteRepository
from gumboard.backend.repositories.user import UserRepository
from gumboard.backend.schemas.note import ChecklistItemSeed, NoteCreate
from gumboard.backend.schemas.notification import DeliveryContext, NoteCreatedNotification
from gumboard.backend.services.base import BaseService


def normalize_checklist_items(seeds: Sequence[ChecklistItemSeed]) -> list[dict]:
    """
    Fill in defaults for client-supplied checklist items.

    Missing content becomes "", missing checked becomes False, and missing
    order becomes the item's position in the request.
    """
    return [
        {
            "content": seed.content if seed.content is not None else "",
            "checked": seed.checked if seed.checked is not None else False,
            "order": seed.order if seed.order is not None else index,
        }
        for index, seed in enumerate(seeds)
    ]


class NoteService(BaseService):
    """
    Service for board notes.

    Args:
        session: Request-scoped database session
        palette: Colors used when a note is created without one
            (defaults to application.notes.colors)
    """

    def __init__(
        self,
        session: AsyncSession,
        palette: Sequence[str] | None = None,
    ) -> None:
        super().__init__(session)
        self.boards = BoardRepository(session)
        self.users = UserRepository(session)
        self.notes = NoteRepository(session)
        if palette is None:
            from gumboard.backend.core.config import get_app_config

            palette = get_app_config().application.notes.colors
        self.palette = list(palette)

    async def _get_board(self, board_id: str) -> Board:
        board = await self.boards.get_by_id_or_none(board_id)
        if board is None:
            raise NotFoundError("Board not found")
        return board

    async def _get_member(self, user_id: str) -> User:
        """Load the caller, who must belong to an organization."""
        user = await self.users.get_with_organization(user_id)
        if user is None or user.organization is None:
            raise AuthorizationError("No organization found")
        return user

    async def list_board_notes(
        self,
        board_id: str,
        user_id: str | None,
        window: PageWindow,
    ) -> tuple[list[Note], PageCursor]:
        """
        Get one page of visible notes on a board, newest first.

        Public boards are readable by anyone. Private boards require a
        caller from the board's organization.

        Raises:
            NotFoundError: Board does not exist
            AuthenticationError: Private board and anonymous caller
            AuthorizationError: Caller has no or a different organization
        """
        board = await self._get_board(board_id)

        if not board.is_public:
            if user_id is None:
                raise AuthenticationError("Unauthorized")
            user = await self._get_member(user_id)
            if user.organization_id != board.organization_id:
                raise AuthorizationError("Access denied")

        # One session cannot run statements concurrently, so page then count
        notes = await self._execute_db_operation(
            "list_board_notes",
            self.notes.list_for_board(board_id, window.limit, window.offset),
        )
        total = await self._execute_db_operation(
            "count_board_notes",
            self.notes.count_for_board(board_id),
        )

        cursor = PageCursor.from_window(window, total)
        self._log_operation(
            "Listed board notes",
            board_id=board_id,
            returned=len(notes),
            total=total,
            offset=window.offset,
            limit=window.limit,
        )
        return notes, cursor

    async def create_note(
        self,
        board_id: str,
        user_id: str | None,
        data: NoteCreate,
    ) -> tuple[Note, NoteCreatedNotification]:
        """
        Create a note with its checklist items.

        Returns:
            The created note (creator and ordered items loaded) and the
            snapshot to hand to post-commit notification delivery

        Raises:
            AuthenticationError: Anonymous caller
            AuthorizationError: Caller has no organization, or the board
                belongs to another organization
            NotFoundError: Board does not exist
        """
        if user_id is None:
            raise AuthenticationError("Unauthorized")

        user = await self._get_member(user_id)
        board = await self._get_board(board_id)
        if board.organization_id != user.organization_id:
            raise AuthorizationError("Access denied")

        color = data.color or random.choice(self.palette)
        items = normalize_checklist_items(data.checklist_items or [])

        self._log_operation(
            "Creating note",
            board_id=board_id,
            user_id=user_id,
            item_count=len(items),
        )
        created = await self._execute_db_operation(
            "create_note",
            self.notes.create_with_items(board_id, user.id, color, items),
        )
        note = await self._execute_db_operation(
            "load_note",
            self.notes.get_with_details(created.id),
        )

        organization = user.organization
        notification = NoteCreatedNotification(
            note_id=note.id,
            context=DeliveryContext(
                board_id=board.id,
                board_name=board.name,
                user_id=user.id,
                user_name=user.name or user.email,
                slack_webhook_url=organization.slack_webhook_url,
                discord_webhook_url=organization.discord_webhook_url,
                send_slack_updates=board.send_slack_updates,
                send_discord_updates=board.send_discord_updates,
            ),
            item_contents=[item.content for item in note.checklist_items],
        )
        self._log_debug("Note created", note_id=note.id)
        return note, notification
