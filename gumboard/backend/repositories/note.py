"""
Note Repository.

Data access layer for notes and their checklist items.
"""

from typing import Any

from sqlalchemy import Select, func, select, update
from sqlalchemy.orm import selectinload

from gumboard.backend.models.note import ChecklistItem, Note
from gumboard.backend.repositories.base import BaseRepository

# Columns a delivery id may be written to
MESSAGE_ID_COLUMNS = frozenset({"slack_message_id", "discord_message_id"})


class NoteRepository(BaseRepository[Note]):
    """
    Repository for Note model.

    Listing queries only ever see visible notes: a note with either
    `deleted_at` or `archived_at` set is excluded.
    """

    model = Note

    @staticmethod
    def _visible_on_board(query: Select, board_id: str) -> Select:
        return query.where(
            Note.board_id == board_id,
            Note.deleted_at.is_(None),
            Note.archived_at.is_(None),
        )

    async def list_for_board(
        self,
        board_id: str,
        limit: int,
        offset: int,
    ) -> list[Note]:
        """
        Get one page of visible notes, newest first.

        Creator and checklist items are loaded with each note; items come
        back ordered by `order` then `sequence`.
        """
        query = self._visible_on_board(
            select(Note).options(
                selectinload(Note.user),
                selectinload(Note.checklist_items),
            ),
            board_id,
        )
        result = await self.session.execute(
            query.order_by(Note.created_at.desc(), Note.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all())

    async def count_for_board(self, board_id: str) -> int:
        """Count visible notes on a board."""
        result = await self.session.execute(
            self._visible_on_board(select(func.count()).select_from(Note), board_id)
        )
        return result.scalar_one()

    async def create_with_items(
        self,
        board_id: str,
        created_by: str,
        color: str,
        items: list[dict[str, Any]],
    ) -> Note:
        """
        Create a note and its checklist items in one flush.

        Args:
            items: Normalized item dicts with content, checked and order;
                each item's position becomes its `sequence`.
        """
        note = Note(board_id=board_id, created_by=created_by, color=color)
        note.checklist_items = [
            ChecklistItem(
                content=item["content"],
                checked=item["checked"],
                order=item["order"],
                sequence=index,
            )
            for index, item in enumerate(items)
        ]
        self.session.add(note)
        await self.session.flush()
        return note

    async def get_with_details(self, note_id: str) -> Note | None:
        """Re-read a note with creator and ordered checklist items attached."""
        result = await self.session.execute(
            select(Note)
            .options(
                selectinload(Note.user),
                selectinload(Note.checklist_items),
            )
            .where(Note.id == note_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def set_message_id(self, note_id: str, column: str, message_id: str) -> None:
        """Record the delivery id returned by a webhook provider."""
        if column not in MESSAGE_ID_COLUMNS:
            raise ValueError(f"Unknown message id column: {column}")
        await self.session.execute(
            update(Note).where(Note.id == note_id).values({column: message_id})
        )
