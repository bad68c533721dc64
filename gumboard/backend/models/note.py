"""
Note and Checklist Item Models.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gumboard.backend.models.base import Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from gumboard.backend.models.board import Board
    from gumboard.backend.models.organization import User


class Note(UUIDMixin, TimestampMixin, Base):
    """
    A colored card on a board holding ordered checklist items.

    archived_at and deleted_at are independent markers; a note with either
    set is hidden from listings. The *_message_id columns hold the last
    delivery id returned by each webhook provider.
    """

    __tablename__ = "notes"
    __table_args__ = (Index("ix_notes_board_created", "board_id", "created_at"),)

    color: Mapped[str] = mapped_column(String(32), nullable=False)
    board_id: Mapped[str] = mapped_column(ForeignKey("boards.id"), nullable=False)
    created_by: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False)
    archived_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    slack_message_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    discord_message_id: Mapped[str | None] = mapped_column(String(255), nullable=True)

    board: Mapped["Board"] = relationship(back_populates="notes")
    user: Mapped["User"] = relationship()
    checklist_items: Mapped[list["ChecklistItem"]] = relationship(
        back_populates="note",
        order_by=lambda: [ChecklistItem.order, ChecklistItem.sequence],
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, board_id={self.board_id})>"


class ChecklistItem(UUIDMixin, TimestampMixin, Base):
    """
    A single todo line within a note.

    `sequence` is the item's index in the create request and breaks ties
    between items sharing the same `order`.
    """

    __tablename__ = "checklist_items"

    note_id: Mapped[str] = mapped_column(
        ForeignKey("notes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    checked: Mapped[bool] = mapped_column(default=False, nullable=False)
    order: Mapped[int] = mapped_column(default=0, nullable=False)
    sequence: Mapped[int] = mapped_column(default=0, nullable=False)

    note: Mapped[Note] = relationship(back_populates="checklist_items")

    def __repr__(self) -> str:
        return f"<ChecklistItem(id={self.id}, order={self.order})>"
