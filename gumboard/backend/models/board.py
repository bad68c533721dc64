"""
Board Model.
"""

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gumboard.backend.models.base import Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from gumboard.backend.models.note import Note
    from gumboard.backend.models.organization import Organization


class Board(UUIDMixin, TimestampMixin, Base):
    """
    Named collection of notes scoped to one organization.

    Public boards are readable by anyone; private boards only by members
    of the owning organization. The send_* flags gate webhook updates per
    provider.
    """

    __tablename__ = "boards"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_public: Mapped[bool] = mapped_column(default=False, nullable=False)
    organization_id: Mapped[str] = mapped_column(
        ForeignKey("organizations.id"),
        nullable=False,
        index=True,
    )
    send_slack_updates: Mapped[bool] = mapped_column(default=True, nullable=False)
    send_discord_updates: Mapped[bool] = mapped_column(default=True, nullable=False)

    organization: Mapped["Organization"] = relationship(back_populates="boards")
    notes: Mapped[list["Note"]] = relationship(back_populates="board")

    def __repr__(self) -> str:
        return f"<Board(id={self.id}, name={self.name!r})>"
