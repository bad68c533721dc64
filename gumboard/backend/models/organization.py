"""
Organization and User Models.

Read-only inputs to the notes core: membership decides board access and the
organization carries the outbound webhook URLs.
"""

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gumboard.backend.models.base import Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from gumboard.backend.models.board import Board


class Organization(UUIDMixin, TimestampMixin, Base):
    """An organization owning users and boards."""

    __tablename__ = "organizations"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slack_webhook_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    discord_webhook_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)

    members: Mapped[list["User"]] = relationship(back_populates="organization")
    boards: Mapped[list["Board"]] = relationship(back_populates="organization")

    def __repr__(self) -> str:
        return f"<Organization(id={self.id}, name={self.name!r})>"


class User(UUIDMixin, TimestampMixin, Base):
    """A user; may or may not belong to an organization."""

    __tablename__ = "users"

    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    organization_id: Mapped[str | None] = mapped_column(
        ForeignKey("organizations.id"),
        nullable=True,
        index=True,
    )

    organization: Mapped[Organization | None] = relationship(back_populates="members")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email!r})>"
