"""
Note Schemas.

Pydantic schemas for the board notes API. Wire format is camelCase.
"""

from datetime import datetime

from pydantic import Field

from gumboard.backend.schemas.base import CamelModel, PaginationInfo


class ChecklistItemSeed(CamelModel):
    """A checklist item supplied when creating a note. Every field is optional."""

    content: str | None = Field(default=None, max_length=10000)
    checked: bool | None = None
    order: int | None = None


class NoteCreate(CamelModel):
    """Schema for creating a new note on a board."""

    color: str | None = Field(
        default=None,
        max_length=32,
        description="Note color; a random palette color is used when omitted",
        examples=["#fef3c7"],
    )
    checklist_items: list[ChecklistItemSeed] | None = Field(
        default=None,
        description="Initial checklist items, created atomically with the note",
    )


class NoteAuthor(CamelModel):
    """Public identity fields of a note's creator."""

    id: str
    name: str | None = None
    email: str | None = None


class ChecklistItemResponse(CamelModel):
    """Schema for a checklist item in API responses."""

    id: str
    note_id: str
    content: str
    checked: bool
    order: int


class NoteResponse(CamelModel):
    """Schema for a note in API responses."""

    id: str = Field(description="Note unique identifier")
    color: str
    board_id: str
    created_by: str
    created_at: datetime
    updated_at: datetime
    archived_at: datetime | None = None
    deleted_at: datetime | None = None
    slack_message_id: str | None = None
    discord_message_id: str | None = None
    user: NoteAuthor
    checklist_items: list[ChecklistItemResponse] = Field(default_factory=list)


class NotesPage(CamelModel):
    """One page of a board's notes."""

    notes: list[NoteResponse]
    pagination: PaginationInfo


class NoteEnvelope(CamelModel):
    """Response body for a created note."""

    note: NoteResponse
