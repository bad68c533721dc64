"""
Notification Schemas.

Snapshots handed from note creation to post-commit delivery. They carry
everything a provider needs so delivery never touches the request session,
and they serialize cleanly onto the task queue.
"""

from typing import Literal

from pydantic import BaseModel, Field

TodoAction = Literal["added", "completed"]


class DeliveryContext(BaseModel):
    """Board, actor, and organization webhook settings for one event."""

    board_id: str
    board_name: str
    user_id: str
    user_name: str
    slack_webhook_url: str | None = None
    discord_webhook_url: str | None = None
    send_slack_updates: bool = False
    send_discord_updates: bool = False


class NoteCreatedNotification(BaseModel):
    """A note was created; announce it on every eligible provider."""

    note_id: str
    context: DeliveryContext
    item_contents: list[str] = Field(
        default_factory=list,
        description="Checklist item texts in display order",
    )
