"""
Notification Provider Interface.

Every outbound chat integration implements NotificationProvider. The
dispatcher only ever talks to providers through this contract, so adding
a provider means adding one subclass and one registry entry.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from gumboard.backend.notifications.policy import first_valid_content
from gumboard.backend.schemas.notification import TodoAction


class NotificationProvider(ABC):
    """
    Base class for webhook notification providers.

    Subclasses declare which organization webhook, board switch, and note
    column they use, and how a todo event is rendered as a payload.
    """

    def __init__(
        self,
        sender_name: str = "Gumboard",
        avatar_url: str | None = None,
        placeholder_text: str = "New note",
    ) -> None:
        self.sender_name = sender_name
        self.avatar_url = avatar_url
        self.placeholder_text = placeholder_text

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique provider identifier (e.g., 'slack', 'discord')."""
        ...

    @property
    @abstractmethod
    def organization_webhook_attr(self) -> str:
        """DeliveryContext attribute holding the organization's webhook URL."""
        ...

    @property
    @abstractmethod
    def board_flag_attr(self) -> str:
        """DeliveryContext attribute holding the board's enabled switch."""
        ...

    @property
    @abstractmethod
    def message_id_attr(self) -> str:
        """Note column that stores this provider's delivery id."""
        ...

    @abstractmethod
    def format_todo(
        self,
        text: str,
        board_name: str,
        user_name: str,
        action: TodoAction,
    ) -> dict[str, Any]:
        """Render a todo added/completed event as a webhook payload."""
        ...

    def format_note(
        self,
        item_contents: Sequence[str | None],
        board_name: str,
        user_name: str,
    ) -> dict[str, Any]:
        """
        Render a new note as a todo-added payload.

        The text is the first checklist item with valid content, or the
        placeholder when there is none. Always uses the added marker.
        """
        text = first_valid_content(item_contents) or self.placeholder_text
        return self.format_todo(text, board_name, user_name, "added")
