"""
Slack Provider.

Incoming-webhook payloads are a single mrkdwn text blob.
"""

from typing import Any

from gumboard.backend.notifications.base import NotificationProvider
from gumboard.backend.schemas.notification import TodoAction

SLACK_EMOJI = {
    "added": ":heavy_plus_sign:",
    "completed": ":white_check_mark:",
}
SLACK_ICON_EMOJI = ":clipboard:"


class SlackProvider(NotificationProvider):
    """Posts board events to a Slack incoming webhook."""

    name = "slack"
    organization_webhook_attr = "slack_webhook_url"
    board_flag_attr = "send_slack_updates"
    message_id_attr = "slack_message_id"

    def format_todo(
        self,
        text: str,
        board_name: str,
        user_name: str,
        action: TodoAction,
    ) -> dict[str, Any]:
        # Slack mrkdwn bold is a single asterisk
        return {
            "text": f"{SLACK_EMOJI[action]} *{text}* {action} by {user_name} in {board_name}",
            "username": self.sender_name,
            "icon_emoji": SLACK_ICON_EMOJI,
        }
