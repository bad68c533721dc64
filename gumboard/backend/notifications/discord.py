"""
Discord Provider.

Webhook payloads carry one embed whose color reflects the action.
"""

from typing import Any

from gumboard.backend.core.utils import utc_now
from gumboard.backend.notifications.base import NotificationProvider
from gumboard.backend.schemas.notification import TodoAction

DISCORD_EMOJI = {
    "added": "➕",
    "completed": "✅",
}
DISCORD_COLORS = {
    "added": 0x0099FF,
    "completed": 0x00FF00,
}


class DiscordProvider(NotificationProvider):
    """Posts board events to a Discord channel webhook."""

    name = "discord"
    organization_webhook_attr = "discord_webhook_url"
    board_flag_attr = "send_discord_updates"
    message_id_attr = "discord_message_id"

    def format_todo(
        self,
        text: str,
        board_name: str,
        user_name: str,
        action: TodoAction,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "username": self.sender_name,
            "embeds": [
                {
                    "color": DISCORD_COLORS[action],
                    "description": f"{DISCORD_EMOJI[action]} **{text}**",
                    "footer": {"text": f"{action} by {user_name} in {board_name}"},
                    "timestamp": utc_now().isoformat() + "Z",
                }
            ],
        }
        if self.avatar_url:
            payload["avatar_url"] = self.avatar_url
        return payload
