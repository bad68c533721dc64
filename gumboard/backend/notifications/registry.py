"""
Notification Provider Registry.

Builds the enabled providers from feature flags and notification settings.
"""

from gumboard.backend.core.config import get_app_config
from gumboard.backend.core.logging import get_logger
from gumboard.backend.notifications.base import NotificationProvider
from gumboard.backend.notifications.discord import DiscordProvider
from gumboard.backend.notifications.slack import SlackProvider

logger = get_logger(__name__)

# Feature flag guarding each provider
PROVIDER_FLAGS: dict[str, tuple[str, type[NotificationProvider]]] = {
    "slack": ("channel_slack_enabled", SlackProvider),
    "discord": ("channel_discord_enabled", DiscordProvider),
}

_providers: dict[str, NotificationProvider] = {}
_initialized: bool = False


def _register_enabled_providers() -> None:
    """Instantiate a provider for every enabled channel flag."""
    global _initialized
    if _initialized:
        return

    config = get_app_config()
    features = config.features
    settings = config.notifications

    for name, (flag, provider_class) in PROVIDER_FLAGS.items():
        if not getattr(features, flag):
            logger.debug("Notification provider disabled", extra={"provider": name})
            continue
        _providers[name] = provider_class(
            sender_name=settings.sender_name,
            avatar_url=settings.avatar_url,
            placeholder_text=settings.placeholder_text,
        )

    _initialized = True
    logger.info(
        "Notification registry initialized",
        extra={"providers": list(_providers.keys())},
    )


def get_provider(name: str) -> NotificationProvider | None:
    """Get an enabled provider by name, or None."""
    _register_enabled_providers()
    return _providers.get(name)


def get_enabled_providers() -> list[NotificationProvider]:
    """Get all enabled providers in registration order."""
    _register_enabled_providers()
    return list(_providers.values())


def reset_registry() -> None:
    """Forget registered providers so the next lookup re-reads configuration."""
    global _initialized
    _providers.clear()
    _initialized = False
