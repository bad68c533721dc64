"""
Notification Dispatcher.

Fans a board event out to every enabled provider. For each provider the
event is sent only when all of these hold:

    - the organization has a webhook URL for the provider
    - there is valid content to announce
    - the board's switch for the provider is on and the board is not suppressed

Providers run concurrently and independently; one provider failing never
affects another, and nothing here raises into the caller.
"""

import asyncio
from collections.abc import Callable, Iterable
from contextlib import AbstractAsyncContextManager
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from gumboard.backend.core.logging import get_logger, log_with_source
from gumboard.backend.notifications.base import NotificationProvider
from gumboard.backend.notifications.policy import has_valid_content, should_send_notification
from gumboard.backend.notifications.sender import WebhookSender
from gumboard.backend.repositories.note import NoteRepository
from gumboard.backend.schemas.notification import (
    DeliveryContext,
    NoteCreatedNotification,
    TodoAction,
)

logger = get_logger(__name__)

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]


class DeliveryRecorder:
    """
    Persists delivery ids back onto notes.

    Runs in its own unit of work: the note was committed by the request
    that created it, so a failure here only loses the delivery id.
    """

    def __init__(self, session_factory: SessionFactory | None = None) -> None:
        if session_factory is None:
            from gumboard.backend.core.database import session_scope

            session_factory = session_scope
        self._session_factory = session_factory

    async def record(self, note_id: str, column: str, message_id: str) -> bool:
        try:
            async with self._session_factory() as session:
                await NoteRepository(session).set_message_id(note_id, column, message_id)
        except Exception as e:
            log_with_source(
                logger,
                "notifications",
                "error",
                "Failed to record delivery id",
                note_id=note_id,
                column=column,
                error=str(e),
            )
            return False
        return True


class NotificationDispatcher:
    """
    Applies delivery policy and sends formatted payloads per provider.

    Args:
        providers: Providers to fan out to (registry defaults when None)
        sender: Webhook sender
        recorder: Delivery id recorder (None disables persistence)
        suppressed_board_names: Board names that never notify
        enabled: Global switch; when False nothing is sent
    """

    def __init__(
        self,
        providers: Iterable[NotificationProvider] | None = None,
        sender: WebhookSender | None = None,
        recorder: DeliveryRecorder | None = None,
        suppressed_board_names: Iterable[str] | None = None,
        enabled: bool | None = None,
    ) -> None:
        if providers is None or suppressed_board_names is None or enabled is None:
            from gumboard.backend.core.config import get_app_config
            from gumboard.backend.notifications.registry import get_enabled_providers

            config = get_app_config()
            if providers is None:
                providers = get_enabled_providers()
            if suppressed_board_names is None:
                suppressed_board_names = config.notifications.suppressed_board_names
            if enabled is None:
                enabled = config.features.notifications_enabled

        self.providers = list(providers)
        self.sender = sender or WebhookSender()
        self.recorder = recorder
        self.suppressed_board_names = list(suppressed_board_names)
        self.enabled = enabled

    def _target_url(
        self,
        provider: NotificationProvider,
        context: DeliveryContext,
        has_content: bool,
    ) -> str | None:
        """Webhook URL when every delivery precondition holds, else None."""
        url = getattr(context, provider.organization_webhook_attr)
        if not url:
            reason = "no webhook configured"
        elif not has_content:
            reason = "no valid content"
        elif not should_send_notification(
            context.user_id,
            context.board_id,
            context.board_name,
            getattr(context, provider.board_flag_attr),
            self.suppressed_board_names,
        ):
            reason = "disabled for board"
        else:
            return url

        log_with_source(
            logger,
            "notifications",
            "debug",
            "Notification skipped",
            provider=provider.name,
            board_id=context.board_id,
            reason=reason,
        )
        return None

    async def _run(self, name: str, coro: Any) -> str | None:
        try:
            return await coro
        except Exception:
            # Providers are isolated from each other
            logger.exception("Notification provider failed", extra={"provider": name})
            return None

    async def _gather(self, jobs: dict[str, Any]) -> dict[str, str | None]:
        names = list(jobs)
        results = await asyncio.gather(*(self._run(name, jobs[name]) for name in names))
        return dict(zip(names, results))

    async def _deliver_note(
        self,
        provider: NotificationProvider,
        url: str,
        notification: NoteCreatedNotification,
    ) -> str | None:
        context = notification.context
        payload = provider.format_note(
            notification.item_contents,
            context.board_name,
            context.user_name,
        )
        message_id = await self.sender.send(url, payload, provider.name)
        if message_id and self.recorder is not None:
            await self.recorder.record(
                notification.note_id,
                provider.message_id_attr,
                message_id,
            )
        return message_id

    async def dispatch_note_created(
        self,
        notification: NoteCreatedNotification,
    ) -> dict[str, str | None]:
        """
        Announce a new note on every eligible provider.

        Returns:
            Delivery id per attempted provider (None when the send failed)
        """
        if not self.enabled:
            return {}

        has_content = any(has_valid_content(text) for text in notification.item_contents)
        jobs = {}
        for provider in self.providers:
            url = self._target_url(provider, notification.context, has_content)
            if url:
                jobs[provider.name] = self._deliver_note(provider, url, notification)

        results = await self._gather(jobs)
        if results:
            log_with_source(
                logger,
                "notifications",
                "info",
                "Note notifications dispatched",
                note_id=notification.note_id,
                delivered=[name for name, mid in results.items() if mid],
                failed=[name for name, mid in results.items() if not mid],
            )
        return results

    async def notify_todo(
        self,
        context: DeliveryContext,
        text: str,
        action: TodoAction = "added",
    ) -> dict[str, str | None]:
        """Announce a single checklist item being added or completed."""
        if not self.enabled:
            return {}

        has_content = has_valid_content(text)
        jobs = {}
        for provider in self.providers:
            url = self._target_url(provider, context, has_content)
            if url:
                payload = provider.format_todo(
                    text, context.board_name, context.user_name, action
                )
                jobs[provider.name] = self.sender.send(url, payload, provider.name)
        return await self._gather(jobs)

    async def update_todo(
        self,
        context: DeliveryContext,
        text: str,
        completed: bool,
    ) -> None:
        """Post a fresh message reflecting a checklist item's new state."""
        if not self.enabled:
            return

        action: TodoAction = "completed" if completed else "added"
        has_content = has_valid_content(text)
        jobs = {}
        for provider in self.providers:
            url = self._target_url(provider, context, has_content)
            if url:
                payload = provider.format_todo(
                    text, context.board_name, context.user_name, action
                )
                jobs[provider.name] = self.sender.update(url, payload, provider.name)
        await self._gather(jobs)
