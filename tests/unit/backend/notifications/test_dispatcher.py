"""
Unit Tests for the Notification Dispatcher.

Webhooks are served by recording mock transports; the delivery recorder
is mocked unless a test is about the recorder itself.
"""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest

from gumboard.backend.notifications.discord import DiscordProvider
from gumboard.backend.notifications.dispatcher import DeliveryRecorder, NotificationDispatcher
from gumboard.backend.notifications.sender import WebhookSender
from gumboard.backend.notifications.slack import SlackProvider
from gumboard.backend.schemas.notification import DeliveryContext, NoteCreatedNotification

SLACK_URL = "https://hooks.slack.com/services/T/B/x"
DISCORD_URL = "https://discord.com/api/webhooks/1/y"


def make_context(**overrides) -> DeliveryContext:
    values = dict(
        board_id="board-1",
        board_name="Sprint",
        user_id="user-1",
        user_name="Ada",
        slack_webhook_url=SLACK_URL,
        discord_webhook_url=DISCORD_URL,
        send_slack_updates=True,
        send_discord_updates=True,
    )
    values.update(overrides)
    return DeliveryContext(**values)


def make_notification(items=("Buy milk",), **overrides) -> NoteCreatedNotification:
    return NoteCreatedNotification(
        note_id="note-1",
        context=make_context(**overrides),
        item_contents=list(items),
    )


@pytest.fixture
def recorder():
    mock = MagicMock(spec=DeliveryRecorder)
    mock.record = AsyncMock(return_value=True)
    return mock


@pytest.fixture
def make_dispatcher(webhook_transport, recorder):
    def _make(transport=None, suppressed=(), enabled=True, record=True):
        transport = transport or webhook_transport(body={"id": "msg-1"})
        dispatcher = NotificationDispatcher(
            providers=[SlackProvider(), DiscordProvider()],
            sender=WebhookSender(transport=transport.transport),
            recorder=recorder if record else None,
            suppressed_board_names=list(suppressed),
            enabled=enabled,
        )
        return dispatcher, transport

    return _make


class TestDispatchNoteCreated:
    """Per-provider preconditions and fan-out for a created note."""

    @pytest.mark.asyncio
    async def test_sends_once_per_provider(self, make_dispatcher, recorder):
        dispatcher, transport = make_dispatcher()

        results = await dispatcher.dispatch_note_created(make_notification())

        assert results == {"slack": "msg-1", "discord": "msg-1"}
        assert sorted(transport.urls) == sorted([SLACK_URL, DISCORD_URL])
        assert recorder.record.await_count == 2
        recorder.record.assert_any_await("note-1", "slack_message_id", "msg-1")
        recorder.record.assert_any_await("note-1", "discord_message_id", "msg-1")

    @pytest.mark.asyncio
    async def test_text_contains_item_and_board(self, make_dispatcher):
        dispatcher, transport = make_dispatcher()

        await dispatcher.dispatch_note_created(make_notification(items=["Buy milk"]))

        slack = next(p for p in transport.payloads if "text" in p)
        assert "Buy milk" in slack["text"]
        assert "Sprint" in slack["text"]

    @pytest.mark.asyncio
    async def test_no_items_means_no_sends(self, make_dispatcher, recorder):
        dispatcher, transport = make_dispatcher()

        results = await dispatcher.dispatch_note_created(make_notification(items=()))

        assert results == {}
        assert transport.requests == []
        recorder.record.assert_not_called()

    @pytest.mark.asyncio
    async def test_symbol_only_items_mean_no_sends(self, make_dispatcher):
        dispatcher, transport = make_dispatcher()

        await dispatcher.dispatch_note_created(make_notification(items=["  ", "?!"]))

        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_missing_webhook_skips_provider(self, make_dispatcher):
        dispatcher, transport = make_dispatcher()

        results = await dispatcher.dispatch_note_created(
            make_notification(slack_webhook_url=None)
        )

        assert list(results) == ["discord"]
        assert transport.urls == [DISCORD_URL]

    @pytest.mark.asyncio
    async def test_board_switch_off_skips_provider(self, make_dispatcher):
        dispatcher, transport = make_dispatcher()

        await dispatcher.dispatch_note_created(make_notification(send_discord_updates=False))

        assert transport.urls == [SLACK_URL]

    @pytest.mark.asyncio
    async def test_suppressed_board_sends_nothing(self, make_dispatcher):
        dispatcher, transport = make_dispatcher(suppressed=["Sprint"])

        await dispatcher.dispatch_note_created(make_notification())

        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_global_switch_off_sends_nothing(self, make_dispatcher):
        dispatcher, transport = make_dispatcher(enabled=False)

        assert await dispatcher.dispatch_note_created(make_notification()) == {}
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_failed_webhook_is_not_recorded(self, make_dispatcher, webhook_transport, recorder):
        dispatcher, _ = make_dispatcher(transport=webhook_transport(status_code=500))

        results = await dispatcher.dispatch_note_created(make_notification())

        assert results == {"slack": None, "discord": None}
        recorder.record.assert_not_called()

    @pytest.mark.asyncio
    async def test_provider_failure_is_isolated(self, make_dispatcher):
        dispatcher, transport = make_dispatcher()
        broken = MagicMock(wraps=dispatcher.providers[0])
        broken.name = "slack"
        broken.organization_webhook_attr = "slack_webhook_url"
        broken.board_flag_attr = "send_slack_updates"
        broken.format_note.side_effect = RuntimeError("formatter bug")
        dispatcher.providers[0] = broken

        results = await dispatcher.dispatch_note_created(make_notification())

        assert results == {"slack": None, "discord": "msg-1"}
        assert transport.urls == [DISCORD_URL]

    @pytest.mark.asyncio
    async def test_without_recorder_ids_are_only_returned(self, make_dispatcher):
        dispatcher, _ = make_dispatcher(record=False)

        results = await dispatcher.dispatch_note_created(make_notification())

        assert results == {"slack": "msg-1", "discord": "msg-1"}


class TestTodoEvents:
    @pytest.mark.asyncio
    async def test_notify_todo_completed(self, make_dispatcher):
        dispatcher, transport = make_dispatcher()

        await dispatcher.notify_todo(make_context(), "Ship it", "completed")

        slack = next(p for p in transport.payloads if "text" in p)
        assert slack["text"].startswith(":white_check_mark: *Ship it* completed")

    @pytest.mark.asyncio
    async def test_notify_todo_without_content_sends_nothing(self, make_dispatcher):
        dispatcher, transport = make_dispatcher()

        assert await dispatcher.notify_todo(make_context(), "...") == {}
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_update_todo_posts_fresh_messages(self, make_dispatcher, recorder):
        dispatcher, transport = make_dispatcher()

        result = await dispatcher.update_todo(make_context(), "Ship it", completed=False)

        assert result is None
        assert len(transport.requests) == 2
        slack = next(p for p in transport.payloads if "text" in p)
        assert "added by Ada" in slack["text"]
        recorder.record.assert_not_called()


class TestDeliveryRecorder:
    @pytest.mark.asyncio
    async def test_records_through_repository(self, mock_db_session):
        @asynccontextmanager
        async def factory():
            yield mock_db_session

        assert await DeliveryRecorder(factory).record("note-1", "slack_message_id", "m1") is True
        mock_db_session.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failure_is_logged_not_raised(self):
        @asynccontextmanager
        async def factory():
            raise ConnectionError("database down")
            yield

        assert await DeliveryRecorder(factory).record("note-1", "slack_message_id", "m1") is False
