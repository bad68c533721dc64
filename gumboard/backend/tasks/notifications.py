"""
Notification Delivery Tasks.

Post-commit delivery of note notifications. Note creation never waits
for, or fails because of, anything in this module.

Two delivery modes (notifications.yaml `delivery_mode`):

- background: FastAPI BackgroundTasks, runs in-process after the
  response has been sent
- queue: Taskiq task on the Redis broker, run by `python cli.py --service worker`

The task function is a plain async function and can be called directly
without Redis.
"""

from typing import Any

from fastapi import BackgroundTasks

from gumboard.backend.core.logging import get_logger, log_with_source
from gumboard.backend.notifications.dispatcher import (
    DeliveryRecorder,
    NotificationDispatcher,
)
from gumboard.backend.schemas.notification import NoteCreatedNotification

logger = get_logger(__name__)

DELIVER_NOTE_TASK = "deliver_note_notification"

# Task configuration metadata
TASK_CONFIG = {
    DELIVER_NOTE_TASK: {
        "retry_on_error": False,
        "max_retries": 0,
        "description": "Send a new note to Slack/Discord and record delivery ids",
    },
}

_registered: dict[str, Any] = {}


def get_notification_dispatcher() -> NotificationDispatcher:
    """Dispatcher wired to the configured providers and the real database."""
    return NotificationDispatcher(recorder=DeliveryRecorder())


async def deliver_note_notification(
    payload: dict[str, Any],
    dispatcher: NotificationDispatcher | None = None,
) -> dict[str, str | None]:
    """
    Deliver a note-created notification.

    Args:
        payload: NoteCreatedNotification as a JSON-compatible dict
        dispatcher: Dispatcher override (defaults to the configured one)

    Returns:
        Delivery id per attempted provider
    """
    notification = NoteCreatedNotification.model_validate(payload)
    dispatcher = dispatcher or get_notification_dispatcher()
    try:
        return await dispatcher.dispatch_note_created(notification)
    except Exception as e:
        log_with_source(
            logger,
            "tasks",
            "error",
            "Note notification delivery failed",
            note_id=notification.note_id,
            error=str(e),
        )
        return {}


def register_tasks() -> dict[str, Any]:
    """
    Register task functions with the Taskiq broker.

    Returns:
        Dict mapping task names to registered task objects
    """
    if _registered:
        return _registered

    from gumboard.backend.tasks.broker import get_broker

    broker = get_broker()
    config = TASK_CONFIG[DELIVER_NOTE_TASK]
    _registered[DELIVER_NOTE_TASK] = broker.task(
        task_name=DELIVER_NOTE_TASK,
        retry_on_error=config["retry_on_error"],
    )(deliver_note_notification)

    logger.info(
        "Tasks registered with broker",
        extra={"task_count": len(_registered), "tasks": list(_registered.keys())},
    )
    return _registered


async def _enqueue(payload: dict[str, Any]) -> None:
    """Put a delivery on the Redis queue; a broker outage only loses the notification."""
    try:
        task = register_tasks()[DELIVER_NOTE_TASK]
        await task.kiq(payload)
    except Exception as e:
        log_with_source(
            logger,
            "tasks",
            "error",
            "Failed to enqueue note notification",
            note_id=payload.get("note_id"),
            error=str(e),
        )


def schedule_note_notification(
    notification: NoteCreatedNotification,
    background_tasks: BackgroundTasks,
    dispatcher: NotificationDispatcher | None = None,
    delivery_mode: str | None = None,
) -> None:
    """
    Schedule delivery to run after the response is sent.

    The work is attached to `background_tasks` in both modes. Callers
    commit the note before scheduling so delivery can record its ids.
    """
    if delivery_mode is None:
        from gumboard.backend.core.config import get_app_config

        delivery_mode = get_app_config().notifications.delivery_mode

    payload = notification.model_dump(mode="json")
    if delivery_mode == "queue":
        background_tasks.add_task(_enqueue, payload)
    else:
        background_tasks.add_task(deliver_note_notification, payload, dispatcher)

    log_with_source(
        logger,
        "tasks",
        "debug",
        "Note notification scheduled",
        note_id=notification.note_id,
        mode=delivery_mode,
    )
