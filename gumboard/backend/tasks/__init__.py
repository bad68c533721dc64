"""
Background Tasks Package.

Post-commit delivery of note notifications, in-process or through the
Taskiq Redis broker.

Usage (with Redis):
    from gumboard.backend.tasks import register_tasks

    tasks = register_tasks()
    await tasks["deliver_note_notification"].kiq(notification.model_dump(mode="json"))

Usage (without Redis, e.g. tests):
    from gumboard.backend.tasks import deliver_note_notification

    await deliver_note_notification(payload, dispatcher=dispatcher)

Start a worker with:
    python cli.py --service worker
"""

from gumboard.backend.tasks.broker import get_broker
from gumboard.backend.tasks.notifications import (
    DELIVER_NOTE_TASK,
    TASK_CONFIG,
    deliver_note_notification,
    register_tasks,
    schedule_note_notification,
)

__all__ = [
    "DELIVER_NOTE_TASK",
    "TASK_CONFIG",
    "deliver_note_notification",
    "get_broker",
    "register_tasks",
    "schedule_note_notification",
]
