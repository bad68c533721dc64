"""
Taskiq worker entry point.

Importing this module creates the broker and registers every task, which
is what `taskiq worker` needs to find them:

    taskiq worker gumboard.backend.tasks.worker:broker
"""

from gumboard.backend.core.logging import setup_logging
from gumboard.backend.tasks.broker import get_broker
from gumboard.backend.tasks.notifications import register_tasks

setup_logging()

broker = get_broker()
register_tasks()
