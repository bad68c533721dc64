"""
Gumboard API client.

APIClient talks to the notes API; NotesFeed and ScrollTrigger drive
incremental loading of a board's notes.
"""

from gumboard.client.api import APIClient, APIError
from gumboard.client.feed import NotesFeed
from gumboard.client.scroll import ScrollTrigger

__all__ = ["APIClient", "APIError", "NotesFeed", "ScrollTrigger"]
