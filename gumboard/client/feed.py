"""
Notes Feed.

Client-side state for incrementally loading a board's notes.

Pages are appended in request order, so the list stays newest first
across pages. At most one list request is in flight: load_more() calls
made while loading are dropped, not queued. refresh() starts a new
generation; responses that belong to an older generation are discarded
when they arrive.
"""

from typing import Any, Protocol

import httpx

from gumboard.backend.core.logging import get_logger, log_with_source
from gumboard.client.api import APIError

logger = get_logger(__name__)


class NotesSource(Protocol):
    async def list_notes(
        self, board_id: str, limit: int | None = None, offset: int = 0
    ) -> dict[str, Any]: ...


class NotesFeed:
    """
    Paginated, locally mutable view of a board's notes.

    Args:
        client: Anything with APIClient.list_notes
        board_id: Board to page through
        page_size: Requested limit per page (server default when None)
    """

    def __init__(
        self,
        client: NotesSource,
        board_id: str,
        page_size: int | None = None,
    ) -> None:
        self._client = client
        self.board_id = board_id
        self.page_size = page_size

        self.notes: list[dict[str, Any]] = []
        self.loading = False
        self.has_more = True
        self.offset = 0
        self.generation = 0
        self.total: int | None = None
        self.last_error: Exception | None = None

    async def load_more(self) -> bool:
        """
        Request the next page and append it.

        A failed request or an unreadable page leaves notes and has_more
        untouched, records last_error and clears loading so the call can
        be retried.

        Returns:
            True if a request was issued, False if the call was dropped
        """
        if self.loading or not self.has_more:
            return False

        generation = self.generation
        self.loading = True
        try:
            page = await self._client.list_notes(
                self.board_id,
                limit=self.page_size,
                offset=self.offset,
            )
            if generation != self.generation:
                log_with_source(
                    logger,
                    "client",
                    "debug",
                    "Discarded stale notes page",
                    board_id=self.board_id,
                    generation=generation,
                    current_generation=self.generation,
                )
                return True

            pagination = page["pagination"]
            notes = list(page["notes"])
            has_more = bool(pagination["hasMore"])
            next_offset = pagination.get("nextOffset")
            total = pagination.get("total")
        except (APIError, httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            log_with_source(
                logger,
                "client",
                "error",
                "Failed to load notes",
                board_id=self.board_id,
                offset=self.offset,
                error=str(e),
                error_type=type(e).__name__,
            )
            if generation == self.generation:
                self.last_error = e
                self.loading = False
            return True

        self.notes.extend(notes)
        self.has_more = has_more
        if next_offset is not None:
            self.offset = next_offset
        self.total = total
        self.last_error = None
        self.loading = False
        return True

    async def refresh(self) -> bool:
        """Drop all local state and reload from the first page."""
        self.generation += 1
        self.notes = []
        self.offset = 0
        self.has_more = True
        self.total = None
        self.last_error = None
        self.loading = False
        return await self.load_more()

    def add_note(self, note: dict[str, Any]) -> None:
        """Optimistically show a new note at the top."""
        self.notes.insert(0, note)

    def update_note(self, note_id: str, changes: dict[str, Any]) -> None:
        """Merge changes into the note with the given id."""
        self.notes = [
            {**note, **changes} if note.get("id") == note_id else note
            for note in self.notes
        ]

    def remove_note(self, note_id: str) -> None:
        self.notes = [note for note in self.notes if note.get("id") != note_id]
