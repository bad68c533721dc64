"""
Board Notes API Endpoints.

GET  /boards/{board_id}/notes   one page of visible notes, newest first
POST /boards/{board_id}/notes   create a note with checklist items
"""

from fastapi import APIRouter, BackgroundTasks, Depends

from gumboard.backend.core.dependencies import CurrentUserId, DbSession, OptionalUserId
from gumboard.backend.core.pagination import PageWindow, get_page_window
from gumboard.backend.notifications.dispatcher import NotificationDispatcher
from gumboard.backend.schemas.note import NoteCreate, NoteEnvelope, NoteResponse, NotesPage
from gumboard.backend.services.note import NoteService
from gumboard.backend.tasks.notifications import (
    get_notification_dispatcher,
    schedule_note_notification,
)

router = APIRouter()


@router.get(
    "/{board_id}/notes",
    response_model=NotesPage,
    response_model_by_alias=True,
    summary="List board notes (paginated)",
    description=(
        "Visible notes on a board, newest first. Public boards are open to "
        "anyone; private boards require a member of the board's organization."
    ),
)
async def list_board_notes(
    board_id: str,
    db: DbSession,
    user_id: OptionalUserId,
    window: PageWindow = Depends(get_page_window),
) -> NotesPage:
    service = NoteService(db)
    notes, cursor = await service.list_board_notes(board_id, user_id, window)
    return NotesPage(
        notes=[NoteResponse.model_validate(note) for note in notes],
        pagination=cursor.to_info(),
    )


@router.post(
    "/{board_id}/notes",
    response_model=NoteEnvelope,
    response_model_by_alias=True,
    status_code=201,
    summary="Create a note",
    description=(
        "Create a note with optional color and checklist items. Slack and "
        "Discord updates are sent after the response and never fail the request."
    ),
)
async def create_board_note(
    board_id: str,
    data: NoteCreate,
    db: DbSession,
    user_id: CurrentUserId,
    background_tasks: BackgroundTasks,
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> NoteEnvelope:
    service = NoteService(db)
    note, notification = await service.create_note(board_id, user_id, data)
    # Delivery records ids from its own session; the note must be durable first
    await db.commit()
    schedule_note_notification(notification, background_tasks, dispatcher)
    return NoteEnvelope(note=NoteResponse.model_validate(note))
