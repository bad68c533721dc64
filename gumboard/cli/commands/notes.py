"""
Notes Commands.

Browse and create board notes through the API.
"""

import asyncio
import re
from typing import Any

import httpx
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from gumboard.client.api import APIClient, APIError
from gumboard.client.feed import NotesFeed
from gumboard.client.scroll import ScrollTrigger, Viewport

app = typer.Typer(help="Board notes")
console = Console()

TOKEN_OPTION = typer.Option(
    None,
    "--token",
    "-t",
    envvar="GUMBOARD_TOKEN",
    help="Bearer token (anonymous when omitted)",
)
BASE_URL_OPTION = typer.Option(
    None,
    "--base-url",
    help="API base URL (defaults to server settings in application.yaml)",
)

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")


def _item_summary(note: dict[str, Any], width: int = 60) -> str:
    lines = []
    for item in note.get("checklistItems") or []:
        mark = "x" if item.get("checked") else " "
        lines.append(f"[{mark}] {item.get('content', '')}")
    if not lines:
        return "[dim](empty)[/dim]"
    text = "\n".join(lines)
    if len(text) > width * 4:
        text = text[: width * 4] + "..."
    return escape(text)


def _swatch(color: str) -> str:
    if _HEX_COLOR.match(color):
        return f"[on {color}]  [/] {color}"
    return escape(color)


def _author(note: dict[str, Any]) -> str:
    user = note.get("user") or {}
    return escape(user.get("name") or user.get("email") or note.get("createdBy", ""))


def render_notes(notes: list[dict[str, Any]], start: int, rows: int, total: int | None) -> Table:
    """Render the slice of notes currently in view."""
    shown = notes[start:start + rows]
    title = f"Notes {start + 1}-{start + len(shown)}"
    if total is not None:
        title += f" of {total}"
    table = Table(title=title, show_header=True, show_lines=True)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Color")
    table.add_column("Author", style="cyan")
    table.add_column("Created")
    table.add_column("Checklist")
    for index, note in enumerate(shown, start=start + 1):
        table.add_row(
            str(index),
            _swatch(note.get("color", "")),
            _author(note),
            str(note.get("createdAt", ""))[:19],
            _item_summary(note),
        )
    return table


def _report_error(e: Exception) -> None:
    if isinstance(e, APIError):
        console.print(f"[red]Error {e.status_code}: {escape(e.message)}[/red]")
    elif isinstance(e, httpx.ConnectError):
        console.print("[red]Error: Cannot connect to backend[/red]")
        console.print("[dim]Is the server running? Start with: python cli.py --service server[/dim]")
    else:
        console.print(f"[red]Error: {escape(str(e))}[/red]")


@app.command("list")
def list_notes(
    board_id: str = typer.Argument(..., help="Board ID"),
    rows: int = typer.Option(10, "--rows", "-r", min=1, help="Notes shown per screen"),
    limit: int | None = typer.Option(None, "--limit", "-l", help="Page size requested from the API"),
    interactive: bool = typer.Option(
        True,
        "--interactive/--no-interactive",
        help="Scroll through pages (Enter: next screen, r: refresh, q: quit)",
    ),
    token: str | None = TOKEN_OPTION,
    base_url: str | None = BASE_URL_OPTION,
) -> None:
    """
    Browse a board's notes, newest first.

    Further pages load as you scroll toward the end of what is loaded.

    Examples:
        gumboard notes list BOARD_ID
        gumboard notes list BOARD_ID --rows 5 --no-interactive
    """
    asyncio.run(_browse(board_id, rows, limit, interactive, token, base_url))


async def _browse(
    board_id: str,
    rows: int,
    limit: int | None,
    interactive: bool,
    token: str | None,
    base_url: str | None,
) -> None:
    client = APIClient(base_url=base_url, token=token)
    feed = NotesFeed(client, board_id, page_size=limit)
    # Lookahead of one screen keeps the next page loading ahead of the reader
    trigger = ScrollTrigger(feed, root_margin=rows, threshold=0.1)

    try:
        await feed.refresh()
        if feed.last_error is not None:
            _report_error(feed.last_error)
            raise typer.Exit(1)

        position = 0
        while True:
            # Sentinel is the row just past the last loaded note
            await trigger.observe(len(feed.notes), 1, Viewport(top=position, height=rows))
            if feed.last_error is not None:
                _report_error(feed.last_error)

            console.print(render_notes(feed.notes, position, rows, feed.total))
            at_end = position + rows >= len(feed.notes) and not trigger.mounted
            if at_end:
                console.print("[dim]End of board[/dim]")
            if not interactive:
                return

            choice = typer.prompt("[Enter] more  [r] refresh  [q] quit", default="", show_default=False)
            choice = choice.strip().lower()
            if choice == "q":
                return
            if choice == "r":
                await feed.refresh()
                position = 0
                continue
            if at_end:
                return
            position = min(position + rows, max(len(feed.notes) - 1, 0))
    finally:
        await client.close()


@app.command()
def create(
    board_id: str = typer.Argument(..., help="Board ID"),
    items: list[str] = typer.Option(None, "--item", "-i", help="Checklist item (repeatable)"),
    color: str | None = typer.Option(None, "--color", "-c", help="Note color, random when omitted"),
    token: str | None = TOKEN_OPTION,
    base_url: str | None = BASE_URL_OPTION,
) -> None:
    """
    Create a note on a board.

    Examples:
        gumboard notes create BOARD_ID --item "Buy milk" --item "Call Sam"
    """
    asyncio.run(_create(board_id, items or [], color, token, base_url))


async def _create(
    board_id: str,
    items: list[str],
    color: str | None,
    token: str | None,
    base_url: str | None,
) -> None:
    client = APIClient(base_url=base_url, token=token)
    try:
        note = await client.create_note(
            board_id,
            color=color,
            checklist_items=[{"content": text} for text in items] or None,
        )
    except (APIError, httpx.HTTPError) as e:
        _report_error(e)
        raise typer.Exit(1)
    finally:
        await client.close()

    console.print(f"[green]Created note {note['id']}[/green]")
    console.print(render_notes([note], 0, 1, None))
