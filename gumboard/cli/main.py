"""
Gumboard CLI.

Usage:
    gumboard --help
    gumboard notes list BOARD_ID
    gumboard notes create BOARD_ID --item "Buy milk"
"""

import typer

from gumboard.cli.commands import notes_app

app = typer.Typer(
    name="gumboard",
    help="Gumboard client - browse and create board notes.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(notes_app, name="notes")


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output (INFO level logging)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug mode (DEBUG level logging)",
    ),
) -> None:
    """Gumboard command-line client."""
    if debug or verbose:
        from gumboard.backend.core.logging import setup_logging

        setup_logging(level="DEBUG" if debug else "INFO", format_type="console")


if __name__ == "__main__":
    app()
