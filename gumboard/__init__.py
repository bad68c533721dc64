"""
Gumboard.

- backend/: Notes API, notifications, database, configuration
- client/: HTTP client, paginated notes feed and scroll trigger
- cli/: Board browser CLI (Typer + Rich)
"""
