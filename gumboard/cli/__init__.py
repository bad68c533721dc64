"""
Gumboard CLI.

Thin presentation layer over the notes API: commands call the backend
over HTTP (gumboard.client) with X-Frontend-ID: cli.
"""
