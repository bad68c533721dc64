#!/usr/bin/env python3
"""
Gumboard service launcher.

Use --service to select what to run, --action to control lifecycle.

Usage:
    python cli.py --help
    python cli.py --service server --verbose
    python cli.py --service server --action stop
    python cli.py --service worker
    python cli.py --service init-db
    python cli.py --service token --user-id USER_ID
    python cli.py --service config
"""

import os
import signal
import subprocess
import sys
from pathlib import Path

import click
import structlog

PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from gumboard.backend.core.logging import get_logger, setup_logging


def validate_project_root() -> Path:
    """Validate that we're running from the project root."""
    if not (PROJECT_ROOT / ".project_root").exists():
        click.echo(
            click.style("Error: .project_root not found. Run from project root.", fg="red"),
            err=True,
        )
        sys.exit(1)
    return PROJECT_ROOT


def _find_process_on_port(port: int) -> list[int]:
    """Find PIDs listening on a port."""
    result = subprocess.run(
        ["lsof", "-ti", f":{port}"],
        capture_output=True, text=True,
    )
    pids = result.stdout.strip().split("\n")
    return [int(p) for p in pids if p.strip()]


def _service_stop(logger, service: str, port: int) -> None:
    pids = _find_process_on_port(port)
    if not pids:
        click.echo(f"No {service} running on port {port}.")
        return

    for pid in pids:
        os.kill(pid, signal.SIGINT)
        logger.info("Sent SIGINT", extra={"service": service, "pid": pid, "port": port})

    click.echo(f"{service.title()} on port {port} stopped (PID: {', '.join(str(p) for p in pids)}).")


def _service_status(logger, service: str, port: int) -> None:
    pids = _find_process_on_port(port)
    if pids:
        click.echo(f"{service.title()} is running on port {port} (PID: {', '.join(str(p) for p in pids)}).")
    else:
        click.echo(f"{service.title()} is not running on port {port}.")


def _get_service_port(port: int | None) -> int:
    if port is not None:
        return port
    from gumboard.backend.core.config import get_app_config
    return get_app_config().application.server.port


@click.command()
@click.option(
    "--service", "-s",
    type=click.Choice(["server", "worker", "init-db", "token", "config", "info"]),
    default="info",
    help="Service or command to run.",
)
@click.option(
    "--action", "-a",
    type=click.Choice(["start", "stop", "restart", "status"]),
    default="start",
    help="Lifecycle action for the server.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output (INFO level logging).")
@click.option("--debug", "-d", is_flag=True, help="Enable debug output (DEBUG level logging).")
@click.option("--host", default=None, help="Server host.")
@click.option("--port", default=None, type=int, help="Server port.")
@click.option("--reload", is_flag=True, help="Enable auto-reload (server only).")
@click.option("--workers", default=1, type=int, help="Number of worker processes.")
@click.option("--user-id", default=None, help="User id to mint a token for (token only).")
def main(
    service: str,
    action: str,
    verbose: bool,
    debug: bool,
    host: str | None,
    port: int | None,
    reload: bool,
    workers: int,
    user_id: str | None,
) -> None:
    """
    Gumboard service launcher.

    \b
    Examples:
        python cli.py --service server --verbose
        python cli.py --service server --action status
        python cli.py --service worker --workers 2
        python cli.py --service init-db
        python cli.py --service token --user-id 0b6f...
        python cli.py --service config
    """
    validate_project_root()

    if debug:
        log_level = "DEBUG"
    elif verbose:
        log_level = "INFO"
    else:
        log_level = "WARNING"

    setup_logging(level=log_level, format_type="console")
    structlog.contextvars.bind_contextvars(source="cli")
    logger = get_logger(__name__)

    logger.debug("CLI invoked", extra={"service": service, "action": action, "log_level": log_level})

    if service == "server" and action != "start":
        service_port = _get_service_port(port)
        if action == "stop":
            _service_stop(logger, service, service_port)
            return
        elif action == "status":
            _service_status(logger, service, service_port)
            return
        elif action == "restart":
            _service_stop(logger, service, service_port)
            import time
            time.sleep(2)

    if service == "server":
        run_server(logger, host, port, reload)
    elif service == "worker":
        run_worker(logger, workers)
    elif service == "init-db":
        init_db(logger)
    elif service == "token":
        issue_token(logger, user_id)
    elif service == "config":
        show_config(logger)
    elif service == "info":
        show_info(logger)


def run_server(logger, host: str | None, port: int | None, reload: bool) -> None:
    """Start the FastAPI server with uvicorn."""
    from gumboard.backend.core.config import get_app_config

    try:
        server_config = get_app_config().application.server
    except Exception as e:
        logger.error("Failed to load configuration.", extra={"error": str(e)})
        click.echo(
            click.style("Error: Could not load config/settings/application.yaml.", fg="red"),
            err=True,
        )
        sys.exit(1)

    server_host = host or server_config.host
    server_port = port or server_config.port

    logger.info("Starting server", extra={"host": server_host, "port": server_port, "reload": reload})

    cmd = [
        sys.executable, "-m", "uvicorn",
        "gumboard.backend.main:app",
        "--host", server_host,
        "--port", str(server_port),
    ]
    if reload:
        cmd.append("--reload")

    click.echo(f"Starting server at http://{server_host}:{server_port}")
    click.echo("Press Ctrl+C to stop\n")

    try:
        subprocess.run(cmd, check=True)
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except subprocess.CalledProcessError as e:
        logger.error("Server failed to start", extra={"exit_code": e.returncode})
        sys.exit(e.returncode)


def run_worker(logger, workers: int) -> None:
    """Start the Taskiq worker that delivers queued notifications."""
    logger.info("Starting notification worker", extra={"workers": workers})

    try:
        from gumboard.backend.core.config import get_redis_url
        redis_url = get_redis_url()
        logger.debug("Redis configured", extra={"redis_url": redis_url.split("@")[-1]})
    except Exception as e:
        logger.error("Failed to load Redis configuration.", extra={"error": str(e)})
        click.echo(click.style(f"Error: Redis not configured: {e}", fg="red"), err=True)
        sys.exit(1)

    cmd = [
        sys.executable, "-m", "taskiq",
        "worker",
        "gumboard.backend.tasks.worker:broker",
        "--workers", str(workers),
    ]

    click.echo(f"Starting Taskiq worker with {workers} worker(s)")
    click.echo("Press Ctrl+C to stop\n")

    try:
        subprocess.run(cmd, check=True)
    except KeyboardInterrupt:
        logger.info("Worker stopped")
    except subprocess.CalledProcessError as e:
        logger.error("Worker failed to start", extra={"exit_code": e.returncode})
        sys.exit(e.returncode)


def init_db(logger) -> None:
    """Create any missing tables from the models."""
    import asyncio

    from gumboard.backend.core.database import get_engine
    from gumboard.backend.models import Base

    async def _create() -> None:
        engine = get_engine()
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        await engine.dispose()

    try:
        asyncio.run(_create())
    except Exception as e:
        logger.error("Failed to create tables", extra={"error": str(e)})
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)

    click.echo(click.style("Database tables created.", fg="green"))
    logger.info("Database tables created", extra={"tables": sorted(Base.metadata.tables)})


def issue_token(logger, user_id: str | None) -> None:
    """Print a signed access token for a user id."""
    if not user_id:
        click.echo(click.style("Error: --user-id is required for token.", fg="red"), err=True)
        sys.exit(1)

    from gumboard.backend.core.security import create_access_token

    click.echo(create_access_token({"sub": user_id}))
    logger.info("Access token issued", extra={"user_id": user_id})


def _echo_section(title: str, values: dict, indent: int = 2) -> None:
    click.echo(f"\n{title}:")
    click.echo("-" * 40)
    _echo_values(values, indent)


def _echo_values(values: dict, indent: int) -> None:
    pad = " " * indent
    for key, value in values.items():
        if isinstance(value, dict):
            click.echo(f"{pad}{key}:")
            _echo_values(value, indent + 2)
        else:
            click.echo(f"{pad}{key}: {value}")


def show_config(logger) -> None:
    """Display loaded configuration (secrets are never shown)."""
    click.echo("Application Configuration:")

    try:
        from gumboard.backend.core.config import get_app_config

        app_config = get_app_config()
        _echo_section("Application (application.yaml)", app_config.application.model_dump())
        _echo_section("Database (database.yaml)", app_config.database.model_dump())
        _echo_section("Logging (logging.yaml)", app_config.logging.model_dump())
        _echo_section("Feature Flags (features.yaml)", app_config.features.model_dump())
        _echo_section("Notifications (notifications.yaml)", app_config.notifications.model_dump())

        logger.info("Configuration displayed successfully")

    except Exception as e:
        logger.error("Failed to load configuration", extra={"error": str(e)})
        click.echo(click.style(f"Error loading configuration: {e}", fg="red"))
        sys.exit(1)


def show_info(logger) -> None:
    """Display application information."""
    try:
        from gumboard.backend.core.config import get_app_config
        app_settings = get_app_config().application
    except Exception as e:
        logger.error("Failed to load application configuration", extra={"error": str(e)})
        click.echo(click.style("Error: Could not load application.yaml configuration.", fg="red"), err=True)
        sys.exit(1)

    click.echo(f"{app_settings.name} {app_settings.version}")
    click.echo("=" * 40)
    click.echo(app_settings.description)
    click.echo()
    click.echo("Services (--service):")
    click.echo("  server         FastAPI server")
    click.echo("  worker         Taskiq worker for queued notifications")
    click.echo("  init-db        Create database tables")
    click.echo("  token          Mint an access token (--user-id)")
    click.echo("  config         Display configuration")
    click.echo("  info           Show this information")
    click.echo()
    click.echo("Lifecycle actions (--action, server only):")
    click.echo("  start | stop | restart | status")
    click.echo()
    click.echo("Client:")
    click.echo("  gumboard notes list BOARD_ID")
    click.echo("  gumboard notes create BOARD_ID --item \"Buy milk\"")

    logger.debug("Info displayed")


if __name__ == "__main__":
    main()
