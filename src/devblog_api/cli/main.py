"""Command line entry point for the DevBlog API server."""

import asyncio
import os
from typing import Any

import orjson
import typer
import uvicorn
from rich.console import Console
from structlog import get_logger

from devblog_api import __version__
from devblog_api.cli.commands import api_keys
from devblog_api.config.settings import CONFIG_OVERRIDES_ENV, get_settings
from devblog_api.core.logging import setup_logging
from devblog_api.db import close_db, init_db
from devblog_api.exceptions import ConfigurationError


app = typer.Typer(
    name="devblog-api",
    help="DevBlog public API server and key management",
    no_args_is_help=True,
)
app.add_typer(api_keys.app, name="keys")

console = Console()
logger = get_logger(__name__)


def version_callback(value: bool) -> None:
    if value:
        console.print(f"devblog-api {__version__}")
        raise typer.Exit()


@app.callback()
def app_main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """DevBlog API command line."""
    # Key management stays quiet; `serve` reconfigures from settings
    setup_logging(log_level_name="WARNING")


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="Interface to bind"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port to bind"),
    reload: bool | None = typer.Option(
        None, "--reload/--no-reload", help="Restart on code changes"
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="Log level"),
) -> None:
    """Run the API server with uvicorn."""
    server_overrides: dict[str, Any] = {
        key: value
        for key, value in {
            "host": host,
            "port": port,
            "reload": reload,
            "log_level": log_level,
        }.items()
        if value is not None
    }
    # uvicorn builds the app in its own process on reload
    os.environ[CONFIG_OVERRIDES_ENV] = orjson.dumps(
        {"server": server_overrides}
    ).decode()

    try:
        settings = get_settings()
    except ConfigurationError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1) from e

    setup_logging(
        json_logs=settings.server.json_logs,
        log_level_name=settings.server.log_level,
        log_file=settings.server.log_file,
    )
    logger.info(
        "cli_serve",
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.server.reload,
    )

    uvicorn.run(
        "devblog_api.api.app:create_app",
        factory=True,
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.server.reload,
        log_config=None,
    )


@app.command(name="init-db")
def init_database() -> None:
    """Create the database tables if they do not exist."""
    settings = get_settings()

    async def _init() -> None:
        await init_db(settings.database.url, echo=settings.database.echo)
        await close_db()

    asyncio.run(_init())
    console.print(f"[green]Database ready:[/green] {settings.database.url}")


def main() -> None:
    app()
