"""CLI commands for API key management."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import orjson
import typer
from rich.console import Console
from rich.table import Table

from devblog_api.auth.api_keys import APIKeyCreate, APIKeyInfo, APIKeyManager
from devblog_api.config.settings import get_settings
from devblog_api.db import close_db, init_db
from devblog_api.db.models import ApiKey
from devblog_api.db.repositories import ProfileRepository
from devblog_api.exceptions import APIKeyNotFoundError, ProfileNotFoundError


app = typer.Typer(name="keys", help="API key management")

console = Console()

T = TypeVar("T")


def run_with_db(operation: Callable[[APIKeyManager], Awaitable[T]]) -> T:
    """Open the configured database, run `operation`, then close it."""
    settings = get_settings()
    manager = APIKeyManager(settings=settings.gate)

    async def _main() -> T:
        await init_db(settings.database.url, echo=settings.database.echo)
        try:
            return await operation(manager)
        finally:
            await close_db()

    return asyncio.run(_main())


def _print_secret(key: ApiKey, token: str, title: str) -> None:
    console.print()
    console.print(f"[green]{title}[/green]")
    console.print()
    console.print(f"[bold]Key ID:[/bold] {key.id}")
    console.print(f"[bold]Name:[/bold] {key.name}")
    console.print(f"[bold]Rate limit:[/bold] {key.rate_limit}")
    console.print()
    console.print("[yellow]Save this key - it will not be shown again:[/yellow]")
    console.print()
    console.print(f"[bold cyan]{token}[/bold cyan]", soft_wrap=True)
    console.print()


@app.command(name="create")
def create_key(
    username: str = typer.Option(..., "--username", "-u", help="Owning username"),
    name: str = typer.Option(..., "--name", "-n", help="Key label"),
    rate_limit: int | None = typer.Option(
        None, "--rate-limit", "-r", min=1, help="Request quota for the key"
    ),
) -> None:
    """Create a new API key for a user."""

    async def _create(manager: APIKeyManager) -> tuple[ApiKey, str]:
        profile = await ProfileRepository().get_by_username(username)
        if profile is None:
            raise ProfileNotFoundError(username)
        return await manager.create_key(
            APIKeyCreate(user_id=profile.id, name=name, rate_limit=rate_limit)
        )

    try:
        key, token = run_with_db(_create)
    except ProfileNotFoundError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1) from e

    _print_secret(key, token, "API key created successfully!")


@app.command(name="list")
def list_keys(
    username: str | None = typer.Option(
        None, "--username", "-u", help="Only keys of this user"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
) -> None:
    """List API keys."""

    async def _list(manager: APIKeyManager) -> list[ApiKey]:
        user_id = None
        if username:
            profile = await ProfileRepository().get_by_username(username)
            if profile is None:
                raise ProfileNotFoundError(username)
            user_id = profile.id
        return await manager.list_keys(user_id)

    try:
        keys = run_with_db(_list)
    except ProfileNotFoundError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1) from e

    infos = [APIKeyInfo.model_validate(key) for key in keys]

    if as_json:
        typer.echo(
            orjson.dumps(
                [info.model_dump() for info in infos], option=orjson.OPT_INDENT_2
            ).decode()
        )
        return

    if not infos:
        console.print("[yellow]No API keys found.[/yellow]")
        return

    table = Table(title="API Keys")
    table.add_column("Key ID", style="cyan")
    table.add_column("Name")
    table.add_column("Preview")
    table.add_column("Usage", justify="right")
    table.add_column("Last used")
    table.add_column("Created")
    table.add_column("Status")

    for info in infos:
        status = "[green]Active[/green]" if info.is_active else "[red]Inactive[/red]"
        table.add_row(
            info.id,
            info.name,
            info.key_preview,
            f"{info.usage_count}/{info.rate_limit}",
            info.last_used_at.strftime("%Y-%m-%d %H:%M") if info.last_used_at else "-",
            info.created_at.strftime("%Y-%m-%d"),
            status,
        )

    console.print(table)


@app.command(name="regenerate")
def regenerate_key(
    key_id: str = typer.Option(..., "--key-id", "-k", help="Key ID to regenerate"),
) -> None:
    """Issue a new secret for a key; the old one stops working."""
    try:
        key, token = run_with_db(lambda manager: manager.regenerate_key(key_id))
    except APIKeyNotFoundError as e:
        console.print(f"[red]Key {key_id} not found.[/red]")
        raise typer.Exit(1) from e

    _print_secret(key, token, "API key regenerated; usage has been reset.")


def _set_active(key_id: str, active: bool) -> None:
    try:
        run_with_db(lambda manager: manager.set_active(key_id, active))
    except APIKeyNotFoundError as e:
        console.print(f"[red]Key {key_id} not found.[/red]")
        raise typer.Exit(1) from e

    state = "activated" if active else "deactivated"
    console.print(f"[green]Key {key_id} has been {state}.[/green]")


@app.command(name="deactivate")
def deactivate_key(
    key_id: str = typer.Option(..., "--key-id", "-k", help="Key ID to deactivate"),
) -> None:
    """Deactivate a key without deleting it."""
    _set_active(key_id, False)


@app.command(name="activate")
def activate_key(
    key_id: str = typer.Option(..., "--key-id", "-k", help="Key ID to activate"),
) -> None:
    """Reactivate a deactivated key."""
    _set_active(key_id, True)


@app.command(name="reset-usage")
def reset_usage(
    key_id: str = typer.Option(..., "--key-id", "-k", help="Key ID to reset"),
) -> None:
    """Reset a key's usage counter to zero."""
    try:
        run_with_db(lambda manager: manager.reset_usage(key_id))
    except APIKeyNotFoundError as e:
        console.print(f"[red]Key {key_id} not found.[/red]")
        raise typer.Exit(1) from e

    console.print(f"[green]Usage of key {key_id} has been reset.[/green]")


@app.command(name="delete")
def delete_key(
    key_id: str = typer.Option(..., "--key-id", "-k", help="Key ID to delete"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
) -> None:
    """Permanently delete an API key."""
    if not force:
        confirm = typer.confirm(f"Permanently delete key {key_id}?")
        if not confirm:
            raise typer.Abort()

    if run_with_db(lambda manager: manager.delete_key(key_id)):
        console.print(f"[green]Key {key_id} has been deleted.[/green]")
    else:
        console.print(f"[red]Key {key_id} not found.[/red]")
        raise typer.Exit(1)
