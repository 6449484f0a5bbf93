"""GameDesk command-line interface.

Commands:
    list    -- list every game in the remote collection
    show    -- show one game
    create  -- validate and create a game
    delete  -- delete a game after confirmation
    edit    -- autosave FIELD=VALUE edits one field at a time, optionally
               followed by "save all"
    serve   -- run the REST API
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from typing import TypeVar

import click

from gamedesk.client.base import ResourceClient
from gamedesk.client.http import HttpResourceClient
from gamedesk.config import load_config
from gamedesk.errors import GameDeskError, ValidationError
from gamedesk.models.config import GameDeskConfig
from gamedesk.models.games import Game, Platform, to_wire_fields
from gamedesk.models.session import FieldState
from gamedesk.observability.logging import LOG_FORMATS, setup_logging
from gamedesk.sync.events import SyncEvent, SyncEventKind
from gamedesk.sync.loader import open_edit_session
from gamedesk.validation.engine import validate_record

T = TypeVar("T")

_OK_EVENTS = {SyncEventKind.FIELD_SAVED, SyncEventKind.RECORD_SAVED}


def build_client(config: GameDeskConfig) -> ResourceClient:
    return HttpResourceClient.from_config(config.remote)


def _run(config: GameDeskConfig, action: Callable[[ResourceClient], Awaitable[T]]) -> T:
    """Run *action* with a fresh client, turning GameDesk errors into CLI errors."""

    async def runner() -> T:
        client = build_client(config)
        try:
            return await action(client)
        finally:
            await client.close()

    try:
        return asyncio.run(runner())
    except ValidationError as exc:
        raise _validation_failed(exc.errors) from exc
    except GameDeskError as exc:
        raise click.ClickException(str(exc)) from exc


def _validation_failed(errors: Mapping[str, str]) -> click.ClickException:
    for name, message in errors.items():
        click.echo(f"  {name}: {message}", err=True)
    return click.ClickException("Please fix validation errors")


def _format_game(game: Game) -> str:
    released = game.released.isoformat() if game.released else "-"
    return f"{game.id:>6}  {game.name:<32}  {game.platform:<16}  {released}"


def _parse_assignment(text: str) -> tuple[str, str]:
    name, sep, value = text.partition("=")
    if not sep or not name:
        raise click.BadParameter(f"expected FIELD=VALUE, got {text!r}")
    return name.strip(), value


def _print_event(event: SyncEvent) -> None:
    click.secho(event.message, fg="green" if event.kind in _OK_EVENTS else "red", err=event.kind not in _OK_EVENTS)


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"]),
    default=None,
    help="Override GAMEDESK_LOG_LEVEL.",
)
@click.option(
    "--log-format",
    type=click.Choice(LOG_FORMATS),
    default=None,
    help="Override GAMEDESK_LOG_FORMAT.  Commands other than serve default to console.",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None, log_format: str | None) -> None:
    """Browse and edit the remote game collection."""
    config = load_config()
    if log_level:
        config.log.level = log_level
    if log_format:
        config.log.format = log_format
    setup_logging(config.log.level, log_format or "console")
    ctx.obj = config


@cli.command("list")
@click.pass_obj
def list_games(config: GameDeskConfig) -> None:
    """List every game."""

    async def action(client: ResourceClient) -> list[Game]:
        return await client.fetch_all()

    games = _run(config, action)
    if not games:
        click.echo("No games found.")
        return
    for game in games:
        click.echo(_format_game(game))


@cli.command("show")
@click.argument("game_id")
@click.pass_obj
def show_game(config: GameDeskConfig, game_id: str) -> None:
    """Show one game."""

    async def action(client: ResourceClient) -> Game:
        return await client.fetch_one(game_id)

    game = _run(config, action)
    for name, value in game.form_values().items():
        click.echo(f"{name:>10}: {value or '-'}")


@cli.command("create")
@click.option("--name", default="", help="Game name (required).")
@click.option("--platform", default="", help=f"Platform (required): {', '.join(p.value for p in Platform)}.")
@click.option("--released", default="", help="Release date YYYY-MM-DD (required).")
@click.option("--genre", default="", help="Genre (optional).")
@click.option("--developer", default="", help="Developer (optional).")
@click.pass_obj
def create_game(config: GameDeskConfig, **values: str) -> None:
    """Validate and create a game."""
    result = validate_record(values)
    if not result.is_valid:
        raise _validation_failed(result.errors)

    async def action(client: ResourceClient) -> Game:
        return await client.create(to_wire_fields(values))

    game = _run(config, action)
    click.echo(f"Successfully added game: {game.name} (id {game.id})")


@cli.command("delete")
@click.argument("game_id")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation.")
@click.pass_obj
def delete_game(config: GameDeskConfig, game_id: str, yes: bool) -> None:
    """Delete a game."""

    async def fetch(client: ResourceClient) -> Game:
        return await client.fetch_one(game_id)

    game = _run(config, fetch)
    if not yes and not click.confirm(f'Are you sure you want to delete "{game.name}"?'):
        click.echo("Aborted.")
        return

    async def delete(client: ResourceClient) -> None:
        await client.delete(game_id)

    _run(config, delete)
    click.echo(f"Successfully deleted game: {game.name}")


@cli.command("edit")
@click.argument("game_id")
@click.argument("assignments", nargs=-1, required=True)
@click.option("--save-all", is_flag=True, help="After autosaving, save the whole record and exit.")
@click.pass_obj
def edit_game(config: GameDeskConfig, game_id: str, assignments: tuple[str, ...], save_all: bool) -> None:
    """Autosave FIELD=VALUE edits, one field at a time."""
    edits = [_parse_assignment(item) for item in assignments]

    async def action(client: ResourceClient) -> tuple[int, bool]:
        controller = await open_edit_session(client, game_id, listeners=[_print_event])
        clean = True
        try:
            for name, value in edits:
                state = await controller.edit(name, value)
                clean = clean and state is FieldState.COMMITTED
            if save_all:
                await controller.save_all()
            return controller.ledger.count, clean
        finally:
            controller.close()

    count, clean = _run(config, action)
    click.echo(f"Total changes made: {count}")
    if not clean:
        raise click.exceptions.Exit(1)


@cli.command("serve")
@click.pass_obj
def serve(config: GameDeskConfig) -> None:
    """Run the REST API until interrupted."""
    from gamedesk import app

    asyncio.run(app.main(config))
