"""`cpr` command line.

Thin layer over `CprClient`: builds the transport and the token factory
from `CprSettings`, runs one operation and renders the result with Rich.

Exit codes:
- 0: success
- 1: not found / the service refused a subscription change
- 2: configuration, credential or transport error
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, TypeVar
from uuid import UUID

import httpx
import typer
from pydantic import BaseModel
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from adapters.http_client import build_async_client
from adapters.token_providers import StaticTokenProviderFactory
from cli import doctor
from cli.ui_components import (
    build_citizen_panel,
    build_configurations_table,
    build_events_table,
)
from core.config import CprSettings, load_settings
from core.errors import CprError
from core.services.cpr_client import CprClient

T = TypeVar("T")

app = typer.Typer(no_args_is_help=True, help="Query the CPR register through the Logic platform.")
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=_err_console, show_path=False)],
        force=True,
    )


async def run_with_client(settings: CprSettings, action: Callable[[CprClient], Awaitable[T]]) -> T:
    options = settings.to_options()
    async with build_async_client(settings) as http_client:
        client = CprClient(http_client, StaticTokenProviderFactory.from_settings(settings), options)
        return await action(client)


def _settings_or_exit() -> CprSettings:
    try:
        return load_settings()
    except CprError as exc:
        _err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=2) from exc


def _execute(action: Callable[[CprClient], Awaitable[T]]) -> T:
    try:
        settings = load_settings()
        return asyncio.run(run_with_client(settings, action))
    except CprError as exc:
        _err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=2) from exc
    except httpx.HTTPError as exc:
        _err_console.print(f"[red]Transport error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=2) from exc


def _print_json(payload: Any) -> None:
    if isinstance(payload, BaseModel):
        data = payload.model_dump(mode="json", by_alias=True)
    elif isinstance(payload, list):
        data = [item.model_dump(mode="json", by_alias=True) for item in payload]
    else:
        data = payload
    _console.print_json(data=data)


def _not_found(what: str) -> typer.Exit:
    _err_console.print(f"[yellow]{what} not found.[/yellow]")
    return typer.Exit(code=1)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log HTTP calls (DEBUG)."),
) -> None:
    configure_logging("DEBUG" if verbose else _settings_or_exit().log_level)


@app.command()
def citizen(
    cpr: str = typer.Argument(..., help="CPR number."),
    details: bool = typer.Option(False, "--details", help="Fetch the detailed record."),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON."),
) -> None:
    """Look up a citizen by CPR number."""

    if details:
        result = _execute(lambda client: client.get_citizen_details_by_cpr(cpr))
    else:
        result = _execute(lambda client: client.get_citizen_by_cpr(cpr))

    if result is None:
        raise _not_found(f"Citizen {cpr}")
    if as_json:
        _print_json(result)
    else:
        _console.print(build_citizen_panel(result))


@app.command(name="citizen-id")
def citizen_id(
    id: UUID = typer.Argument(..., help="CPR person identifier."),
    details: bool = typer.Option(False, "--details", help="Fetch the detailed record."),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON."),
) -> None:
    """Look up a citizen by identifier."""

    if details:
        result = _execute(lambda client: client.get_citizen_details_by_id(id))
    else:
        result = _execute(lambda client: client.get_citizen_by_id(id))

    if result is None:
        raise _not_found(f"Citizen {id}")
    if as_json:
        _print_json(result)
    else:
        _console.print(build_citizen_panel(result))


@app.command()
def configurations(
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON."),
) -> None:
    """List the CPR configurations of the subscription."""

    result = _execute(lambda client: client.get_all_cpr_configurations())
    if as_json:
        _print_json(result)
    else:
        _console.print(build_configurations_table(result))


def _change_subscription(cpr: str | None, id: UUID | None, *, subscribe: bool) -> None:
    if (cpr is None) == (id is None):
        raise typer.BadParameter("Pass either a CPR number or --id.")

    if id is not None:
        target = str(id)
        action = (lambda client: client.subscribe_by_id(id)) if subscribe else (
            lambda client: client.unsubscribe_by_id(id)
        )
    else:
        target = cpr
        action = (lambda client: client.subscribe_by_cpr(cpr)) if subscribe else (
            lambda client: client.unsubscribe_by_cpr(cpr)
        )

    verb = "Subscribed to" if subscribe else "Unsubscribed from"
    if _execute(action):
        _console.print(f"[green]{verb} events for {target}.[/green]")
        return
    _err_console.print(f"[yellow]The CPR service refused the change for {target}.[/yellow]")
    raise typer.Exit(code=1)


@app.command()
def subscribe(
    cpr: str | None = typer.Argument(None, help="CPR number."),
    id: UUID | None = typer.Option(None, "--id", help="CPR person identifier."),
) -> None:
    """Subscribe to events for a citizen."""

    _change_subscription(cpr, id, subscribe=True)


@app.command()
def unsubscribe(
    cpr: str | None = typer.Argument(None, help="CPR number."),
    id: UUID | None = typer.Option(None, "--id", help="CPR person identifier."),
) -> None:
    """Unsubscribe from events for a citizen."""

    _change_subscription(cpr, id, subscribe=False)


@app.command()
def events(
    date_from: datetime = typer.Option(..., "--from", help="Query events from this date/time."),
    date_to: datetime = typer.Option(..., "--to", help="Query events to this date/time."),
    page: int = typer.Option(1, "--page", min=1, help="Page number, starting at 1."),
    page_size: int = typer.Option(100, "--page-size", min=1, help="Results per page."),
    subscribed: bool = typer.Option(False, "--subscribed", help="Only subscribed citizens."),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON."),
) -> None:
    """List citizen events for a period."""

    if subscribed:
        page_result = _execute(
            lambda client: client.get_subscribed_cpr_events(date_from, date_to, page, page_size)
        )
        if page_result is None:
            raise _not_found("Subscribed events")
        if as_json:
            _print_json(page_result)
            return
        title = f"Subscribed Events (page {page}, {page_result.actual_count or 0} of {page_result.total_count or 0})"
        _console.print(build_events_table(page_result.subscribed_events, title=title))
        return

    result = _execute(lambda client: client.get_all_cpr_events(date_from, date_to, page, page_size))
    if result is None:
        raise _not_found("Events")
    if as_json:
        _print_json(result)
    else:
        _console.print(build_events_table(result, title=f"Citizen Events (page {page})"))


def run() -> None:
    app()
