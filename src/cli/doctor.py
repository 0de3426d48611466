"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio
from uuid import UUID

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from adapters.http_client import build_async_client
from adapters.token_providers import StaticTokenProviderFactory
from core.config import CprSettings, load_settings, write_user_env_vars
from core.errors import CprError
from core.services.cpr_client import CprClient

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


def _load_settings() -> CprSettings:
    try:
        return load_settings()
    except CprError as exc:
        _console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=2) from exc


async def _check_service(settings: CprSettings) -> tuple[bool, str]:
    """Call the configuration discovery endpoint, the cheapest authenticated call."""

    try:
        async with build_async_client(settings) as http_client:
            client = CprClient(
                http_client,
                StaticTokenProviderFactory.from_settings(settings),
                settings.to_options(),
            )
            configurations = await client.get_all_cpr_configurations()
        return True, f"{len(configurations)} configuration(s) visible"
    except Exception as exc:
        return False, escape(str(exc))


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = _load_settings()

    table = Table(title="CPR Client Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    ready = True
    for label, value in (
        ("Subscription id", settings.subscription_id),
        ("CPR configuration id", settings.cpr_configuration_id),
    ):
        if value is None:
            ready = False
            table.add_row(label, "MISSING", "Run `cpr doctor setup`")
        else:
            table.add_row(label, "OK", str(value))
    table.add_row("Service URI", "OK", settings.cpr_service_uri)

    if settings.access_token:
        table.add_row("Access token", "OK", "Bearer token configured")
    else:
        ready = False
        table.add_row("Access token", "MISSING", "Set CPR_ACCESS_TOKEN")

    # Connectivity (only with a complete configuration)
    if ready:
        ok_service, detail_service = asyncio.run(_check_service(settings))
        table.add_row("CPR service", "OK" if ok_service else "FAIL", detail_service)
    else:
        table.add_row("CPR service", "SKIPPED", "Configuration incomplete")

    _console.print(table)


@app.command(name="setup")
def setup() -> None:
    """Interactive setup (stores config in the user config .env)."""

    current = _load_settings()

    subscription_id = typer.prompt(
        "Logic subscription id",
        default=str(current.subscription_id or ""),
        show_default=bool(current.subscription_id),
    ).strip()
    configuration_id = typer.prompt(
        "CPR configuration id",
        default=str(current.cpr_configuration_id or ""),
        show_default=bool(current.cpr_configuration_id),
    ).strip()
    service_uri = typer.prompt("CPR service URI", default=current.cpr_service_uri).strip()
    access_token = typer.prompt("Access token", hide_input=True, confirmation_prompt=False).strip()

    try:
        UUID(subscription_id)
        UUID(configuration_id)
    except ValueError as exc:
        raise typer.BadParameter("subscription id and configuration id must be UUIDs") from exc

    env_path = write_user_env_vars(
        {
            "CPR_SUBSCRIPTION_ID": subscription_id,
            "CPR_CPR_CONFIGURATION_ID": configuration_id,
            "CPR_CPR_SERVICE_URI": service_uri,
            "CPR_ACCESS_TOKEN": access_token,
        }
    )

    _console.print(f"[green]Saved CPR config to:[/green] {env_path}")
