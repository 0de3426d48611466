"""UI components for the CLI (Rich).

Why separate components:
- Keeps command logic apart from visual details.
- Lets several commands reuse the same tables/panels.
"""

from __future__ import annotations

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import (
    CitizenDetailedResponse,
    CitizenEvent,
    CitizenResponse,
    CprProviderConfigurationModel,
)


def _value(value: object) -> str:
    return "-" if value is None else str(value)


def build_citizen_panel(citizen: CitizenResponse) -> Panel:
    """Panel with the known fields of a citizen record."""

    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold cyan", no_wrap=True)
    table.add_column(style="white")

    name = " ".join(
        part
        for part in (
            citizen.first_name,
            getattr(citizen, "middle_name", None),
            citizen.last_name,
        )
        if part
    )
    table.add_row("CPR", _value(citizen.cpr))
    table.add_row("Id", _value(citizen.id))
    table.add_row("Name", name or "-")
    table.add_row("Date of birth", _value(citizen.date_of_birth))
    table.add_row("Gender", _value(citizen.gender))
    table.add_row("Status", _value(citizen.status))

    if citizen.address is not None:
        address = citizen.address
        street = " ".join(p for p in (address.street_name, address.house_number) if p)
        city = " ".join(p for p in (address.postal_code, address.city) if p)
        table.add_row("Address", ", ".join(p for p in (street, city) if p) or "-")

    if isinstance(citizen, CitizenDetailedResponse):
        table.add_row("Civil status", _value(citizen.civil_status))
        table.add_row("Citizenship", _value(citizen.citizenship))
        table.add_row("Place of birth", _value(citizen.place_of_birth))
        table.add_row("Deceased", _value(citizen.deceased_date))
        table.add_row("Protected", _value(citizen.name_and_address_protection))

    return Panel(table, title=Text("Citizen", style="bold yellow"), border_style="yellow")


def build_configurations_table(configurations: list[CprProviderConfigurationModel]) -> Table:
    table = Table(title="CPR Configurations")
    table.add_column("Id", style="cyan", no_wrap=True)
    table.add_column("Name", style="white")
    table.add_column("Provider", style="green")
    table.add_column("Environment", style="magenta")
    for configuration in configurations:
        table.add_row(
            _value(configuration.id),
            _value(configuration.name),
            _value(configuration.provider),
            _value(configuration.environment),
        )
    return table


def build_events_table(events: list[CitizenEvent], *, title: str = "Citizen Events") -> Table:
    table = Table(title=title)
    table.add_column("Date", style="cyan", no_wrap=True)
    table.add_column("Type", style="green")
    table.add_column("CPR", style="white")
    table.add_column("Id", style="dim")
    for event in events:
        table.add_row(
            _value(event.event_date),
            _value(event.event_type),
            _value(event.cpr),
            _value(event.id),
        )
    return table
