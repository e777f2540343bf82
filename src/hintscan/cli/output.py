"""Rich output helpers for the informational hintscan commands.

Analysis results are rendered by the formatters in
``hintscan.core.engine.formatters``; this module covers the rest.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from rich.console import Console
from rich.table import Table
from rich.text import Text

from hintscan.core.engine.presets import normalize_hints
from hintscan.core.telemetry.client import TelemetryClient, TelemetryState

_STATE_STYLES: dict[TelemetryState, str] = {
    TelemetryState.UNINITIALIZED: "dim",
    TelemetryState.DISABLED: "yellow",
    TelemetryState.ENABLED: "bold green",
}

console = Console()


def print_telemetry_status(client: TelemetryClient) -> None:
    """Print the current telemetry state."""
    state = client.state
    label = Text(state.value.upper(), style=_STATE_STYLES[state])
    console.print(Text.assemble("Telemetry: ", label))
    if state is TelemetryState.UNINITIALIZED:
        console.print("[dim]You will be asked on your next analysis.[/dim]")


def print_presets(presets: Mapping[str, Mapping[str, Any]]) -> None:
    """Print one row per preset: connector, hint count, formatters."""
    table = Table(title="Built-in presets", show_header=True, header_style="bold")
    table.add_column("Preset", style="bold")
    table.add_column("Connector")
    table.add_column("Hints", justify="right")
    table.add_column("Formatters", style="dim")

    for name, preset in sorted(presets.items()):
        connector = preset.get("connector")
        if isinstance(connector, Mapping):
            connector = connector.get("name")
        hints = normalize_hints(preset.get("hints"))
        formatters = ", ".join(preset.get("formatters") or []) or "-"
        table.add_row(name, str(connector or "-"), str(len(hints)), formatters)

    console.print(table)


def print_resources(resources: Mapping[str, list[str]]) -> None:
    """Print discovered plugin names grouped by kind."""
    table = Table(title="Installed plugins", show_header=True, header_style="bold")
    table.add_column("Kind", style="bold")
    table.add_column("Names")

    for kind, names in sorted(resources.items()):
        table.add_row(kind, ", ".join(names) if names else Text("none", style="dim"))

    console.print(table)
