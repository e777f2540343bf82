"""``hintscan telemetry`` -- Show or change the telemetry preference.

``on`` and ``off`` persist the choice exactly like ``--tracking`` does;
``status`` (the default) prints the current state without changing it.
"""

from __future__ import annotations

import asyncio

import click

from hintscan.cli.output import print_telemetry_status
from hintscan.core.store import ConfigStore
from hintscan.core.telemetry.client import TelemetryClient


@click.command("telemetry")
@click.argument("action", type=click.Choice(["on", "off", "status"]), default="status")
def telemetry_command(action: str) -> None:
    """Enable, disable, or show anonymous usage telemetry.

    Examples:

        hintscan telemetry status

        hintscan telemetry off
    """
    client = TelemetryClient.from_store(ConfigStore())
    if action == "on":
        client.enable()
        # Send the opt-in event right away.
        asyncio.run(client.flush())
    elif action == "off":
        client.disable()
    print_telemetry_status(client)
