"""``hintscan presets`` -- List built-in presets and installed plugins.

Exit Codes:
    0 -- Always (informational command).
"""

from __future__ import annotations

import click

from hintscan.cli.output import print_presets, print_resources
from hintscan.core.engine.presets import BUILTIN_PRESETS
from hintscan.core.engine.resources import installed_resources


@click.command("presets")
@click.option("--plugins/--no-plugins", default=True, help="Also list installed plugins.")
def presets_command(plugins: bool) -> None:
    """List built-in configuration presets and discovered plugins."""
    print_presets(BUILTIN_PRESETS)
    if plugins:
        print_resources(installed_resources())
