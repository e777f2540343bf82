"""hintscan CLI: lint web pages and local files with pluggable hints.

Entry point for the ``hintscan`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    analyze    Analyze one or more URLs or local paths.
    telemetry  Show or change the telemetry preference.
    presets    List built-in presets and installed plugins.

Usage::

    hintscan analyze https://example.com
    hintscan analyze ./site --formatters json --output report.json
    hintscan analyze ./site --tracking off
    hintscan telemetry status
    hintscan presets
"""

from __future__ import annotations

import click

from hintscan import __version__
from hintscan.cli.analyze_cmd import analyze_command
from hintscan.cli.presets_cmd import presets_command
from hintscan.cli.telemetry_cmd import telemetry_command


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """hintscan: find accessibility, performance and security issues.

    Resolves your .hintscanrc (or a default configuration), loads the
    configured hints, connector and formatters, and reports every
    problem found in the given targets.
    """


# Register all subcommands
cli.add_command(analyze_command)
cli.add_command(telemetry_command)
cli.add_command(presets_command)
