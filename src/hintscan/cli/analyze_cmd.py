"""``hintscan analyze`` -- Analyze URLs or local paths.

Exit Codes:
    0 -- Every target was analyzed and no ERROR problem was found.
    1 -- No valid target, configuration or bootstrap failure, an ERROR
         problem, or an exception during the analysis.
"""

from __future__ import annotations

import asyncio
import logging
import sys

import click

from hintscan.core.config.models import CLIOptions
from hintscan.core.orchestrator import analyze

logger = logging.getLogger(__name__)


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@click.command("analyze")
@click.argument("targets", nargs=-1, required=True)
@click.option("--config", "-c", "config_path", default=None, help="Path to a configuration file.")
@click.option("--output", "-o", default=None, help="File the formatters write to.")
@click.option("--formatters", default=None, help="Comma-separated formatter names.")
@click.option("--hints", default=None, help="Comma-separated hint ids to run.")
@click.option("--watch", "-w", is_flag=True, default=False, help="Watch local targets for changes.")
@click.option("--debug", is_flag=True, default=False, help="Verbose logging, no spinner.")
@click.option("--language", "-l", default=None, help="Language for messages (e.g. en-US).")
@click.option(
    "--tracking",
    type=click.Choice(["on", "off"]),
    default=None,
    help="Enable or disable telemetry and remember the choice.",
)
def analyze_command(
    targets: tuple[str, ...],
    config_path: str | None,
    output: str | None,
    formatters: str | None,
    hints: str | None,
    watch: bool,
    debug: bool,
    language: str | None,
    tracking: str | None,
) -> None:
    """Analyze TARGETS (URLs or local paths) and report problems.

    Examples:

        hintscan analyze https://example.com

        hintscan analyze ./dist --hints doctype,meta-viewport

        hintscan analyze https://example.com --formatters json -o out.jsonl
    """
    _configure_logging(debug)
    options = CLIOptions(
        targets=list(targets),
        config=config_path,
        output=output,
        formatters=formatters,
        hints=hints,
        watch=watch,
        debug=debug,
        language=language,
        tracking=tracking,
    )
    ok = asyncio.run(analyze(options))
    logger.debug("Analysis %s", "succeeded" if ok else "failed")
    sys.exit(0 if ok else 1)
