"""Top-level analysis run: CLI options in, success flag out.

``analyze`` wires the resolver, the bootstrap state machine, the reporter
and the telemetry gate together. Collaborators come from ``Services`` so
tests can swap any of them without patching module globals.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from hintscan.core.bootstrap.installer import Installer, PipInstaller
from hintscan.core.bootstrap.machine import AnalyzerBootstrap, AnalyzerFactory
from hintscan.core.config.models import CLIOptions, CreateAnalyzerOptions
from hintscan.core.config.resolver import resolve
from hintscan.core.config.targets import get_as_uris
from hintscan.core.engine.analyzer import create_analyzer
from hintscan.core.messages import show_error
from hintscan.core.prompt import ConsolePrompter, Prompter
from hintscan.core.reporter.progress import Spinner
from hintscan.core.reporter.reporter import ScanReporter
from hintscan.core.store import ConfigStore
from hintscan.core.telemetry.client import TelemetryClient
from hintscan.core.telemetry.gate import TelemetryGate
from hintscan.exceptions import (
    AnalyzerError,
    AnalyzerErrorStatus,
    ConfigurationFileError,
    UsageError,
)

logger = logging.getLogger(__name__)

_UNREPORTED = frozenset({
    AnalyzerErrorStatus.CONFIGURATION_ERROR,
    AnalyzerErrorStatus.RESOURCE_ERROR,
})


@dataclass
class Services:
    """Process-wide collaborators of one analysis run.

    Attributes:
        store: Persistent key-value store (consent, first-run marker).
        telemetry: Telemetry client built from ``store``.
        prompter: Yes/no question asker shared by bootstrap and the gate.
        installer: Plugin package installer.
        factory: Analyzer constructor.
        environ: Environment mapping.
        cwd: Directory searched first for configuration files.
        home: Directory searched second for configuration files.
    """

    store: ConfigStore = field(default_factory=ConfigStore)
    telemetry: TelemetryClient | None = None
    prompter: Prompter = field(default_factory=ConsolePrompter)
    installer: Installer = field(default_factory=PipInstaller)
    factory: AnalyzerFactory = create_analyzer
    environ: Mapping[str, str] = field(default_factory=lambda: dict(os.environ))
    cwd: Path | None = None
    home: Path | None = None

    def __post_init__(self) -> None:
        if self.telemetry is None:
            self.telemetry = TelemetryClient.from_store(self.store)


async def analyze(cli_options: CLIOptions, services: Services | None = None) -> bool:
    """Run one analysis; return True when it succeeded.

    No targets means no work: False is returned before any configuration
    is read or any prompt is shown. Buffered telemetry is always flushed.
    """
    targets = get_as_uris(cli_options.targets)
    if not targets:
        logger.debug("No valid targets in %r", cli_options.targets)
        return False

    services = services or Services()
    telemetry = services.telemetry or TelemetryClient.from_store(services.store)

    gate = TelemetryGate(
        telemetry,
        services.store,
        services.prompter,
        tracking=cli_options.tracking,
        environ=services.environ,
    )
    gate.apply_tracking_preference()

    try:
        return await _run(cli_options, targets, services, telemetry, gate)
    finally:
        await telemetry.flush()


async def _run(
    cli_options: CLIOptions,
    targets: list[str],
    services: Services,
    telemetry: TelemetryClient,
    gate: TelemetryGate,
) -> bool:
    try:
        config = resolve(
            cli_options,
            targets,
            environ=services.environ,
            cwd=services.cwd,
            home=services.home,
        )
    except (UsageError, ConfigurationFileError) as exc:
        show_error(str(exc))
        logger.debug("Configuration could not be resolved", exc_info=True)
        return False

    bootstrap = AnalyzerBootstrap(
        services.prompter,
        services.installer,
        telemetry,
        factory=services.factory,
        environ=services.environ,
    )
    try:
        analyzer = await bootstrap.bootstrap(
            config, CreateAnalyzerOptions.from_cli(cli_options), targets,
        )
    except AnalyzerError as exc:
        # Hint and connector errors were already reported by the bootstrap.
        if exc.status in _UNREPORTED:
            show_error(str(exc))
        logger.debug("Analyzer bootstrap failed with %s", exc.status.value)
        return False
    except Exception:
        # Already logged with its traceback by the bootstrap.
        return False

    reporter = ScanReporter(gate, spinner=Spinner(enabled=not cli_options.debug))
    return await reporter.run(analyzer, targets, cli_options, bootstrap.config)
