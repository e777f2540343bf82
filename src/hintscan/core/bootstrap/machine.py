"""Analyzer Bootstrap State Machine.

Turns (configuration, options, targets) into a ready ``Analyzer``. Each
failed construction is classified by ``AnalyzerError.status``:

    ATTEMPTING --ok--------------------------------> READY
        |--CONFIGURATION_ERROR--> RECOVERING_CONFIG    --accepted--> ATTEMPTING
        |--RESOURCE_ERROR-------> RECOVERING_RESOURCES --installed-> ATTEMPTING
        |--HINT_ERROR-----------> FATAL_HINT
        |--CONNECTOR_ERROR------> FATAL_CONNECTOR
        '--anything else--------> FATAL_OTHER

A refused or failed recovery ends in FATAL_OTHER and re-raises the
original error. Under CI nothing is asked and recovery counts as refused. Each recovery kind is allowed at most ``max_recoveries``
times per bootstrap, and a retry only happens when its input changed
(a different configuration, or packages actually installed), so the loop
always terminates.
"""

from __future__ import annotations

import dataclasses
import importlib
import logging
from collections.abc import Callable, Mapping, Sequence
from enum import Enum

from hintscan.core.bootstrap.installer import Installer
from hintscan.core.config.environment import is_ci
from hintscan.core.config.models import CreateAnalyzerOptions, UserConfig
from hintscan.core.config.resolver import default_configuration
from hintscan.core.engine.analyzer import Analyzer, create_analyzer
from hintscan.core.engine.models import HintResources
from hintscan.core.messages import show_default_config_notice, show_error, show_info
from hintscan.core.prompt import Prompter
from hintscan.core.telemetry.client import TelemetryClient
from hintscan.exceptions import AnalyzerError, AnalyzerErrorStatus, InstallError

logger = logging.getLogger(__name__)

AnalyzerFactory = Callable[[UserConfig, CreateAnalyzerOptions], Analyzer]

DEFAULT_CONFIG_QUESTION = (
    "A valid configuration file can't be found. Do you want to use the "
    "default configuration? To know more about the default configuration "
    "see: https://hintscan.dev/docs/user-guide/#default-configuration"
)


class BootstrapState(Enum):
    """States of the bootstrap state machine."""

    ATTEMPTING = "attempting"
    READY = "ready"
    RECOVERING_CONFIG = "recovering-config"
    RECOVERING_RESOURCES = "recovering-resources"
    FATAL_HINT = "fatal-hint"
    FATAL_CONNECTOR = "fatal-connector"
    FATAL_OTHER = "fatal-other"


def _plural(items: Sequence[str], one: str, many: str) -> str:
    return one if len(items) == 1 else many


def describe_resources(resources: HintResources) -> list[str]:
    """Human-readable lines listing missing and incompatible packages."""
    lines: list[str] = []
    if resources.missing:
        verb = _plural(resources.missing, "package is", "packages are")
        lines.append(f"The following {verb} missing:\n    {', '.join(resources.missing)}")
    if resources.incompatible:
        verb = _plural(resources.incompatible, "package is", "packages are")
        lines.append(f"The following {verb} incompatible:\n    {', '.join(resources.incompatible)}")
    return lines


class AnalyzerBootstrap:
    """Builds an analyzer, recovering from configuration and resource errors.

    Attributes:
        history: Every state entered during the last ``bootstrap`` call.
        config: The configuration the last ready analyzer was built from.
    """

    def __init__(
        self,
        prompter: Prompter,
        installer: Installer,
        telemetry: TelemetryClient,
        *,
        factory: AnalyzerFactory = create_analyzer,
        environ: Mapping[str, str] | None = None,
        max_recoveries: int = 1,
    ) -> None:
        self.prompter = prompter
        self.installer = installer
        self.telemetry = telemetry
        self.factory = factory
        self.environ = environ
        self.ci = is_ci(environ)
        self.max_recoveries = max_recoveries
        self.history: list[BootstrapState] = []
        self.config: UserConfig | None = None
        self._recoveries: dict[AnalyzerErrorStatus, int] = {}

    def _enter(self, state: BootstrapState) -> None:
        logger.debug("Bootstrap state: %s", state.value)
        self.history.append(state)

    def _budget_left(self, status: AnalyzerErrorStatus) -> bool:
        return self._recoveries.get(status, 0) < self.max_recoveries

    def _spend(self, status: AnalyzerErrorStatus) -> None:
        self._recoveries[status] = self._recoveries.get(status, 0) + 1

    async def bootstrap(
        self,
        config: UserConfig,
        options: CreateAnalyzerOptions,
        targets: Sequence[str],
    ) -> Analyzer:
        """Return a ready analyzer or raise the error that ended recovery.

        Raises:
            AnalyzerError: When recovery is refused, fails, or is exhausted,
                and for hint and connector errors.
            Exception: Any unclassified construction error, unchanged.
        """
        self.history = []
        self._recoveries = {}

        while True:
            self._enter(BootstrapState.ATTEMPTING)
            try:
                analyzer = self.factory(config, options)
            except AnalyzerError as error:
                status = error.status
                if status is AnalyzerErrorStatus.CONFIGURATION_ERROR:
                    self._enter(BootstrapState.RECOVERING_CONFIG)
                    replacement = await self._recover_configuration(config, targets)
                    if replacement is None:
                        self._enter(BootstrapState.FATAL_OTHER)
                        raise
                    config = replacement
                    continue

                if status is AnalyzerErrorStatus.RESOURCE_ERROR:
                    self._enter(BootstrapState.RECOVERING_RESOURCES)
                    if not await self._recover_resources(error.resources):
                        self._enter(BootstrapState.FATAL_OTHER)
                        raise
                    # Freshly installed distributions must be visible to entry-point lookup.
                    importlib.invalidate_caches()
                    continue

                if status is AnalyzerErrorStatus.HINT_ERROR:
                    self._enter(BootstrapState.FATAL_HINT)
                    show_error(
                        "Invalid hint configuration in .hintscanrc: "
                        f"{', '.join(error.invalid_hints)}."
                    )
                    raise

                self._enter(BootstrapState.FATAL_CONNECTOR)
                show_error("Invalid connector configuration in .hintscanrc")
                raise
            except Exception as exc:
                self._enter(BootstrapState.FATAL_OTHER)
                logger.error("Failed to create the analyzer: %s", exc, exc_info=True)
                raise

            self._enter(BootstrapState.READY)
            self.config = config
            return analyzer

    async def _recover_configuration(
        self,
        config: UserConfig,
        targets: Sequence[str],
    ) -> UserConfig | None:
        """Offer the default configuration; None means give up."""
        status = AnalyzerErrorStatus.CONFIGURATION_ERROR
        if not self._budget_left(status):
            logger.debug("Default configuration already tried; not asking again")
            return None

        candidate = default_configuration(targets, environ=self.environ, notify=False)
        candidate = dataclasses.replace(candidate, language=config.language)
        if candidate == config:
            logger.debug("The failing configuration is already the default one")
            return None

        if self.ci:
            show_info("Running under CI: not offering the default configuration.")
            return None
        if not await self.prompter.ask(DEFAULT_CONFIG_QUESTION):
            return None

        self._spend(status)
        show_default_config_notice()
        return candidate

    async def _recover_resources(self, resources: HintResources | None) -> bool:
        """Offer to install packages; True means retry with the same config."""
        status = AnalyzerErrorStatus.RESOURCE_ERROR
        if resources is None or resources.is_satisfied:
            return False
        if not self._budget_left(status):
            logger.debug("Packages already installed once; not asking again")
            return False

        if resources.missing:
            self.telemetry.track(
                "cli-missing",
                {"packages": list(resources.missing)},
                {"count": float(len(resources.missing))},
            )
        if resources.incompatible:
            self.telemetry.track(
                "cli-incompatible",
                {"packages": list(resources.incompatible)},
                {"count": float(len(resources.incompatible))},
            )

        for line in describe_resources(resources):
            show_info(line)

        if self.ci:
            show_info("Running under CI: install the packages above and run again.")
            return False

        dependencies = [*resources.incompatible, *resources.missing]
        subject = _plural(dependencies, "is a package", "are packages")
        question = (
            f"There {subject} from your .hintscanrc file not installed or with "
            "an incompatible version. Do you want us to try to install/update them?"
        )
        if not await self.prompter.ask(question):
            return False

        self._spend(status)
        try:
            return (
                await self.installer.install(resources.missing)
                and await self.installer.install(resources.incompatible, upgrade=True)
            )
        except InstallError as exc:
            logger.warning("%s", exc)
            return False
