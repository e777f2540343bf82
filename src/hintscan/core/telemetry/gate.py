"""Telemetry Gate: consent handling and the run-summary event.

Per successful run, ``TelemetryGate.send_if_enabled``:

0. Applies a forced preference (``--tracking`` or ``HINTSCAN_TRACKING``).
1. Marks the first run in the store. The first run never prompts.
2. If consent was never recorded: under CI prints a notice and keeps
   telemetry off for this run; otherwise, on a repeat run, asks.
3. Stops if telemetry is disabled.
4. Tracks ``cli-analyze`` with a pruned view of the configuration.

Only names and numbers leave the process. ``prune_user_config`` keeps
preset, connector, formatter and parser names, the hint-id -> severity
map without options, the timeout, the language and browserslist
queries. Target URLs, paths, connector options and hint options are
never included.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from hintscan.core.config.environment import is_ci, tracking_preference
from hintscan.core.config.models import UserConfig
from hintscan.core.engine.presets import hint_severity, hints_from_configuration
from hintscan.core.messages import show_ci_telemetry_notice, show_telemetry_notice
from hintscan.core.prompt import Prompter
from hintscan.core.store import ConfigStore
from hintscan.core.telemetry.client import TelemetryClient, TelemetryState

logger = logging.getLogger(__name__)

ALREADY_RUN_KEY = "run"
ANALYZE_EVENT = "cli-analyze"


def hints_for_telemetry(config: UserConfig) -> dict[str, Any] | None:
    """Return hint-id -> severity with user-supplied options stripped."""
    hints = hints_from_configuration(config)
    if not hints:
        return None
    return {hint_id: hint_severity(value) for hint_id, value in hints.items()}


def prune_user_config(config: UserConfig) -> dict[str, Any]:
    """Project ``config`` onto the fields telemetry is allowed to carry."""
    return {
        "browserslist": config.browserslist,
        "connector": config.connector_name,
        "extends": list(config.extends),
        "formatters": config.formatters,
        "hints": hints_for_telemetry(config),
        "hints_timeout": config.hints_timeout,
        "language": config.language,
        "parsers": config.parsers,
    }


class TelemetryGate:
    """Decides whether, and what, to report for a finished run."""

    def __init__(
        self,
        client: TelemetryClient,
        store: ConfigStore,
        prompter: Prompter,
        *,
        ci: bool | None = None,
        tracking: str | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self.client = client
        self.store = store
        self.prompter = prompter
        self.ci = is_ci(environ) if ci is None else ci
        self.tracking = tracking or tracking_preference(environ)

    def apply_tracking_preference(self) -> None:
        """Persist a forced on/off preference, if one was given."""
        if self.tracking == "on" and not self.client.is_enabled():
            self.client.enable()
        elif self.tracking == "off" and self.client.state is not TelemetryState.DISABLED:
            self.client.disable()

    async def ask_for_consent(self) -> bool:
        """Explain telemetry, ask, and persist the answer."""
        show_telemetry_notice()
        logger.debug("Prompting telemetry permission.")
        enabled = await self.prompter.ask("Do you want to opt-in?")
        if enabled:
            self.client.enable()
        else:
            self.client.disable()
        return enabled

    async def send_if_enabled(
        self,
        config: UserConfig,
        *,
        duration_ms: float | None = None,
    ) -> None:
        """Run the consent state machine and track the run summary."""
        self.apply_tracking_preference()

        already_run = bool(self.store.get(ALREADY_RUN_KEY))
        if not already_run:
            try:
                self.store.set(ALREADY_RUN_KEY, True)
            except OSError as exc:
                logger.warning("Cannot record the first run in %s: %s", self.store.path, exc)

        enabled = self.client.is_enabled()
        if not self.client.is_configured():
            if self.ci:
                show_ci_telemetry_notice()
                enabled = False
            elif already_run:
                enabled = await self.ask_for_consent()

        if not enabled:
            return

        properties: dict[str, Any] = {"ci": self.ci, "previously_run": already_run}
        properties.update(prune_user_config(config))
        measurements = {"duration": float(duration_ms)} if duration_ms is not None else None
        self.client.track(ANALYZE_EVENT, properties, measurements)
