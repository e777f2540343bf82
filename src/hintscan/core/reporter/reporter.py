"""Run & Progress Reporter.

Consumes the analyzer's event stream for one run and dispatches each
event to a hook:

- ``on_target_start``: start the spinner, record the start time.
- ``on_update``: show the status text.
- ``on_target_end``: check for ERROR problems, stop the spinner, format.
  The spinner restarts while other targets are still in flight, so every
  target gets its own completion line.

Start times are keyed by target URL, so end events arriving in any order
are timed against their own start. The run fails if any target reports
an ERROR problem or the stream raises. The telemetry gate runs once per
run, and only when the stream completed without raising.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from contextlib import aclosing
from datetime import datetime, timezone
from pathlib import Path

from hintscan import __version__
from hintscan.core.config.models import CLIOptions, UserConfig
from hintscan.core.engine.analyzer import Analyzer
from hintscan.core.engine.models import (
    FormatOptions,
    Problem,
    ProgressEvent,
    Severity,
    TargetEnd,
    TargetStart,
    TargetUpdate,
)
from hintscan.core.messages import show_error
from hintscan.core.reporter.progress import Spinner
from hintscan.core.telemetry.gate import TelemetryGate

logger = logging.getLogger(__name__)


def has_error(problems: Sequence[Problem]) -> bool:
    """True when at least one problem has ERROR severity."""
    return any(p.severity is Severity.ERROR for p in problems)


class ScanReporter:
    """Drives one analysis run and reports its progress.

    Attributes:
        scan_start: Target URL -> start timestamp for the current run.
        failed: Whether the current run has failed so far.
    """

    def __init__(
        self,
        gate: TelemetryGate | None = None,
        *,
        spinner: Spinner | None = None,
        clock: Callable[[], float] = time.time,
        version: str = __version__,
    ) -> None:
        self.gate = gate
        self.spinner = spinner
        self.clock = clock
        self.version = version
        self.scan_start: dict[str, float] = {}
        self.failed = False
        self._config: UserConfig | None = None
        self._output: str | None = None

    # -- Hooks ----------------------------------------------------------------

    def on_target_start(self, event: TargetStart) -> None:
        if self.spinner is not None:
            self.spinner.start(f"Analyzing {event.url}")
        self.scan_start[event.url] = self.clock()

    def on_update(self, event: TargetUpdate) -> None:
        if self.spinner is not None:
            self.spinner.update(event.message)

    async def on_target_end(self, event: TargetEnd, analyzer: Analyzer) -> None:
        scan_end = self.clock()
        start = self.scan_start.pop(event.url, None)
        if start is None:
            logger.debug("No start time recorded for %s", event.url)
            start = scan_end

        if has_error(event.problems):
            self.failed = True

        if self.spinner is not None:
            # With other targets in flight the last status text may be theirs.
            text = f"Analyzing {event.url}" if self.scan_start else None
            if self.failed:
                self.spinner.fail(text)
            else:
                self.spinner.succeed(text)
            if self.scan_start:
                self.spinner.start(f"Analyzing {next(iter(self.scan_start))}")

        await analyzer.format(event.problems, FormatOptions(
            target=event.url,
            scan_time=(scan_end - start) * 1000,
            date=datetime.fromtimestamp(start, tz=timezone.utc).isoformat(),
            output=self._output,
            config=self._config,
            resources=analyzer.resources,
            version=self.version,
        ))

    async def dispatch(self, event: ProgressEvent, analyzer: Analyzer) -> None:
        """Route one progress event to its hook."""
        if isinstance(event, TargetStart):
            self.on_target_start(event)
        elif isinstance(event, TargetUpdate):
            self.on_update(event)
        elif isinstance(event, TargetEnd):
            await self.on_target_end(event, analyzer)

    # -- Run ------------------------------------------------------------------

    async def run(
        self,
        analyzer: Analyzer,
        targets: Sequence[str],
        options: CLIOptions,
        config: UserConfig | None = None,
    ) -> bool:
        """Analyze ``targets``; return True when the run succeeded."""
        self.scan_start = {}
        self.failed = False
        self._config = config or analyzer.config
        self._output = str(Path(options.output).resolve()) if options.output else None

        started = self.clock()
        try:
            async with aclosing(analyzer.analyze(targets)) as events:
                async for event in events:
                    await self.dispatch(event, analyzer)

            if self.gate is not None:
                await self.gate.send_if_enabled(
                    self._config, duration_ms=(self.clock() - started) * 1000,
                )
        except Exception as exc:
            self.failed = True
            if self.spinner is not None:
                self.spinner.fail()
            show_error(f"Failed to analyze: {exc}")
            logger.debug("Failed to analyze", exc_info=True)

        logger.debug("Total runtime: %.0fms", (self.clock() - started) * 1000)
        self.scan_start = {}
        return not self.failed
