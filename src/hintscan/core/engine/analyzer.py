"""The Analyzer and its construction boundary.

``create_analyzer(config, options)`` is the only place ``AnalyzerError``
is raised. Checks run in this order, and the first failing one decides
the error status:

1. Structure of the user configuration   -> CONFIGURATION_ERROR
2. Presets, connector, hints, parsers and formatters resolvable as
   plugins                               -> RESOURCE_ERROR
3. Hint severities and hint options      -> HINT_ERROR
4. Connector options                     -> CONNECTOR_ERROR

``Analyzer.analyze(targets)`` returns an async iterator of progress
events. Targets run as concurrent tasks; their events are funnelled
through a queue, so ``TargetStart``/``TargetEnd`` of different targets
interleave. Each call starts a fresh stream.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from collections.abc import AsyncIterator, Sequence
from dataclasses import dataclass
from typing import Any

from hintscan.core.config.models import ConnectorConfig, CreateAnalyzerOptions, UserConfig
from hintscan.core.engine.models import (
    FormatOptions,
    Problem,
    ProgressEvent,
    Severity,
    TargetEnd,
    TargetStart,
    TargetUpdate,
)
from hintscan.core.engine.plugins import Document, options_are_valid
from hintscan.core.engine.presets import expand_config, hint_severity, is_off, normalize_hints
from hintscan.core.engine.resources import ResourceLoader
from hintscan.core.engine.schema import validate_config
from hintscan.exceptions import AnalyzerError, AnalyzerErrorStatus

logger = logging.getLogger(__name__)

DEFAULT_FORMATTERS: tuple[str, ...] = ("stylish",)
DEFAULT_HINTS_TIMEOUT_MS = 60_000

# Legacy numeric severities: 0 off, 1 warning, 2 error.
_NUMERIC_SEVERITIES: dict[int, Severity] = {
    0: Severity.OFF,
    1: Severity.WARNING,
    2: Severity.ERROR,
}

_DONE = object()


def parse_severity(value: Any) -> Severity:
    """Parse a configured hint severity.

    Raises:
        ValueError: If ``value`` is not a severity name or legacy number.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid severity: {value!r}")
    if isinstance(value, int):
        if value not in _NUMERIC_SEVERITIES:
            raise ValueError(f"Invalid severity: {value!r}")
        return _NUMERIC_SEVERITIES[value]
    if isinstance(value, str):
        return Severity.from_name(value)
    raise ValueError(f"Invalid severity: {value!r}")


@dataclass
class LoadedHint:
    """A hint instance together with its configured severity."""

    hint_id: str
    severity: Severity
    instance: Any


class Analyzer:
    """A ready-to-run analyzer.

    Built by ``create_analyzer``; holds the connector, parsers, hints and
    formatters for one effective configuration.
    """

    def __init__(
        self,
        config: UserConfig,
        connector: Any,
        hints: list[LoadedHint],
        parsers: dict[str, Any],
        formatters: dict[str, Any],
        hints_timeout_ms: int = DEFAULT_HINTS_TIMEOUT_MS,
    ) -> None:
        self.config = config
        self.connector = connector
        self.hints = hints
        self.parsers = parsers
        self.formatters = formatters
        self.hints_timeout_ms = hints_timeout_ms

    @property
    def resources(self) -> dict[str, list[str]]:
        """Names of the loaded plugins, by kind."""
        return {
            "connector": [self.config.connector_name or ""],
            "hints": [h.hint_id for h in self.hints],
            "parsers": sorted(self.parsers),
            "formatters": list(self.formatters),
        }

    async def _run_hint(self, hint: LoadedHint, document: Document) -> list[Problem]:
        timeout = self.hints_timeout_ms / 1000
        try:
            reports = await asyncio.wait_for(hint.instance.evaluate(document), timeout)
        except asyncio.TimeoutError:
            return [Problem(
                hint_id=hint.hint_id,
                message=f"Hint '{hint.hint_id}' timed out after {self.hints_timeout_ms} ms",
                resource=document.url,
                severity=Severity.WARNING,
            )]
        return [
            Problem(
                hint_id=hint.hint_id,
                message=report.message,
                resource=report.resource or document.url,
                severity=hint.severity,
                line=report.line,
                column=report.column,
            )
            for report in reports
        ]

    async def _analyze_target(self, url: str, queue: asyncio.Queue) -> None:
        await queue.put(TargetStart(url))
        await queue.put(TargetUpdate(url, f"Downloading {url}"))
        document = await self.connector.fetch(url)

        if self.parsers:
            await queue.put(TargetUpdate(url, f"Parsing {url}"))
            parsed = {name: await parser.parse(document) for name, parser in self.parsers.items()}
            document = dataclasses.replace(document, parsed=parsed)

        problems: list[Problem] = []
        for hint in self.hints:
            await queue.put(TargetUpdate(url, f"Running hint {hint.hint_id}"))
            problems.extend(await self._run_hint(hint, document))
        await queue.put(TargetEnd(url, problems))

    async def analyze(self, targets: Sequence[str]) -> AsyncIterator[ProgressEvent]:
        """Yield start/update/end events for every target.

        An exception raised while analyzing any target cancels the other
        targets and propagates out of the iteration.
        """
        queue: asyncio.Queue = asyncio.Queue()

        async def runner() -> None:
            tasks = [asyncio.ensure_future(self._analyze_target(t, queue)) for t in targets]
            try:
                await asyncio.gather(*tasks)
            finally:
                for pending in tasks:
                    if not pending.done():
                        pending.cancel()
                await queue.put(_DONE)

        task = asyncio.ensure_future(runner())
        try:
            while True:
                event = await queue.get()
                if event is _DONE:
                    break
                yield event
            await task
        finally:
            if not task.done():
                task.cancel()

    async def format(self, problems: list[Problem], options: FormatOptions) -> None:
        """Render ``problems`` with every configured formatter."""
        for name, formatter in self.formatters.items():
            logger.debug("Formatting %d problems with %s", len(problems), name)
            await formatter.format(problems, options)


def _apply_options(config: UserConfig, options: CreateAnalyzerOptions) -> UserConfig:
    """Layer command-line overrides onto the expanded configuration."""
    if options.formatters:
        config = dataclasses.replace(config, formatters=list(options.formatters))
    if options.hints:
        configured = normalize_hints(config.hints)
        selected: dict[str, Any] = {}
        for hint_id in options.hints:
            declaration = configured.get(hint_id, "error")
            if is_off(declaration):
                declaration = "error"
            selected[hint_id] = declaration
        config = dataclasses.replace(config, hints=selected)
    return config


def create_analyzer(
    config: UserConfig,
    options: CreateAnalyzerOptions | None = None,
) -> Analyzer:
    """Build a ready analyzer for ``config``.

    Raises:
        AnalyzerError: Classified by ``status``; see the module docstring.
    """
    options = options or CreateAnalyzerOptions()

    errors = validate_config(config)
    if errors:
        raise AnalyzerError(
            "Invalid configuration: " + "; ".join(errors),
            AnalyzerErrorStatus.CONFIGURATION_ERROR,
        )

    loader = ResourceLoader()
    effective = _apply_options(expand_config(config, loader.preset), options)
    if not isinstance(effective.connector, ConnectorConfig):
        if loader.resources.is_satisfied:
            raise AnalyzerError(
                "Invalid configuration: no connector configured",
                AnalyzerErrorStatus.CONFIGURATION_ERROR,
            )
        raise AnalyzerError(
            "Missing or incompatible resources", AnalyzerErrorStatus.RESOURCE_ERROR,
            resources=loader.resources,
        )

    connector_cls = loader.load("connector", effective.connector.name)

    declarations = normalize_hints(effective.hints)
    hint_classes: dict[str, Any] = {}
    for hint_id, declaration in declarations.items():
        if is_off(declaration):
            continue
        cls = loader.load("hint", hint_id)
        if cls is not None:
            hint_classes[hint_id] = cls

    parser_classes = {name: loader.load("parser", name) for name in effective.parsers or []}
    formatter_names = effective.formatters or list(DEFAULT_FORMATTERS)
    formatter_classes = {name: loader.load("formatter", name) for name in formatter_names}

    if not loader.resources.is_satisfied:
        raise AnalyzerError(
            "Missing or incompatible resources", AnalyzerErrorStatus.RESOURCE_ERROR,
            resources=loader.resources,
        )

    hints: list[LoadedHint] = []
    invalid: list[str] = []
    for hint_id, cls in hint_classes.items():
        declaration = declarations[hint_id]
        hint_options = declaration[1] if isinstance(declaration, list) and len(declaration) > 1 else {}
        try:
            severity = parse_severity(hint_severity(declaration))
        except ValueError:
            invalid.append(hint_id)
            continue
        if not options_are_valid(cls, hint_options):
            invalid.append(hint_id)
            continue
        hints.append(LoadedHint(hint_id=hint_id, severity=severity, instance=cls(hint_options)))
    if invalid:
        raise AnalyzerError(
            "Invalid hint configuration", AnalyzerErrorStatus.HINT_ERROR,
            invalid_hints=invalid,
        )

    connector_options = effective.connector.options
    if not options_are_valid(connector_cls, connector_options):
        raise AnalyzerError("Invalid connector configuration", AnalyzerErrorStatus.CONNECTOR_ERROR)
    try:
        connector = connector_cls(connector_options, watch=options.watch)
    except (TypeError, ValueError) as exc:
        raise AnalyzerError(
            f"Invalid connector configuration: {exc}", AnalyzerErrorStatus.CONNECTOR_ERROR,
        ) from exc

    return Analyzer(
        config=effective,
        connector=connector,
        hints=hints,
        parsers={name: cls() for name, cls in parser_classes.items()},
        formatters={name: cls() for name, cls in formatter_classes.items()},
        hints_timeout_ms=effective.hints_timeout or DEFAULT_HINTS_TIMEOUT_MS,
    )
