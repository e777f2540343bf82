"""Data models shared across the engine boundary.

Severity, Problem, HintResources, the progress event types streamed by
``Analyzer.analyze`` and the ``FormatOptions`` handed to formatters. They
are kept apart from the analyzer so the reporter, the bootstrap state
machine and the formatters can import them without loading any plugin.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from hintscan.core.config.models import UserConfig


# ---------------------------------------------------------------------------
# Severity: Ordered finding severity levels
# ---------------------------------------------------------------------------


class Severity(IntEnum):
    """Five-level severity scale for findings.

    The integer encoding enables direct comparison:
    OFF < HINT < INFORMATION < WARNING < ERROR. Only ERROR fails a run.
    """

    OFF = 0
    HINT = 1
    INFORMATION = 2
    WARNING = 3
    ERROR = 4

    @classmethod
    def from_name(cls, value: str) -> Severity:
        """Parse a severity name as written in configuration files.

        Raises:
            ValueError: If ``value`` is not a known severity name.
        """
        try:
            return cls[value.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown severity: {value!r}") from None


# ---------------------------------------------------------------------------
# Problem: A single finding for one target
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Problem:
    """One finding reported by a hint against a target.

    Attributes:
        hint_id: Identifier of the hint that produced the finding.
        message: Human-readable description.
        resource: URL of the resource the finding applies to.
        severity: Finding severity.
        line: 1-based line in the resource, if known.
        column: 1-based column in the resource, if known.
    """

    hint_id: str
    message: str
    resource: str
    severity: Severity
    line: int | None = None
    column: int | None = None


@dataclass(frozen=True)
class HintResources:
    """Plugin packages a configuration needs but cannot load.

    Attributes:
        missing: Resource names with no installed plugin.
        incompatible: Resource names whose installed plugin has the wrong
            API version or fails to import.
    """

    missing: list[str] = field(default_factory=list)
    incompatible: list[str] = field(default_factory=list)

    @property
    def is_satisfied(self) -> bool:
        return not self.missing and not self.incompatible


# ---------------------------------------------------------------------------
# Progress events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TargetStart:
    """Emitted when analysis of ``url`` begins."""

    url: str


@dataclass(frozen=True)
class TargetUpdate:
    """Free-form status text for an in-flight target."""

    url: str
    message: str


@dataclass(frozen=True)
class TargetEnd:
    """Emitted once per target with all its findings."""

    url: str
    problems: list[Problem] = field(default_factory=list)


ProgressEvent = Union[TargetStart, TargetUpdate, TargetEnd]


@dataclass
class FormatOptions:
    """Context passed to every formatter alongside the problems.

    Attributes:
        target: URL the problems belong to.
        scan_time: Milliseconds spent analyzing the target.
        date: ISO-8601 timestamp of when the target scan started.
        output: Path to write to instead of the terminal, if any.
        config: Effective configuration of the run.
        resources: Names of the loaded plugins, by kind.
        version: hintscan version string.
    """

    target: str | None = None
    scan_time: float | None = None
    date: str | None = None
    output: str | None = None
    config: UserConfig | None = None
    resources: dict[str, list[str]] = field(default_factory=dict)
    version: str = ""
