"""Plugin contracts for hints, connectors, parsers and formatters.

Plugins are classes registered under entry-point groups::

    [project.entry-points."hintscan.hints"]
    sri = "hintscan_hint_sri:SriHint"

Every plugin class declares ``API_VERSION``. A class whose version
differs from ``PLUGIN_API_VERSION`` is reported as incompatible and
offered for upgrade. Classes may define a ``validate_options`` static or
class method; when it returns False the configuration is rejected.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from hintscan.core.engine.models import FormatOptions, Problem

PLUGIN_API_VERSION = 1


@dataclass(frozen=True)
class Document:
    """A fetched target handed to parsers and hints.

    Attributes:
        url: Target URL.
        content: Raw body as text.
        content_type: MIME type reported by the connector.
        parsed: Parser name -> parse result, filled before hints run.
    """

    url: str
    content: str
    content_type: str = "text/html"
    parsed: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class HintReport:
    """What a hint reports; the analyzer attaches id and severity."""

    message: str
    resource: str | None = None
    line: int | None = None
    column: int | None = None


@runtime_checkable
class Connector(Protocol):
    """Fetches targets. Constructed as ``cls(options, watch=...)``."""

    async def fetch(self, url: str) -> Document: ...


@runtime_checkable
class Parser(Protocol):
    """Parses a document. Constructed as ``cls()``."""

    async def parse(self, document: Document) -> Any: ...


@runtime_checkable
class Hint(Protocol):
    """Evaluates one rule. Constructed as ``cls(options)``."""

    async def evaluate(self, document: Document) -> list[HintReport]: ...


@runtime_checkable
class Formatter(Protocol):
    """Renders problems. Constructed as ``cls()``."""

    async def format(self, problems: list[Problem], options: FormatOptions) -> None: ...


def is_compatible(plugin: Any) -> bool:
    """True when ``plugin`` targets the current plugin API."""
    return getattr(plugin, "API_VERSION", None) == PLUGIN_API_VERSION


def options_are_valid(plugin: Any, options: Any) -> bool:
    """Run the plugin's own option validation, if it has one."""
    validate = getattr(plugin, "validate_options", None)
    if validate is None:
        return True
    return bool(validate(options))
