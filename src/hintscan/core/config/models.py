"""Configuration data types: UserConfig, ConnectorConfig, CLI options.

``UserConfig`` is frozen: the resolver builds new instances with
``dataclasses.replace`` while it layers defaults, language and environment
overrides, and the result is never mutated once bootstrap receives it.
Field values are loosely typed. Schema validation belongs to the engine
(``hintscan.core.engine.schema``) and surfaces as a ``ConfigurationError``
at analyzer construction, not as a load failure.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any

# camelCase keys accepted in configuration files
_ALIASES: dict[str, str] = {
    "hintsTimeout": "hints_timeout",
}


@dataclass(frozen=True)
class ConnectorConfig:
    """Connector selection.

    Attributes:
        name: Connector plugin name (e.g. "local").
        options: Connector-specific options, validated by the connector.
    """

    name: str
    options: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_value(cls, value: Any) -> ConnectorConfig | Any:
        """Build from a string or ``{name, options}`` mapping.

        Values of any other shape are returned unchanged so the schema
        check can report them.
        """
        if isinstance(value, str):
            return cls(name=value)
        if isinstance(value, dict) and isinstance(value.get("name"), str):
            options = value.get("options")
            if options is None:
                options = {}
            elif isinstance(options, dict):
                options = dict(options)
            return cls(name=value["name"], options=options)
        return value

    def to_dict(self) -> dict[str, Any]:
        options = dict(self.options) if isinstance(self.options, dict) else self.options
        return {"name": self.name, "options": options}


@dataclass(frozen=True)
class UserConfig:
    """The effective scan configuration.

    Attributes:
        extends: Preset names to inherit from, applied in order.
        connector: Connector selection.
        hints: Hint severities, as a mapping ``id -> severity`` or
            ``id -> [severity, options]``, or a list of shorthand ids.
        formatters: Formatter names.
        hints_timeout: Per-hint timeout in milliseconds.
        language: Language used for messages.
        parsers: Parser plugin names.
        browserslist: Browser targeting queries.
        extra: Keys the file contained that are not part of the schema.
    """

    extends: list[str] = field(default_factory=list)
    connector: ConnectorConfig | Any = None
    hints: dict[str, Any] | list[Any] | None = None
    formatters: list[str] | None = None
    hints_timeout: int | None = None
    language: str | None = None
    parsers: list[str] | None = None
    browserslist: list[str] | str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UserConfig:
        """Build a configuration from a parsed file or merged mapping."""
        known = {f.name for f in fields(cls)} - {"extra"}
        values: dict[str, Any] = {}
        extra: dict[str, Any] = {}
        for key, value in data.items():
            name = _ALIASES.get(key, key)
            if name in known:
                values[name] = value
            else:
                extra[key] = value

        extends = values.get("extends")
        if isinstance(extends, str):
            values["extends"] = [extends]
        elif extends is None:
            values["extends"] = []
        if "connector" in values:
            values["connector"] = ConnectorConfig.from_value(values["connector"])
        return cls(**values, extra=extra)

    def to_dict(self) -> dict[str, Any]:
        """Serialize back to a plain mapping, omitting unset fields."""
        out: dict[str, Any] = {}
        if self.extends:
            out["extends"] = list(self.extends)
        if isinstance(self.connector, ConnectorConfig):
            out["connector"] = self.connector.to_dict()
        elif self.connector is not None:
            out["connector"] = self.connector
        for name in ("hints", "formatters", "hints_timeout", "language",
                     "parsers", "browserslist"):
            value = getattr(self, name)
            if value is not None:
                out[name] = value
        out.update(self.extra)
        return out

    @property
    def connector_name(self) -> str | None:
        if isinstance(self.connector, ConnectorConfig):
            return self.connector.name
        return None


@dataclass
class CLIOptions:
    """Raw options from the ``analyze`` command line.

    Attributes:
        targets: Positional URLs or paths, as typed.
        config: Explicit configuration file path.
        output: File path formatters write to.
        formatters: Comma-separated formatter names.
        hints: Comma-separated hint ids to restrict the run to.
        watch: Keep watching local targets for changes.
        debug: Verbose logging, no spinner.
        language: Explicit message language.
        tracking: Forced telemetry preference ("on"/"off").
    """

    targets: list[str] = field(default_factory=list)
    config: str | None = None
    output: str | None = None
    formatters: str | None = None
    hints: str | None = None
    watch: bool = False
    debug: bool = False
    language: str | None = None
    tracking: str | None = None


@dataclass(frozen=True)
class CreateAnalyzerOptions:
    """Command-line overrides applied on top of the configuration."""

    formatters: list[str] | None = None
    hints: list[str] | None = None
    watch: bool = False

    @classmethod
    def from_cli(cls, options: CLIOptions) -> CreateAnalyzerOptions:
        return cls(
            formatters=_split_list(options.formatters),
            hints=_split_list(options.hints),
            watch=options.watch,
        )


def _split_list(value: str | None) -> list[str] | None:
    if not value:
        return None
    return [item.strip() for item in value.split(",") if item.strip()]
