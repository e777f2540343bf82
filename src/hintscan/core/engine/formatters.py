"""Built-in formatters: ``stylish`` and ``json``.

Severity Color Mapping:
    ERROR = bold red, WARNING = yellow, INFORMATION = cyan, HINT = green

Both formatters print to standard output, or append to
``FormatOptions.output`` when set: one rendered block per target for
``stylish``, one JSON document per line for ``json``.
"""

from __future__ import annotations

import json
from collections import Counter
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table
from rich.text import Text

from hintscan.core.engine.models import FormatOptions, Problem, Severity

_SEVERITY_STYLES: dict[Severity, str] = {
    Severity.ERROR: "bold red",
    Severity.WARNING: "yellow",
    Severity.INFORMATION: "cyan",
    Severity.HINT: "green",
}

console = Console()


def severity_style(severity: Severity) -> str:
    """Return the Rich style string for a given severity level."""
    return _SEVERITY_STYLES.get(severity, "white")


def _location(problem: Problem) -> str:
    if problem.line is None:
        return ""
    if problem.column is None:
        return str(problem.line)
    return f"{problem.line}:{problem.column}"


_LABELS: dict[Severity, tuple[str, str]] = {
    Severity.ERROR: ("error", "errors"),
    Severity.WARNING: ("warning", "warnings"),
    Severity.INFORMATION: ("information", "information"),
    Severity.HINT: ("hint", "hints"),
}


def _summary(problems: list[Problem]) -> Text:
    counts = Counter(p.severity for p in problems)
    parts: list[tuple[str, str]] = []
    for severity, (one, many) in _LABELS.items():
        n = counts.get(severity, 0)
        if n:
            label = one if n == 1 else many
            parts.append((f"{n} {label}", severity_style(severity)))
    text = Text("Found ")
    for i, (part, style) in enumerate(parts):
        if i:
            text.append(", ")
        text.append(part, style=style)
    return text


class StylishFormatter:
    """Human-readable table of problems grouped by resource."""

    API_VERSION = 1

    def render(self, problems: list[Problem], options: FormatOptions, out: Console) -> None:
        if not problems:
            out.print(f"[green]No hints found[/green] for {options.target or 'target'}")
            return

        by_resource: dict[str, list[Problem]] = {}
        for problem in problems:
            by_resource.setdefault(problem.resource, []).append(problem)

        for resource in sorted(by_resource):
            table = Table(title=resource, show_header=True, header_style="bold")
            table.add_column("Location", style="dim", justify="right")
            table.add_column("Severity", justify="center")
            table.add_column("Hint", style="bold")
            table.add_column("Message")
            items = sorted(by_resource[resource], key=lambda p: (p.line or 0, p.column or 0))
            for p in items:
                table.add_row(
                    _location(p),
                    Text(p.severity.name, style=severity_style(p.severity)),
                    p.hint_id,
                    p.message,
                )
            out.print(table)
        out.print(_summary(problems))

    async def format(self, problems: list[Problem], options: FormatOptions) -> None:
        if options.output:
            with Path(options.output).open("a", encoding="utf-8") as handle:
                self.render(problems, options, Console(file=handle, width=120, no_color=True))
        else:
            self.render(problems, options, console)


class JSONFormatter:
    """Machine-readable problem dump."""

    API_VERSION = 1

    @staticmethod
    def to_dict(problems: list[Problem], options: FormatOptions) -> dict[str, Any]:
        return {
            "target": options.target,
            "date": options.date,
            "scan_time": options.scan_time,
            "version": options.version,
            "problems": [
                {
                    "hint_id": p.hint_id,
                    "message": p.message,
                    "resource": p.resource,
                    "severity": p.severity.name.lower(),
                    "line": p.line,
                    "column": p.column,
                }
                for p in problems
            ],
        }

    async def format(self, problems: list[Problem], options: FormatOptions) -> None:
        data = self.to_dict(problems, options)
        if options.output:
            with Path(options.output).open("a", encoding="utf-8") as handle:
                handle.write(json.dumps(data) + "\n")
        else:
            console.print_json(json.dumps(data, default=str))


BUILTIN_FORMATTERS: dict[str, type] = {
    "json": JSONFormatter,
    "stylish": StylishFormatter,
}
