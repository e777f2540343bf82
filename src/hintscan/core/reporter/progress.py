"""Terminal progress indicator built on ``rich.status.Status``.

``Spinner`` mirrors the start / text / succeed / fail lifecycle of a CLI
spinner. With ``enabled=False`` (debug mode) every method is a no-op so
log output is not garbled.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.status import Status

from hintscan.core.messages import console as default_console


class Spinner:
    """Single-line progress indicator written to stderr."""

    def __init__(self, *, enabled: bool = True, console: Console | None = None) -> None:
        self.enabled = enabled
        self.console = console or default_console
        self._status: Status | None = None
        self._text = ""

    @property
    def is_spinning(self) -> bool:
        return self._status is not None

    def start(self, text: str | None = None) -> None:
        if text is not None:
            self._text = text
        if not self.enabled or self._status is not None:
            return
        self._status = Status(escape(self._text), console=self.console, spinner="line")
        self._status.start()

    def update(self, text: str) -> None:
        self._text = text
        if self._status is not None:
            self._status.update(escape(text))

    def _stop(self, symbol: str, text: str | None) -> None:
        if self._status is None:
            return
        if text is not None:
            self._text = text
        self._status.stop()
        self._status = None
        if self._text:
            self.console.print(f"{symbol} {escape(self._text)}")

    def succeed(self, text: str | None = None) -> None:
        self._stop("[green]✔[/green]", text)

    def fail(self, text: str | None = None) -> None:
        self._stop("[red]✖[/red]", text)
