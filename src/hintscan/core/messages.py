"""User-facing notices shared by the orchestration components.

Everything here writes to standard error through one rich ``Console`` so
that formatters writing machine-readable output to standard output are
never interleaved with prompts or notices.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

console = Console(stderr=True)

DOCS_URL = "https://hintscan.dev/docs/user-guide/"
TELEMETRY_DOCS_URL = "https://hintscan.dev/docs/user-guide/telemetry/"


def print_frame(message: str | Text, title: str | None = None) -> None:
    """Print ``message`` centred inside a bordered panel."""
    body = Text.from_markup(message) if isinstance(message, str) else message
    body.justify = "center"
    console.print(Panel(body, title=title, padding=(1, 2), expand=False))


def show_default_config_notice() -> None:
    """Tell the user no valid configuration was found."""
    print_frame(
        "[yellow]Couldn't find any valid configuration[/yellow]\n\n"
        "Running hintscan with the default configuration.\n\n"
        "Learn more about how to create your own configuration at:\n\n"
        f"[green]{DOCS_URL}[/green]"
    )


_TELEMETRY_PITCH = (
    "Help us improve hintscan\n"
    "by sending limited usage information\n"
    "(no personal information or URLs will be sent).\n\n"
    "To know more about what information will be sent please\n"
    f"visit [green]{TELEMETRY_DOCS_URL}[/green]"
)


def show_telemetry_notice() -> None:
    """Explain telemetry before asking for consent."""
    print_frame(_TELEMETRY_PITCH)


def show_ci_telemetry_notice() -> None:
    """Explain how to configure telemetry where no prompt is possible."""
    print_frame(
        _TELEMETRY_PITCH
        + "\n\nPlease configure it using\n"
        "the environment variable HINTSCAN_TRACKING to 'on' or 'off'\n"
        "or set the flag --tracking=on|off"
    )


def show_error(message: str) -> None:
    console.print(f"[bold red]Error:[/bold red] {escape(message)}")


def show_info(message: str) -> None:
    console.print(escape(message))
