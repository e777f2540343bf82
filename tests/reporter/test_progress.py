"""Tests for the rich-based Spinner."""

from __future__ import annotations

import io

from rich.console import Console

from hintscan.core.reporter.progress import Spinner


def _spinner(enabled: bool = True) -> tuple[Spinner, io.StringIO]:
    buffer = io.StringIO()
    return Spinner(enabled=enabled, console=Console(file=buffer, width=80)), buffer


class TestSpinner:

    def test_succeed_prints_last_text(self) -> None:
        spinner, buffer = _spinner()
        spinner.start("Analyzing https://a.example/")
        assert spinner.is_spinning
        spinner.update("Running hint [axe]")
        spinner.succeed()
        assert not spinner.is_spinning
        assert "✔ Running hint [axe]" in buffer.getvalue()

    def test_fail(self) -> None:
        spinner, buffer = _spinner()
        spinner.start("Analyzing")
        spinner.fail()
        assert "✖ Analyzing" in buffer.getvalue()

    def test_stop_without_start_is_noop(self) -> None:
        spinner, buffer = _spinner()
        spinner.fail()
        assert "✖" not in buffer.getvalue()

    def test_start_twice_keeps_one_status(self) -> None:
        spinner, buffer = _spinner()
        spinner.start("one")
        spinner.start("two")
        spinner.succeed()
        assert buffer.getvalue().count("✔") == 1
        assert "✔ two" in buffer.getvalue()

    def test_disabled(self) -> None:
        spinner, buffer = _spinner(enabled=False)
        spinner.start("Analyzing")
        spinner.update("Downloading")
        spinner.succeed()
        assert not spinner.is_spinning
        assert buffer.getvalue() == ""

    def test_stop_with_text_replaces_last_text(self) -> None:
        spinner, buffer = _spinner()
        spinner.start("Analyzing https://b.example/")
        spinner.succeed("Analyzing https://a.example/")
        assert "✔ Analyzing https://a.example/" in buffer.getvalue()
        assert "✔ Analyzing https://b.example/" not in buffer.getvalue()
