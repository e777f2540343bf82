"""Shared test doubles for hintscan tests.

Every collaborator the orchestrator takes through ``Services`` has a fake
here: prompts answer from a script, the installer and the telemetry
transport record their calls, and plugins are plain classes served
through a patched entry-point lookup.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Sequence
from typing import Any

from hintscan.core.engine.models import FormatOptions, Problem, ProgressEvent
from hintscan.core.engine.plugins import Document, HintReport


class FakePrompter:
    """Answers questions from a script; records every question asked."""

    def __init__(self, *answers: bool) -> None:
        self.answers = list(answers)
        self.questions: list[str] = []

    async def ask(self, question: str) -> bool:
        self.questions.append(question)
        if not self.answers:
            raise AssertionError(f"Unexpected prompt: {question}")
        return self.answers.pop(0)


class FakeInstaller:
    """Records install calls and returns a scripted result."""

    def __init__(self, result: bool = True, on_install: Any = None) -> None:
        self.result = result
        self.on_install = on_install
        self.calls: list[tuple[list[str], bool]] = []

    async def install(self, resources: Sequence[str], *, upgrade: bool = False) -> bool:
        self.calls.append((list(resources), upgrade))
        if self.on_install is not None:
            self.on_install(resources, upgrade)
        return self.result


class FakeTransport:
    """Collects sent batches instead of posting them."""

    def __init__(self, result: bool = True) -> None:
        self.result = result
        self.batches: list[list[dict[str, Any]]] = []

    async def send(self, events: list[dict[str, Any]]) -> bool:
        self.batches.append(list(events))
        return self.result


# ---------------------------------------------------------------------------
# Plugins
# ---------------------------------------------------------------------------


class FakeConnector:
    API_VERSION = 1

    def __init__(self, options: dict[str, Any], *, watch: bool = False) -> None:
        self.options = options
        self.watch = watch

    async def fetch(self, url: str) -> Document:
        return Document(url=url, content="<!doctype html><html></html>")


class StrictConnector(FakeConnector):
    """Only accepts an empty option mapping."""

    @classmethod
    def validate_options(cls, options: Any) -> bool:
        return options == {}


class FakeParser:
    API_VERSION = 1

    async def parse(self, document: Document) -> Any:
        return {"length": len(document.content)}


class FakeHint:
    """Reports one problem per document."""

    API_VERSION = 1

    def __init__(self, options: dict[str, Any]) -> None:
        self.options = options

    async def evaluate(self, document: Document) -> list[HintReport]:
        return [HintReport(message="Something is off", line=1, column=1)]


class SilentHint(FakeHint):
    async def evaluate(self, document: Document) -> list[HintReport]:
        return []


class SlowHint(FakeHint):
    async def evaluate(self, document: Document) -> list[HintReport]:
        await asyncio.sleep(10)
        return []


class OptionCheckingHint(FakeHint):
    @classmethod
    def validate_options(cls, options: Any) -> bool:
        return isinstance(options, dict) and "level" in options


class OutdatedHint(FakeHint):
    API_VERSION = 0


class FakeEntryPoint:
    """Stands in for ``importlib.metadata.EntryPoint``."""

    def __init__(self, name: str, obj: Any = None, error: Exception | None = None) -> None:
        self.name = name
        self.obj = obj
        self.error = error

    def load(self) -> Any:
        if self.error is not None:
            raise self.error
        return self.obj


def install_plugins(monkeypatch: Any, plugins: dict[tuple[str, str], Any]) -> None:
    """Serve ``plugins`` (keyed by (kind, name)) as the installed entry points."""

    def lookup(kind: str, name: str) -> FakeEntryPoint | None:
        key = (kind, name)
        if key not in plugins:
            return None
        value = plugins[key]
        if isinstance(value, Exception):
            return FakeEntryPoint(name, error=value)
        return FakeEntryPoint(name, obj=value)

    monkeypatch.setattr("hintscan.core.engine.resources._entry_point", lookup)


def development_plugins() -> dict[tuple[str, str], Any]:
    """Plugins needed by the built-in ``development`` preset."""
    plugins: dict[tuple[str, str], Any] = {("connector", "local"): FakeConnector}
    for parser in ("css", "html", "javascript"):
        plugins[("parser", parser)] = FakeParser
    for hint in ("axe", "button-type", "doctype", "meta-charset-utf-8",
                 "meta-viewport", "no-inline-styles"):
        plugins[("hint", hint)] = SilentHint
    return plugins


# ---------------------------------------------------------------------------
# Analyzer double for reporter tests
# ---------------------------------------------------------------------------


class ScriptedAnalyzer:
    """Replays a fixed event sequence; optionally raises at the end."""

    def __init__(
        self,
        events: Iterable[ProgressEvent],
        error: Exception | None = None,
        config: Any = None,
    ) -> None:
        self.events = list(events)
        self.error = error
        self.config = config
        self.formatted: list[tuple[list[Problem], FormatOptions]] = []

    @property
    def resources(self) -> dict[str, list[str]]:
        return {"hints": ["fake"]}

    async def analyze(self, targets: Sequence[str]):
        for event in self.events:
            yield event
        if self.error is not None:
            raise self.error

    async def format(self, problems: list[Problem], options: FormatOptions) -> None:
        self.formatted.append((list(problems), options))


class ScriptedFactory:
    """Analyzer factory that returns or raises scripted outcomes in order."""

    def __init__(self, *outcomes: Any) -> None:
        self.outcomes = list(outcomes)
        self.configs: list[Any] = []

    def __call__(self, config: Any, options: Any) -> Any:
        self.configs.append(config)
        if not self.outcomes:
            raise AssertionError("Analyzer factory called too often")
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome
