"""Tests for ``create_analyzer`` error classification.

Plugins are served through a patched entry-point lookup (see
``tests.helpers.install_plugins``), so nothing needs to be installed.
"""

from __future__ import annotations

from typing import Any

import pytest

from hintscan.core.config.models import ConnectorConfig, CreateAnalyzerOptions, UserConfig
from hintscan.core.engine.analyzer import Analyzer, create_analyzer, parse_severity
from hintscan.core.engine.formatters import JSONFormatter, StylishFormatter
from hintscan.core.engine.models import Severity
from hintscan.exceptions import AnalyzerError, AnalyzerErrorStatus
from tests.helpers import (
    FakeConnector,
    FakeHint,
    OptionCheckingHint,
    OutdatedHint,
    StrictConnector,
    development_plugins,
    install_plugins,
)

DEVELOPMENT = UserConfig(extends=["development"])
LOCAL = ConnectorConfig(name="local")


def _create(config: UserConfig, options: CreateAnalyzerOptions | None = None) -> Analyzer:
    return create_analyzer(config, options)


def _status(config: UserConfig) -> AnalyzerError:
    with pytest.raises(AnalyzerError) as info:
        _create(config)
    return info.value


class TestParseSeverity:

    @pytest.mark.parametrize("value,expected", [
        ("error", Severity.ERROR),
        ("Warning", Severity.WARNING),
        ("information", Severity.INFORMATION),
        ("hint", Severity.HINT),
        (2, Severity.ERROR),
        (1, Severity.WARNING),
        (0, Severity.OFF),
    ])
    def test_valid(self, value: Any, expected: Severity) -> None:
        assert parse_severity(value) is expected

    @pytest.mark.parametrize("value", ["fatal", 7, True, None, 1.5])
    def test_invalid(self, value: Any) -> None:
        with pytest.raises(ValueError):
            parse_severity(value)


class TestReady:

    def test_development_preset(self, monkeypatch: pytest.MonkeyPatch) -> None:
        install_plugins(monkeypatch, development_plugins())
        analyzer = _create(DEVELOPMENT)
        assert isinstance(analyzer.connector, FakeConnector)
        assert {h.hint_id for h in analyzer.hints} == {
            "axe", "button-type", "doctype", "meta-charset-utf-8",
            "meta-viewport", "no-inline-styles",
        }
        assert set(analyzer.parsers) == {"css", "html", "javascript"}
        assert list(analyzer.formatters) == ["stylish"]
        assert isinstance(analyzer.formatters["stylish"], StylishFormatter)

    def test_off_hints_not_loaded(self, monkeypatch: pytest.MonkeyPatch) -> None:
        plugins = development_plugins()
        del plugins[("hint", "doctype")]
        install_plugins(monkeypatch, plugins)
        analyzer = _create(UserConfig(extends=["development"], hints=["-doctype"]))
        assert "doctype" not in [h.hint_id for h in analyzer.hints]

    def test_cli_options_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        install_plugins(monkeypatch, development_plugins())
        options = CreateAnalyzerOptions(formatters=["json"], hints=["doctype"], watch=True)
        analyzer = _create(DEVELOPMENT, options)
        assert [h.hint_id for h in analyzer.hints] == ["doctype"]
        assert isinstance(analyzer.formatters["json"], JSONFormatter)
        assert analyzer.connector.watch is True

    def test_severity_and_timeout(self, monkeypatch: pytest.MonkeyPatch) -> None:
        install_plugins(monkeypatch, {("connector", "local"): FakeConnector,
                                      ("hint", "axe"): FakeHint})
        config = UserConfig(connector=LOCAL, hints={"axe": "warning"}, hints_timeout=250)
        analyzer = _create(config)
        assert analyzer.hints[0].severity is Severity.WARNING
        assert analyzer.hints_timeout_ms == 250

    def test_resources(self, monkeypatch: pytest.MonkeyPatch) -> None:
        install_plugins(monkeypatch, {("connector", "local"): FakeConnector,
                                      ("hint", "axe"): FakeHint})
        analyzer = _create(UserConfig(connector=LOCAL, hints=["axe"]))
        assert analyzer.resources == {
            "connector": ["local"],
            "hints": ["axe"],
            "parsers": [],
            "formatters": ["stylish"],
        }


class TestConfigurationError:

    def test_schema_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        install_plugins(monkeypatch, {})
        error = _status(UserConfig.from_dict({"connector": "local", "bogus": 1}))
        assert error.status is AnalyzerErrorStatus.CONFIGURATION_ERROR
        assert "bogus" in str(error)

    def test_schema_checked_before_resources(self, monkeypatch: pytest.MonkeyPatch) -> None:
        install_plugins(monkeypatch, {})
        error = _status(UserConfig.from_dict({"extends": ["development"], "hints_timeout": -1}))
        assert error.status is AnalyzerErrorStatus.CONFIGURATION_ERROR

    def test_no_connector(self, monkeypatch: pytest.MonkeyPatch) -> None:
        install_plugins(monkeypatch, {("hint", "axe"): FakeHint})
        error = _status(UserConfig(hints=["axe"]))
        assert error.status is AnalyzerErrorStatus.CONFIGURATION_ERROR


class TestResourceError:

    def test_missing_hint(self, monkeypatch: pytest.MonkeyPatch) -> None:
        plugins = development_plugins()
        del plugins[("hint", "axe")]
        install_plugins(monkeypatch, plugins)
        error = _status(DEVELOPMENT)
        assert error.status is AnalyzerErrorStatus.RESOURCE_ERROR
        assert error.resources is not None
        assert error.resources.missing == ["hint-axe"]
        assert error.resources.incompatible == []

    def test_incompatible_version(self, monkeypatch: pytest.MonkeyPatch) -> None:
        plugins = development_plugins()
        plugins[("hint", "axe")] = OutdatedHint
        install_plugins(monkeypatch, plugins)
        error = _status(DEVELOPMENT)
        assert error.resources is not None
        assert error.resources.incompatible == ["hint-axe"]

    def test_broken_plugin_is_incompatible(self, monkeypatch: pytest.MonkeyPatch) -> None:
        plugins = development_plugins()
        plugins[("parser", "css")] = ImportError("no module named tinycss")
        install_plugins(monkeypatch, plugins)
        error = _status(DEVELOPMENT)
        assert error.resources is not None
        assert error.resources.incompatible == ["parser-css"]

    def test_missing_preset_without_connector(self, monkeypatch: pytest.MonkeyPatch) -> None:
        install_plugins(monkeypatch, {})
        error = _status(UserConfig(extends=["strict"]))
        assert error.status is AnalyzerErrorStatus.RESOURCE_ERROR
        assert error.resources is not None
        assert error.resources.missing == ["configuration-strict"]

    def test_plugin_preset(self, monkeypatch: pytest.MonkeyPatch) -> None:
        install_plugins(monkeypatch, {
            ("configuration", "strict"): {"connector": "local", "hints": ["axe"]},
            ("connector", "local"): FakeConnector,
            ("hint", "axe"): FakeHint,
        })
        analyzer = _create(UserConfig(extends=["strict"]))
        assert [h.hint_id for h in analyzer.hints] == ["axe"]

    def test_missing_connector_and_formatter(self, monkeypatch: pytest.MonkeyPatch) -> None:
        install_plugins(monkeypatch, {})
        config = UserConfig(connector=ConnectorConfig("puppeteer"), formatters=["html"])
        error = _status(config)
        assert error.resources is not None
        assert error.resources.missing == ["connector-puppeteer", "formatter-html"]


class TestHintError:

    def test_bad_severity(self, monkeypatch: pytest.MonkeyPatch) -> None:
        install_plugins(monkeypatch, {("connector", "local"): FakeConnector,
                                      ("hint", "axe"): FakeHint,
                                      ("hint", "sri"): FakeHint})
        error = _status(UserConfig(connector=LOCAL, hints={"axe": "fatal", "sri": "error"}))
        assert error.status is AnalyzerErrorStatus.HINT_ERROR
        assert error.invalid_hints == ["axe"]

    def test_bad_options(self, monkeypatch: pytest.MonkeyPatch) -> None:
        install_plugins(monkeypatch, {("connector", "local"): FakeConnector,
                                      ("hint", "axe"): OptionCheckingHint})
        error = _status(UserConfig(connector=LOCAL, hints={"axe": ["error", {"lvl": 1}]}))
        assert error.status is AnalyzerErrorStatus.HINT_ERROR

    def test_good_options(self, monkeypatch: pytest.MonkeyPatch) -> None:
        install_plugins(monkeypatch, {("connector", "local"): FakeConnector,
                                      ("hint", "axe"): OptionCheckingHint})
        analyzer = _create(UserConfig(connector=LOCAL, hints={"axe": ["error", {"level": 1}]}))
        assert analyzer.hints[0].instance.options == {"level": 1}


class TestConnectorError:

    def test_invalid_options(self, monkeypatch: pytest.MonkeyPatch) -> None:
        install_plugins(monkeypatch, {("connector", "local"): StrictConnector})
        error = _status(UserConfig(connector=ConnectorConfig("local", {"x": 1})))
        assert error.status is AnalyzerErrorStatus.CONNECTOR_ERROR

    def test_constructor_rejects_options(self, monkeypatch: pytest.MonkeyPatch) -> None:
        class PickyConnector(FakeConnector):
            def __init__(self, options: dict, *, watch: bool = False) -> None:
                raise ValueError("port must be an integer")

        install_plugins(monkeypatch, {("connector", "local"): PickyConnector})
        error = _status(UserConfig(connector=LOCAL))
        assert error.status is AnalyzerErrorStatus.CONNECTOR_ERROR
        assert "port must be an integer" in str(error)
