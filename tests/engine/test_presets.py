"""Tests for preset expansion and hint normalization."""

from __future__ import annotations

from typing import Any

import pytest

from hintscan.core.config.models import ConnectorConfig, UserConfig
from hintscan.core.engine.presets import (
    BUILTIN_PRESETS,
    expand_config,
    hint_severity,
    hints_from_configuration,
    is_off,
    normalize_hints,
)


class TestNormalizeHints:

    def test_mapping_kept(self) -> None:
        assert normalize_hints({"axe": "error"}) == {"axe": "error"}

    def test_shorthand_list(self) -> None:
        assert normalize_hints(["axe", "?sri", "-doctype"]) == {
            "axe": "error",
            "sri": "warning",
            "doctype": "off",
        }

    def test_list_entry_with_options(self) -> None:
        assert normalize_hints([["?sri", {"algorithm": "sha384"}]]) == {
            "sri": ["warning", {"algorithm": "sha384"}],
        }

    @pytest.mark.parametrize("value", [None, [], {}, "axe", 3])
    def test_empty_or_invalid(self, value: Any) -> None:
        assert normalize_hints(value) == {}


class TestSeverityHelpers:

    def test_hint_severity(self) -> None:
        assert hint_severity("warning") == "warning"
        assert hint_severity(["error", {"x": 1}]) == "error"
        assert hint_severity([]) is None

    @pytest.mark.parametrize("value,expected", [
        ("off", True), ("OFF", True), (0, True), (["off", {}], True),
        ("error", False), (2, False), (False, False),
    ])
    def test_is_off(self, value: Any, expected: bool) -> None:
        assert is_off(value) is expected


class TestExpandConfig:

    def test_builtin_preset(self) -> None:
        expanded = expand_config(UserConfig(extends=["development"]))
        assert expanded.connector == ConnectorConfig(name="local")
        assert expanded.formatters == ["stylish"]
        assert expanded.hints == BUILTIN_PRESETS["development"]["hints"]
        assert expanded.extends == []

    def test_own_values_win(self) -> None:
        config = UserConfig(
            extends=["development"],
            formatters=["json"],
            hints={"doctype": "off", "custom": "warning"},
        )
        expanded = expand_config(config)
        assert expanded.formatters == ["json"]
        assert expanded.hints["doctype"] == "off"
        assert expanded.hints["custom"] == "warning"
        assert expanded.hints["axe"] == "error"

    def test_later_preset_wins(self) -> None:
        presets = {
            "a": {"formatters": ["json"], "hints": {"x": "error"}},
            "b": {"formatters": ["stylish"], "hints": {"x": "warning"}},
        }
        expanded = expand_config(UserConfig(extends=["a", "b"]), presets.get)
        assert expanded.formatters == ["stylish"]
        assert expanded.hints == {"x": "warning"}

    def test_nested_and_cyclic_presets(self) -> None:
        presets = {
            "outer": {"extends": ["inner"], "hints": {"b": "error"}},
            "inner": {"extends": ["outer"], "connector": "local", "hints": {"a": "error"}},
        }
        expanded = expand_config(UserConfig(extends=["outer"]), presets.get)
        assert expanded.connector == ConnectorConfig(name="local")
        assert expanded.hints == {"a": "error", "b": "error"}

    def test_unknown_preset_skipped(self) -> None:
        expanded = expand_config(UserConfig(extends=["nope"], connector=ConnectorConfig("local")))
        assert expanded.connector_name == "local"

    def test_hints_from_configuration(self) -> None:
        hints = hints_from_configuration(UserConfig(extends=["web-recommended"], hints=["-sri"]))
        assert hints["sri"] == "off"
        assert hints["https-only"] == "error"
