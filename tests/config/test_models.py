"""Tests for configuration data types."""

from __future__ import annotations

import dataclasses

import pytest

from hintscan.core.config.models import (
    CLIOptions,
    ConnectorConfig,
    CreateAnalyzerOptions,
    UserConfig,
)


class TestUserConfig:

    def test_from_dict_connector_string(self) -> None:
        config = UserConfig.from_dict({"connector": "local"})
        assert config.connector == ConnectorConfig(name="local")
        assert config.connector_name == "local"

    def test_from_dict_connector_mapping(self) -> None:
        config = UserConfig.from_dict({"connector": {"name": "browser", "options": {"a": 1}}})
        assert config.connector == ConnectorConfig(name="browser", options={"a": 1})

    def test_malformed_connector_left_for_validation(self) -> None:
        config = UserConfig.from_dict({"connector": 42})
        assert config.connector == 42
        assert config.connector_name is None

    def test_alias(self) -> None:
        assert UserConfig.from_dict({"hintsTimeout": 30}).hints_timeout == 30

    def test_round_trip_keeps_extra(self) -> None:
        data = {"extends": ["development"], "formatters": ["json"], "custom": {"k": 1}}
        assert UserConfig.from_dict(data).to_dict() == data

    def test_frozen(self) -> None:
        config = UserConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.language = "en-US"  # type: ignore[misc]


class TestCreateAnalyzerOptions:

    def test_comma_lists_split(self) -> None:
        cli = CLIOptions(formatters="json, stylish", hints="axe,,doctype", watch=True)
        options = CreateAnalyzerOptions.from_cli(cli)
        assert options.formatters == ["json", "stylish"]
        assert options.hints == ["axe", "doctype"]
        assert options.watch is True

    def test_unset_lists(self) -> None:
        options = CreateAnalyzerOptions.from_cli(CLIOptions())
        assert options.formatters is None
        assert options.hints is None
