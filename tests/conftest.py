"""Shared fixtures for hintscan tests."""

from __future__ import annotations

import pathlib

import pytest

from hintscan.core.store import ConfigStore
from hintscan.core.telemetry.client import TelemetryClient
from tests.helpers import FakeTransport


@pytest.fixture
def isolated_store_dir(tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch) -> pathlib.Path:
    """Point the default per-user store at a temporary directory."""
    config_home = tmp_path / "xdg"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    return config_home


@pytest.fixture
def store(tmp_path: pathlib.Path) -> ConfigStore:
    """An empty store in a temporary file."""
    return ConfigStore(tmp_path / "store" / "config.json")


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def telemetry(store: ConfigStore, transport: FakeTransport) -> TelemetryClient:
    """A telemetry client that was never configured."""
    return TelemetryClient.from_store(store, transport)


@pytest.fixture
def site_dir(tmp_path: pathlib.Path) -> pathlib.Path:
    """A directory with one HTML page, usable as a local target."""
    site = tmp_path / "site"
    site.mkdir()
    (site / "index.html").write_text("<!doctype html><title>t</title>\n")
    return site


@pytest.fixture
def unwritable_store(tmp_path: pathlib.Path) -> ConfigStore:
    """A store whose parent directory is a regular file, so writes fail."""
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    return ConfigStore(blocker / "hintscan" / "config.json")
