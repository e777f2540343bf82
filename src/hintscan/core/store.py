"""Durable key-value store for per-user state.

Backs the telemetry consent flags and the first-run marker. Values are
kept in a single JSON document under the user configuration directory
(``$XDG_CONFIG_HOME/hintscan/config.json``, else
``~/.config/hintscan/config.json``). Every ``set`` rewrites the file via
a temporary file and ``os.replace``.

There is no locking between processes: two concurrent runs may race on
the file and the last writer wins.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def default_store_path() -> Path:
    """Return the path of the per-user store file."""
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    return root / "hintscan" / "config.json"


class ConfigStore:
    """JSON-file key-value store.

    Example::

        store = ConfigStore()
        if not store.get("run"):
            store.set("run", True)
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or default_store_path()

    def _read(self) -> dict[str, Any]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError:
            logger.warning("Cannot read %s", self.path, exc_info=True)
            return {}
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Ignoring corrupted store file %s", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".tmp")
        tmp.write_text(json.dumps(data, indent=2, sort_keys=True) + "\n", encoding="utf-8")
        os.replace(tmp, self.path)

    def get(self, key: str, default: Any = None) -> Any:
        """Return the stored value for ``key`` or ``default``."""
        return self._read().get(key, default)

    def has(self, key: str) -> bool:
        return key in self._read()

    def set(self, key: str, value: Any) -> None:
        """Persist ``value`` under ``key``.

        Raises:
            OSError: If the store directory or file cannot be written.
        """
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read()
        if key not in data:
            return
        del data[key]
        self._write(data)
