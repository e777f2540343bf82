"""Configuration file discovery and parsing.

Discovery order when no explicit path is given:
    1. ``.hintscanrc``, ``.hintscanrc.yaml``, ``.hintscanrc.yml`` and
       ``.hintscanrc.json`` in the working directory.
    2. The same names in the user's home directory.

All files are parsed with ``yaml.safe_load``; JSON documents are valid
YAML, so one code path serves both.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from hintscan.core.config.models import UserConfig
from hintscan.exceptions import ConfigurationFileError

logger = logging.getLogger(__name__)

CONFIG_FILENAMES: tuple[str, ...] = (
    ".hintscanrc",
    ".hintscanrc.yaml",
    ".hintscanrc.yml",
    ".hintscanrc.json",
)


def find_config_file(
    cwd: Path | None = None,
    home: Path | None = None,
) -> Path | None:
    """Return the first configuration file found, or None.

    Args:
        cwd: Directory to search first (defaults to the working directory).
        home: Directory to search second (defaults to the home directory).
    """
    for base in (cwd or Path.cwd(), home or Path.home()):
        for name in CONFIG_FILENAMES:
            candidate = base / name
            try:
                if candidate.is_file():
                    return candidate
            except (PermissionError, OSError):
                continue
    return None


def read_config_file(path: Path) -> dict[str, Any]:
    """Parse a configuration file into a mapping.

    An empty file yields an empty mapping.

    Raises:
        ConfigurationFileError: If the file is unreadable, malformed, or
            its top level is not a mapping.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigurationFileError(f"Cannot read configuration file {path}: {exc}") from exc
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ConfigurationFileError(f"Invalid configuration file {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationFileError(
            f"Configuration file {path} must contain a mapping, "
            f"got {type(data).__name__}"
        )
    return data


def load_user_config(
    config_path: str | None = None,
    *,
    cwd: Path | None = None,
    home: Path | None = None,
) -> UserConfig | None:
    """Load the user configuration, or None if there is none to load.

    Args:
        config_path: Explicit path from ``--config``. It must exist.
        cwd: Override for the working directory (for testing).
        home: Override for the home directory (for testing).

    Raises:
        ConfigurationFileError: If an explicit path does not exist or any
            found file fails to parse.
    """
    if config_path:
        path = Path(config_path)
        if not path.is_file():
            raise ConfigurationFileError(f"Configuration file not found: {config_path}")
    else:
        path = find_config_file(cwd=cwd, home=home)
        if path is None:
            logger.debug("No configuration file found")
            return None

    logger.debug("Loading configuration from %s", path)
    return UserConfig.from_dict(read_config_file(path))
