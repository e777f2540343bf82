"""Structural validation of a UserConfig.

Returns a list of human-readable problems instead of raising, so the
analyzer can wrap them all in one ``ConfigurationError``. Only the shape
is checked here; whether named plugins exist is the job of
``resources``, and whether hint severities and options make sense is
checked once the hints are loaded.
"""

from __future__ import annotations

from typing import Any

from hintscan.core.config.models import ConnectorConfig, UserConfig


def _is_str_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(v, str) for v in value)


def validate_config(config: UserConfig) -> list[str]:
    """Return every structural problem found in ``config``."""
    errors: list[str] = []

    for key in sorted(config.extra):
        errors.append(f"Unknown configuration key '{key}'")

    if not _is_str_list(config.extends):
        errors.append("'extends' must be a list of preset names")

    if config.connector is not None and not isinstance(config.connector, ConnectorConfig):
        errors.append("'connector' must be a name or a mapping with a 'name' key")
    elif isinstance(config.connector, ConnectorConfig) and not isinstance(config.connector.options, dict):
        errors.append("'connector.options' must be a mapping")

    if config.hints is not None:
        if isinstance(config.hints, dict):
            for hint_id, value in config.hints.items():
                if not isinstance(hint_id, str):
                    errors.append(f"Hint id {hint_id!r} must be a string")
                elif not isinstance(value, (str, int, list)):
                    errors.append(f"Hint '{hint_id}' must be a severity or [severity, options]")
        elif isinstance(config.hints, list):
            for entry in config.hints:
                if not isinstance(entry, (str, list)):
                    errors.append(f"Invalid hint entry {entry!r}")
        else:
            errors.append("'hints' must be a mapping or a list")

    for key in ("formatters", "parsers"):
        value = getattr(config, key)
        if value is not None and not _is_str_list(value):
            errors.append(f"'{key}' must be a list of names")

    timeout = config.hints_timeout
    if timeout is not None and (isinstance(timeout, bool) or not isinstance(timeout, int) or timeout <= 0):
        errors.append("'hints_timeout' must be a positive integer (milliseconds)")

    if config.language is not None and not isinstance(config.language, str):
        errors.append("'language' must be a string")

    browserslist = config.browserslist
    if browserslist is not None and not (isinstance(browserslist, str) or _is_str_list(browserslist)):
        errors.append("'browserslist' must be a query string or a list of queries")

    return errors
