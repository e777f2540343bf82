"""Process environment checks: CI detection, OS locale, env overrides.

Environment overrides use the ``HINTSCAN_`` prefix. Nesting is expressed
with a double underscore, so ``HINTSCAN_CONNECTOR__OPTIONS__WAIT_FOR=500``
becomes ``{"connector": {"options": {"wait_for": 500}}}``. Values are
parsed with ``yaml.safe_load`` so numbers, booleans and inline lists keep
their type.
"""

from __future__ import annotations

import locale
import logging
import os
from collections.abc import Mapping
from typing import Any

import yaml

logger = logging.getLogger(__name__)

ENV_PREFIX = "HINTSCAN_"
TRACKING_ENV = "HINTSCAN_TRACKING"
TELEMETRY_ENDPOINT_ENV = "HINTSCAN_TELEMETRY_ENDPOINT"

# Prefixed variables that control the tool itself, never the scan config.
_RESERVED = frozenset({TRACKING_ENV, TELEMETRY_ENDPOINT_ENV})

# Variables set by common CI providers.
_CI_VARIABLES: tuple[str, ...] = (
    "CI",
    "CONTINUOUS_INTEGRATION",
    "BUILD_NUMBER",
    "RUN_ID",
    "GITHUB_ACTIONS",
    "GITLAB_CI",
    "TF_BUILD",
    "JENKINS_URL",
    "BUILDKITE",
    "CIRCLECI",
    "TRAVIS",
)

DEFAULT_LANGUAGE = "en-US"


def _environ(environ: Mapping[str, str] | None) -> Mapping[str, str]:
    return os.environ if environ is None else environ


def is_ci(environ: Mapping[str, str] | None = None) -> bool:
    """Return True when running under a continuous integration service."""
    env = _environ(environ)
    for name in _CI_VARIABLES:
        value = env.get(name)
        if value is None:
            continue
        if value.strip().lower() in ("", "false", "0"):
            continue
        return True
    return False


def normalize_language(value: str) -> str | None:
    """Turn a POSIX locale name into a BCP 47 tag.

    ``en_US.UTF-8`` -> ``en-US``; ``C`` and ``POSIX`` carry no language
    and yield None.
    """
    tag = value.split(".", 1)[0].split("@", 1)[0].strip()
    if not tag or tag.upper() in ("C", "POSIX"):
        return None
    return tag.replace("_", "-")


def os_language(environ: Mapping[str, str] | None = None) -> str:
    """Return the language configured in the operating system."""
    env = _environ(environ)
    for name in ("LC_ALL", "LC_MESSAGES", "LANG"):
        value = env.get(name)
        if value:
            language = normalize_language(value)
            if language:
                return language
    try:
        code = locale.getlocale()[0]
    except ValueError:
        code = None
    if code:
        language = normalize_language(code)
        if language:
            return language
    return DEFAULT_LANGUAGE


def tracking_preference(environ: Mapping[str, str] | None = None) -> str | None:
    """Return "on" or "off" if the tracking variable forces a choice."""
    value = _environ(environ).get(TRACKING_ENV, "").strip().lower()
    return value if value in ("on", "off") else None


def env_overrides(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Collect ``HINTSCAN_*`` variables into a nested mapping."""
    overrides: dict[str, Any] = {}
    for name, raw in sorted(_environ(environ).items()):
        upper = name.upper()
        if not upper.startswith(ENV_PREFIX) or upper in _RESERVED:
            continue
        path = [part.lower() for part in name[len(ENV_PREFIX):].split("__") if part]
        if not path:
            continue
        try:
            value = yaml.safe_load(raw) if raw else raw
        except yaml.YAMLError:
            value = raw
        node = overrides
        for part in path[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        node[path[-1]] = value
        logger.debug("Environment override %s", ".".join(path))
    return overrides


def deep_merge(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge ``overrides`` onto ``base``; overrides win."""
    merged: dict[str, Any] = dict(base)
    for key, value in overrides.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged
