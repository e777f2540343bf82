"""Plugin resource resolution over Python entry points.

Resolves the plugin classes a (preset-expanded) configuration names and
reports what cannot be satisfied as ``HintResources``:

- **missing**: no entry point with that name in the group.
- **incompatible**: the entry point fails to load, or the loaded class
  declares a different ``API_VERSION``.

Resource names carry their kind as a prefix (``hint-sri``,
``connector-local``, ``formatter-html``, ``parser-css``,
``configuration-strict``); the installable distribution for a resource
is ``hintscan-<resource name>``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from importlib.metadata import EntryPoint, entry_points
from typing import Any

from hintscan.core.engine.formatters import BUILTIN_FORMATTERS
from hintscan.core.engine.models import HintResources
from hintscan.core.engine.plugins import is_compatible
from hintscan.core.engine.presets import BUILTIN_PRESETS

logger = logging.getLogger(__name__)

GROUPS: dict[str, str] = {
    "hint": "hintscan.hints",
    "connector": "hintscan.connectors",
    "parser": "hintscan.parsers",
    "formatter": "hintscan.formatters",
    "configuration": "hintscan.configurations",
}

PACKAGE_PREFIX = "hintscan-"


def package_name(resource: str) -> str:
    """Return the distribution that provides ``resource``."""
    return f"{PACKAGE_PREFIX}{resource}"


def _entry_point(kind: str, name: str) -> EntryPoint | None:
    matches = entry_points(group=GROUPS[kind], name=name)
    for ep in matches:
        return ep
    return None


@dataclass
class ResourceLoader:
    """Loads plugins by kind and name, remembering what failed.

    Attributes:
        missing: Resource names with no registered plugin.
        incompatible: Resource names that failed to load or have the
            wrong API version.
    """

    missing: list[str] = field(default_factory=list)
    incompatible: list[str] = field(default_factory=list)

    def _record(self, bucket: list[str], resource: str) -> None:
        if resource not in bucket:
            bucket.append(resource)

    def load(self, kind: str, name: str) -> Any | None:
        """Return the plugin class for ``kind``/``name`` or None."""
        if kind == "formatter" and name in BUILTIN_FORMATTERS:
            return BUILTIN_FORMATTERS[name]

        resource = f"{kind}-{name}"
        ep = _entry_point(kind, name)
        if ep is None:
            logger.debug("Resource %s is missing", resource)
            self._record(self.missing, resource)
            return None
        try:
            plugin = ep.load()
        except Exception:
            logger.debug("Resource %s failed to load", resource, exc_info=True)
            self._record(self.incompatible, resource)
            return None
        if not is_compatible(plugin):
            logger.debug("Resource %s has an incompatible API version", resource)
            self._record(self.incompatible, resource)
            return None
        return plugin

    def preset(self, name: str) -> Mapping[str, Any] | None:
        """Preset lookup for ``expand_config``: built-ins, then plugins."""
        if name in BUILTIN_PRESETS:
            return BUILTIN_PRESETS[name]

        resource = f"configuration-{name}"
        ep = _entry_point("configuration", name)
        if ep is None:
            self._record(self.missing, resource)
            return None
        try:
            preset = ep.load()
        except Exception:
            logger.debug("Configuration %s failed to load", name, exc_info=True)
            self._record(self.incompatible, resource)
            return None
        if not isinstance(preset, Mapping):
            self._record(self.incompatible, resource)
            return None
        return preset

    @property
    def resources(self) -> HintResources:
        return HintResources(missing=list(self.missing), incompatible=list(self.incompatible))


def installed_resources() -> dict[str, list[str]]:
    """List registered plugin names per kind, built-ins included."""
    listing: dict[str, list[str]] = {}
    for kind, group in GROUPS.items():
        names = {ep.name for ep in entry_points(group=group)}
        if kind == "formatter":
            names.update(BUILTIN_FORMATTERS)
        if kind == "configuration":
            names.update(BUILTIN_PRESETS)
        listing[kind] = sorted(names)
    return listing
