"""Built-in configuration presets and hint normalization.

A preset is a configuration mapping other configurations can ``extends``.
Two ship with the core: ``development`` for local files and
``web-recommended`` for live sites. Further presets come from the
``hintscan.configurations`` entry-point group (see ``resources``).

Hint declarations accept two shapes::

    hints:
      axe: error                        # id -> severity
      sri: [warning, {algorithm: sha384}]   # id -> [severity, options]

    hints: [axe, "?sri", "-doctype"]    # shorthand list

In the list form a bare id means ``error``, a ``?`` prefix ``warning``
and a ``-`` prefix ``off``.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from hintscan.core.config.models import UserConfig

BUILTIN_PRESETS: dict[str, dict[str, Any]] = {
    "development": {
        "connector": {"name": "local", "options": {}},
        "formatters": ["stylish"],
        "parsers": ["css", "html", "javascript"],
        "hints": {
            "axe": "error",
            "button-type": "warning",
            "doctype": "error",
            "meta-charset-utf-8": "warning",
            "meta-viewport": "warning",
            "no-inline-styles": "hint",
        },
    },
    "web-recommended": {
        "connector": {"name": "browser", "options": {}},
        "formatters": ["stylish"],
        "browserslist": ["defaults", "not ie 11"],
        "hints": {
            "axe": "error",
            "content-type": "error",
            "http-compression": "warning",
            "https-only": "error",
            "no-vulnerable-javascript-libraries": "error",
            "sri": "warning",
            "strict-transport-security": "error",
            "x-content-type-options": "error",
        },
    },
}

_LIST_PREFIXES: dict[str, str] = {"?": "warning", "-": "off"}


def normalize_hints(hints: Mapping[str, Any] | list[Any] | None) -> dict[str, Any]:
    """Convert either hint shape into ``id -> severity | [severity, options]``."""
    if not hints:
        return {}
    if isinstance(hints, Mapping):
        return dict(hints)
    if not isinstance(hints, list):
        return {}

    normalized: dict[str, Any] = {}
    for entry in hints:
        if isinstance(entry, list) and entry and isinstance(entry[0], str):
            hint_id, severity = _split_prefix(entry[0])
            normalized[hint_id] = [severity, *entry[1:]]
        elif isinstance(entry, str):
            hint_id, severity = _split_prefix(entry)
            normalized[hint_id] = severity
    return normalized


def _split_prefix(entry: str) -> tuple[str, str]:
    prefix = entry[:1]
    if prefix in _LIST_PREFIXES:
        return entry[1:], _LIST_PREFIXES[prefix]
    return entry, "error"


def hint_severity(value: Any) -> Any:
    """Return the severity part of a hint declaration, dropping options."""
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


PresetLookup = Callable[[str], "Mapping[str, Any] | None"]


def builtin_preset(name: str) -> Mapping[str, Any] | None:
    return BUILTIN_PRESETS.get(name)


def expand_config(
    config: UserConfig,
    lookup: PresetLookup = builtin_preset,
    _seen: frozenset[str] = frozenset(),
) -> UserConfig:
    """Flatten ``extends`` into a single configuration.

    Presets are applied in order and the configuration's own values win.
    Hint maps are merged key by key rather than replaced. Unknown preset
    names are skipped; resource resolution reports them.
    """
    merged: dict[str, Any] = {}
    hints: dict[str, Any] = {}
    for name in config.extends:
        if name in _seen:
            continue
        preset = lookup(name)
        if preset is None:
            continue
        inner = expand_config(UserConfig.from_dict(dict(preset)), lookup, _seen | {name})
        inner_dict = inner.to_dict()
        hints.update(normalize_hints(inner_dict.pop("hints", None)))
        merged.update(inner_dict)

    own = config.to_dict()
    own.pop("extends", None)
    hints.update(normalize_hints(own.pop("hints", None)))
    merged.update(own)
    merged.pop("extends", None)
    if hints:
        merged["hints"] = hints
    return UserConfig.from_dict(merged)


def hints_from_configuration(
    config: UserConfig,
    lookup: PresetLookup = builtin_preset,
) -> dict[str, Any]:
    """Return the effective ``id -> declaration`` map, presets included."""
    return normalize_hints(expand_config(config, lookup).hints)


def is_off(declaration: Any) -> bool:
    """True when a hint declaration disables the hint."""
    severity = hint_severity(declaration)
    if isinstance(severity, str):
        return severity.strip().lower() == "off"
    return severity == 0 and not isinstance(severity, bool)
