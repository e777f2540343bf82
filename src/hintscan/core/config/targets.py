"""Target normalization: turn command-line sources into URLs.

Every target is identified by its normalized URL string. Local paths
become ``file:`` URIs, bare hosts get ``https://``. Duplicates are
dropped so each identity appears once per run.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from urllib.parse import urlparse, urlunparse

logger = logging.getLogger(__name__)

_SCHEMES = frozenset({"http", "https", "file"})


def get_as_uri(source: str) -> str | None:
    """Normalize one source string, or return None if it is not usable."""
    source = source.strip()
    if not source:
        return None

    parsed = urlparse(source)
    if parsed.scheme.lower() in _SCHEMES:
        if parsed.scheme.lower() != "file" and not parsed.netloc:
            logger.debug("Ignoring target without host: %s", source)
            return None
        path = parsed.path or ("/" if parsed.scheme.lower() != "file" else "")
        return urlunparse(parsed._replace(scheme=parsed.scheme.lower(),
                                          netloc=parsed.netloc.lower(),
                                          path=path))

    path = Path(source).expanduser()
    try:
        if path.exists():
            return path.resolve().as_uri()
    except (PermissionError, OSError):
        pass

    # "host:port" parses with the host as scheme; only "://" marks a real one.
    if "://" in source:
        logger.debug("Ignoring target with unsupported scheme: %s", source)
        return None

    return get_as_uri(f"https://{source}")


def get_as_uris(sources: Iterable[str]) -> list[str]:
    """Normalize many sources, dropping invalid ones and duplicates."""
    seen: set[str] = set()
    targets: list[str] = []
    for source in sources:
        uri = get_as_uri(source)
        if uri is None or uri in seen:
            continue
        seen.add(uri)
        targets.append(uri)
    return targets


def is_file_target(target: str) -> bool:
    return urlparse(target).scheme == "file"


def are_files(targets: Iterable[str]) -> bool:
    """True when every target uses the ``file:`` scheme."""
    return all(is_file_target(t) for t in targets)


def any_file(targets: Iterable[str]) -> bool:
    """True when at least one target uses the ``file:`` scheme."""
    return any(is_file_target(t) for t in targets)
