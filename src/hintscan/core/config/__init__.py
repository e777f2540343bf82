"""Configuration Resolver.

Turns command-line options and targets into the effective ``UserConfig``:
file discovery and parsing (``loader``), default presets and language
resolution (``resolver``), environment checks and overrides
(``environment``), target normalization (``targets``).

Public names::

    from hintscan.core.config import CLIOptions, UserConfig, resolve
"""

from hintscan.core.config.models import (
    CLIOptions,
    ConnectorConfig,
    CreateAnalyzerOptions,
    UserConfig,
)
from hintscan.core.config.resolver import default_configuration, resolve
from hintscan.core.config.targets import get_as_uris

__all__ = [
    "CLIOptions",
    "ConnectorConfig",
    "CreateAnalyzerOptions",
    "UserConfig",
    "default_configuration",
    "get_as_uris",
    "resolve",
]
