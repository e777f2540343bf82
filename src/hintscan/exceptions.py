"""hintscan exception hierarchy.

All public exceptions inherit from HintScanError, giving callers a single
base class to catch when they want to handle any hintscan-specific failure
without swallowing unrelated errors.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hintscan.core.engine.models import HintResources


class HintScanError(Exception):
    """Base exception for all hintscan errors."""


class UsageError(HintScanError):
    """Raised for invocations that can never produce a valid run.

    Covers mixing local files with remote URLs in the same analysis.
    """


class ConfigurationFileError(HintScanError):
    """Raised when a configuration file cannot be read or parsed.

    Covers missing explicit paths, YAML/JSON syntax errors and documents
    whose top level is not a mapping. Not recoverable by default
    substitution.
    """


class InstallError(HintScanError):
    """Raised when the package installer itself cannot be started."""


class AnalyzerErrorStatus(Enum):
    """Classification of a failed analyzer construction."""

    CONFIGURATION_ERROR = "ConfigurationError"
    RESOURCE_ERROR = "ResourceError"
    HINT_ERROR = "HintError"
    CONNECTOR_ERROR = "ConnectorError"


class AnalyzerError(HintScanError):
    """Raised by ``create_analyzer`` when an analyzer cannot be built.

    Attributes:
        status: Which part of the configuration failed.
        resources: Missing and incompatible packages (RESOURCE_ERROR only).
        invalid_hints: Offending hint ids (HINT_ERROR only).
    """

    def __init__(
        self,
        message: str,
        status: AnalyzerErrorStatus,
        *,
        resources: HintResources | None = None,
        invalid_hints: list[str] | None = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.resources = resources
        self.invalid_hints = invalid_hints or []
