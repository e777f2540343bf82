"""hintscan: Analysis-run orchestrator for web and file linting."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"
