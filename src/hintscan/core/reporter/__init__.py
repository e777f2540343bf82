"""Run & progress reporting for analysis runs."""

from hintscan.core.reporter.progress import Spinner
from hintscan.core.reporter.reporter import ScanReporter, has_error

__all__ = ["ScanReporter", "Spinner", "has_error"]
