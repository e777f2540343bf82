"""Analyzer Bootstrap State Machine.

Public names::

    from hintscan.core.bootstrap import AnalyzerBootstrap, BootstrapState, PipInstaller
"""

from hintscan.core.bootstrap.installer import PipInstaller
from hintscan.core.bootstrap.machine import AnalyzerBootstrap, BootstrapState

__all__ = [
    "AnalyzerBootstrap",
    "BootstrapState",
    "PipInstaller",
]
