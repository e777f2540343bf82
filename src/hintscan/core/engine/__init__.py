"""Engine boundary: analyzer construction, plugins and formatting.

The orchestrator treats everything in this package as an external
collaborator. It only relies on:

- ``create_analyzer(config, options)`` raising ``AnalyzerError`` with a
  classified ``status``;
- ``Analyzer.analyze(targets)`` yielding ``TargetStart`` /
  ``TargetUpdate`` / ``TargetEnd`` events;
- ``Analyzer.format(problems, options)`` and ``Analyzer.resources``.

Submodules
----------
- ``models``: Severity, Problem, HintResources, progress events.
- ``plugins``: Plugin protocols and API version.
- ``presets``: Built-in presets and hint normalization.
- ``resources``: Entry-point plugin resolution.
- ``schema``: Structural configuration checks.
- ``formatters``: Built-in ``stylish`` and ``json`` formatters.
- ``analyzer``: ``Analyzer`` and ``create_analyzer``.
"""

from hintscan.core.engine.analyzer import Analyzer, create_analyzer
from hintscan.core.engine.models import (
    FormatOptions,
    HintResources,
    Problem,
    ProgressEvent,
    Severity,
    TargetEnd,
    TargetStart,
    TargetUpdate,
)

__all__ = [
    "Analyzer",
    "FormatOptions",
    "HintResources",
    "Problem",
    "ProgressEvent",
    "Severity",
    "TargetEnd",
    "TargetStart",
    "TargetUpdate",
    "create_analyzer",
]
