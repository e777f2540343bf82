"""Telemetry Gate and client.

Public names::

    from hintscan.core.telemetry import TelemetryClient, TelemetryGate
"""

from hintscan.core.telemetry.client import TelemetryClient, TelemetryState
from hintscan.core.telemetry.gate import TelemetryGate, prune_user_config
from hintscan.core.telemetry.transport import HttpTransport

__all__ = [
    "HttpTransport",
    "TelemetryClient",
    "TelemetryGate",
    "TelemetryState",
    "prune_user_config",
]
