"""Telemetry client with an explicit lifecycle.

One ``TelemetryClient`` is built per process from the persistent store
and handed to every component that reports events. Its state is one of:

- ``UNINITIALIZED``: the user was never asked (no ``telemetry`` key).
- ``DISABLED``: the user declined, or forced tracking off.
- ``ENABLED``: the user opted in, or forced tracking on.

``track`` only buffers while ENABLED; ``flush`` hands the buffer to the
transport. Nothing is sent until ``flush`` is awaited.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from hintscan import __version__
from hintscan.core.store import ConfigStore
from hintscan.core.telemetry.transport import HttpTransport, Transport

logger = logging.getLogger(__name__)

TELEMETRY_KEY = "telemetry"
OPT_IN_KEY = "telemetry-opt-in"
OPT_IN_EVENT = "cli-telemetry"


class TelemetryState(Enum):
    """Lifecycle of the telemetry client."""

    UNINITIALIZED = "uninitialized"
    DISABLED = "disabled"
    ENABLED = "enabled"


class TelemetryClient:
    """Consent-aware event buffer.

    Example::

        client = TelemetryClient.from_store(ConfigStore())
        client.track("cli-analyze", {"ci": False})
        await client.flush()
    """

    def __init__(
        self,
        store: ConfigStore,
        transport: Transport | None = None,
        state: TelemetryState = TelemetryState.UNINITIALIZED,
    ) -> None:
        self.store = store
        self.transport = transport or HttpTransport()
        self.state = state
        self._pending: list[dict[str, Any]] = []

    @classmethod
    def from_store(cls, store: ConfigStore, transport: Transport | None = None) -> TelemetryClient:
        """Build a client whose state reflects the persisted consent."""
        value = store.get(TELEMETRY_KEY)
        if value is None:
            state = TelemetryState.UNINITIALIZED
        else:
            state = TelemetryState.ENABLED if value else TelemetryState.DISABLED
        return cls(store, transport, state)

    def is_configured(self) -> bool:
        """True once the user has made a choice."""
        return self.state is not TelemetryState.UNINITIALIZED

    def is_enabled(self) -> bool:
        return self.state is TelemetryState.ENABLED

    def enable(self) -> None:
        """Persist consent and start buffering events.

        The first time telemetry is ever enabled, an opt-in event is queued
        ahead of every other event.
        """
        self._persist(TELEMETRY_KEY, True)
        self.state = TelemetryState.ENABLED
        if not self.store.get(OPT_IN_KEY):
            self._persist(OPT_IN_KEY, True)
            self._pending.insert(0, self._event(OPT_IN_EVENT, None, None))

    def disable(self) -> None:
        """Persist refusal and drop anything buffered."""
        self._persist(TELEMETRY_KEY, False)
        self.state = TelemetryState.DISABLED
        self._pending.clear()

    def _persist(self, key: str, value: Any) -> None:
        # Telemetry state never decides the outcome of a run.
        try:
            self.store.set(key, value)
        except OSError as exc:
            logger.warning("Cannot save telemetry preference to %s: %s", self.store.path, exc)

    @staticmethod
    def _event(
        name: str,
        properties: dict[str, Any] | None,
        measurements: dict[str, float] | None,
    ) -> dict[str, Any]:
        return {
            "name": name,
            "time": datetime.now(timezone.utc).isoformat(),
            "version": __version__,
            "properties": dict(properties or {}),
            "measurements": dict(measurements or {}),
        }

    def track(
        self,
        name: str,
        properties: dict[str, Any] | None = None,
        measurements: dict[str, float] | None = None,
    ) -> None:
        """Buffer one event; a no-op unless telemetry is enabled."""
        if not self.is_enabled():
            return
        logger.debug("Tracking telemetry event %s", name)
        self._pending.append(self._event(name, properties, measurements))

    @property
    def pending(self) -> list[dict[str, Any]]:
        """Events buffered and not yet flushed."""
        return list(self._pending)

    async def flush(self) -> bool:
        """Send buffered events; return True if nothing was left unsent."""
        if not self._pending:
            return True
        if not self.is_enabled():
            self._pending.clear()
            return True
        events, self._pending = self._pending, []
        sent = await self.transport.send(events)
        if not sent:
            logger.debug("Dropped %d telemetry events", len(events))
        return sent
