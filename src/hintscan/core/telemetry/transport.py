"""Telemetry transport over HTTP.

A thin wrapper around ``httpx.AsyncClient`` with a fixed timeout and
user agent. Delivery is best effort: every failure is logged at WARNING
and swallowed, because telemetry must never change the outcome of a run.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Protocol

import httpx

from hintscan import __version__
from hintscan.core.config.environment import TELEMETRY_ENDPOINT_ENV

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT: str = "https://telemetry.hintscan.dev/v1/events"

# Timeout for telemetry requests (seconds).
DEFAULT_TIMEOUT: float = 5.0

USER_AGENT: str = f"hintscan-cli/{__version__}"


class Transport(Protocol):
    """Delivers a batch of events somewhere."""

    async def send(self, events: list[dict[str, Any]]) -> bool: ...


class HttpTransport:
    """POST event batches as JSON to a collection endpoint."""

    def __init__(self, endpoint: str | None = None, *, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.endpoint = endpoint or os.environ.get(TELEMETRY_ENDPOINT_ENV) or DEFAULT_ENDPOINT
        self.timeout = timeout

    async def send(self, events: list[dict[str, Any]]) -> bool:
        """Send ``events``; return True when the endpoint accepted them."""
        if not events:
            return True
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                headers={"User-Agent": USER_AGENT},
            ) as client:
                resp = await client.post(self.endpoint, json={"events": events})
                resp.raise_for_status()
                return True
        except httpx.TimeoutException:
            logger.warning("Timeout sending telemetry to %s", self.endpoint)
        except httpx.HTTPStatusError as exc:
            logger.warning("HTTP %d from telemetry endpoint", exc.response.status_code)
        except httpx.RequestError as exc:
            logger.warning("Telemetry request error: %s", exc)
        return False
