"""Interactive yes/no prompts.

Prompts gate the whole run, so ``ConsolePrompter`` serializes them with
an ``asyncio.Lock``: at most one question is outstanding at any time.
The terminal read runs in a worker thread so the event loop keeps
serving other tasks while a question waits for an answer.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

import click

logger = logging.getLogger(__name__)


class Prompter(Protocol):
    """Asks the user a yes/no question."""

    async def ask(self, question: str) -> bool: ...


class ConsolePrompter:
    """Ask on the terminal via ``click.confirm`` (written to stderr)."""

    def __init__(self, default: bool = False) -> None:
        self.default = default
        self._lock = asyncio.Lock()

    async def ask(self, question: str) -> bool:
        async with self._lock:
            logger.debug("Prompting: %s", question)
            try:
                return await asyncio.to_thread(
                    click.confirm, question, default=self.default, err=True,
                )
            except click.Abort:
                # Ctrl-C / EOF on stdin counts as "no".
                return False
