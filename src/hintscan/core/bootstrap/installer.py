"""Package installation for missing and incompatible plugins.

Resource names map to distributions with ``resources.package_name``
(``hint-sri`` -> ``hintscan-hint-sri``). Installation runs
``python -m pip install`` with the current interpreter as a subprocess so
the event loop is never blocked.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import Sequence
from typing import Protocol

from hintscan.core.engine.resources import package_name
from hintscan.exceptions import InstallError

logger = logging.getLogger(__name__)


class Installer(Protocol):
    """Installs plugin packages by resource name."""

    async def install(self, resources: Sequence[str], *, upgrade: bool = False) -> bool: ...


class PipInstaller:
    """Install plugin distributions with pip."""

    def __init__(self, python: str | None = None) -> None:
        self.python = python or sys.executable

    def command(self, resources: Sequence[str], *, upgrade: bool = False) -> list[str]:
        """Build the pip command line for ``resources``."""
        cmd = [self.python, "-m", "pip", "install", "--disable-pip-version-check"]
        if upgrade:
            cmd.append("--upgrade")
        cmd.extend(package_name(r) for r in resources)
        return cmd

    async def install(self, resources: Sequence[str], *, upgrade: bool = False) -> bool:
        """Install ``resources``; return True on success.

        An empty list succeeds trivially.

        Raises:
            InstallError: If the interpreter cannot be started at all.
        """
        if not resources:
            return True

        cmd = self.command(resources, upgrade=upgrade)
        logger.debug("Running: %s", " ".join(cmd))
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise InstallError(f"Cannot run {self.python}: {exc}") from exc

        _, stderr = await proc.communicate()
        if proc.returncode != 0:
            logger.warning(
                "pip exited with %d installing %s: %s",
                proc.returncode, ", ".join(resources),
                stderr.decode("utf-8", errors="replace").strip(),
            )
            return False
        return True
