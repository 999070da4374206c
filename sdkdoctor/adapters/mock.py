"""
Mock installer — test double for installer operations.

Records every URL it is asked to install without touching the network
or launching processes. Configurable to fail specific URLs or to block
until cancelled.
"""

from __future__ import annotations

import asyncio

from sdkdoctor.adapters.base import Installer, InstallerError
from sdkdoctor.core.engine.cancellation import CancellationToken


class MockInstaller(Installer):
    """Installer that succeeds by default and logs its calls."""

    def __init__(self, installer_name: str = "mock", available: bool = True):
        self._name = installer_name
        self._available = available
        self._failures: dict[str, str] = {}
        self._blocking: set[str] = set()
        self._call_log: list[str] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[str]:
        """All URLs this mock has been asked to install."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def is_available(self) -> bool:
        return self._available

    def set_failure(self, url: str, error: str = "Mock install failure") -> None:
        """Configure a specific URL to fail."""
        self._failures[url] = error

    def set_blocking(self, url: str) -> None:
        """Configure a URL to hang until the token is cancelled."""
        self._blocking.add(url)

    async def install(self, url: str, token: CancellationToken) -> None:
        self._call_log.append(url)
        token.raise_if_cancelled()

        if url in self._blocking:
            await token.run(asyncio.Event().wait())

        if url in self._failures:
            raise InstallerError(self._failures[url])

    def reset(self) -> None:
        """Clear call log and configured behaviour."""
        self._call_log.clear()
        self._failures.clear()
        self._blocking.clear()
