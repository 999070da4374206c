"""
Installer base — the contract between remedies and installers.

Remedies never download or launch installers themselves; they hand a
URL to an Installer. The installer is an opaque capability: fetch the
package at the URL and run it, honouring the cancellation token.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from sdkdoctor.core.engine.cancellation import CancellationToken


class InstallerError(Exception):
    """Raised when an install step fails (download, launch, exit code)."""


class Installer(ABC):
    """Abstract base class for installers.

    To create a new installer:
        1. Subclass Installer
        2. Implement name, is_available, install
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The installer identifier (e.g., 'bootstrapper', 'mock')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check whether this installer can run on the host.

        Should be fast and never raise.
        """

    @abstractmethod
    async def install(self, url: str, token: CancellationToken) -> None:
        """Fetch and run the installer at ``url``.

        Raises InstallerError on failure and OperationCancelled when
        the token fires at a suspension point.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
