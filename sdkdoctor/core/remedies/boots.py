"""
Installer remedy — install a sequence of packages by URL.

Each entry is a ``(url, title)`` pair handed to an Installer one at a
time. Progress is ``index / total`` with a 1-based index, and entries
with an empty URL still advance the index, so the fraction is monotonic
even when some entries are skipped.

Installs are not transactional: a failure leaves earlier installs in
place.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sdkdoctor.adapters.base import Installer
from sdkdoctor.core.engine.cancellation import CancellationToken
from sdkdoctor.core.models.config import RemedyDefinition
from sdkdoctor.core.remedies.base import Remedy

logger = logging.getLogger(__name__)


class BootsRemedy(Remedy):
    """Install packages from URLs through an Installer."""

    def __init__(
        self,
        installer: Installer,
        urls: Iterable[tuple[str | None, str | None]],
        name: str | None = None,
    ):
        super().__init__(name=name)
        self.installer = installer
        self.urls: list[tuple[str, str]] = [(url or "", title or "") for url, title in urls]

    @classmethod
    def from_definition(cls, definition: RemedyDefinition, installer: Installer) -> BootsRemedy:
        """Build a remedy from a doctor.yml remedy entry."""
        return cls(
            installer,
            [(entry.url, entry.title) for entry in definition.urls],
            name=definition.name,
        )

    async def cure(self, token: CancellationToken) -> None:
        total = len(self.urls)

        for index, (url, title) in enumerate(self.urls, start=1):
            if not url:
                logger.debug("%s: entry %d has no URL, skipping", self.name, index)
                continue

            token.raise_if_cancelled()
            self.report_status(title or url, index / total)

            await self.installer.install(url, token)
