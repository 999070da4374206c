"""
Remedy base — the contract between the engine and repair actions.

A remedy is one automated fix with observable status and progress.
Subclasses implement ``cure``; the engine owns the lifecycle and
always applies ``start`` before delegating to ``cure``.

To create a new remedy:
    1. Subclass Remedy
    2. Implement ``async cure(token)``, calling ``token.raise_if_cancelled()``
       (or awaiting through ``token.run``) at every suspension point
    3. Report progress with ``self.report_status(message, fraction)``
"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import UTC, datetime

from sdkdoctor.core.engine.cancellation import CancellationToken
from sdkdoctor.core.models.remedy import RemedyStatus

logger = logging.getLogger(__name__)

# (remedy name, message, fraction)
StatusListener = Callable[[str, str, float], None]


class Remedy(ABC):
    """Abstract base class for all remedies."""

    def __init__(self, name: str | None = None):
        self.name = name or self.__class__.__name__
        self.status = RemedyStatus.CREATED
        self.progress = 0.0
        self.last_message = ""
        self.started_at: datetime | None = None
        self.history: list[tuple[str, float]] = []
        self._listener: StatusListener | None = None

    def attach(self, listener: StatusListener | None) -> None:
        """Route status reports to an external presentation layer."""
        self._listener = listener

    def start(self, token: CancellationToken) -> None:
        """Common start step: created → running.

        Raises OperationCancelled if the run was cancelled before the
        remedy got a chance to start.
        """
        if self.status != RemedyStatus.CREATED:
            raise RuntimeError(
                f"Remedy '{self.name}' cannot start from state '{self.status.value}'"
            )
        token.raise_if_cancelled()

        self.status = RemedyStatus.RUNNING
        self.started_at = datetime.now(UTC)
        logger.info("Remedy %s started", self.name)

    def finish(self, status: RemedyStatus) -> None:
        if not status.terminal:
            raise ValueError(f"Not a terminal state: {status.value}")
        self.status = status
        logger.info("Remedy %s → %s", self.name, status.value)

    def report_status(self, message: str, progress: float) -> None:
        """Record a status message and progress fraction.

        Out-of-range or non-numeric fractions are clamped/ignored and
        listener errors are logged; reporting never fails the remedy.
        """
        try:
            fraction = float(progress)
        except (TypeError, ValueError):
            fraction = self.progress
        if math.isnan(fraction):
            fraction = self.progress
        fraction = min(1.0, max(0.0, fraction))

        self.progress = fraction
        self.last_message = message
        self.history.append((message, fraction))
        logger.debug("%s: %s (%.0f%%)", self.name, message, fraction * 100)

        if self._listener is not None:
            try:
                self._listener(self.name, message, fraction)
            except Exception as e:
                logger.warning("Status listener failed for %s: %s", self.name, e)

    @abstractmethod
    async def cure(self, token: CancellationToken) -> None:
        """Perform the remedy's work.

        Raise on failure. Raise OperationCancelled (or let
        asyncio.CancelledError propagate) when cancelled.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r} status={self.status.value}>"
