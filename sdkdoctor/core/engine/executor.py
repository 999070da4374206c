"""
Engine executor — the remedy orchestration loop.

Takes an ordered list of remedies and runs them strictly one at a
time, applying the common start step before each ``cure``, mapping
every outcome to a RemedyReceipt, and stopping at the first failure
or cancellation.

Flow:
    remedies → start → cure → receipt → report
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime

from sdkdoctor.core.engine.cancellation import CancellationToken, OperationCancelled
from sdkdoctor.core.models.remedy import RemedyReceipt, RemedyStatus
from sdkdoctor.core.remedies.base import Remedy, StatusListener

logger = logging.getLogger(__name__)


@dataclass
class RemedyReport:
    """Result of running a list of remedies."""

    operation_id: str = ""
    receipts: list[RemedyReceipt] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.receipts)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.receipts if r.ok)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.receipts if r.failed)

    @property
    def cancelled(self) -> bool:
        return any(r.cancelled for r in self.receipts)

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.receipts if r.status == "skipped")

    @property
    def failed_remedy(self) -> str | None:
        """Name of the remedy that failed, if any."""
        for receipt in self.receipts:
            if receipt.failed:
                return receipt.remedy
        return None

    @property
    def all_ok(self) -> bool:
        return self.succeeded == self.total

    @property
    def status(self) -> str:
        if self.cancelled:
            return "cancelled"
        if self.failed == 0:
            return "ok"
        if self.succeeded > 0:
            return "partial"
        return "failed"

    def to_dict(self) -> dict:
        return {
            "operation_id": self.operation_id,
            "status": self.status,
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "skipped": self.skipped,
            "failed_remedy": self.failed_remedy,
            "receipts": [r.model_dump(mode="json") for r in self.receipts],
        }


async def run_remedy(
    remedy: Remedy,
    token: CancellationToken,
    on_status: StatusListener | None = None,
) -> RemedyReceipt:
    """Run one remedy to a terminal state.

    Remedy failures and token cancellation come back as receipts.
    Cancelling the enclosing task leaves the remedy ``cancelled`` and
    re-raises asyncio.CancelledError.

    Args:
        remedy: A remedy in the ``created`` state.
        token: Cancellation token shared with the caller.
        on_status: Optional listener for status reports.

    Returns:
        RemedyReceipt describing the outcome.
    """
    start = time.monotonic()
    started_at = datetime.now(UTC).isoformat()
    remedy.attach(on_status)

    def _receipt(factory, **kwargs) -> RemedyReceipt:
        return factory(
            remedy.name,
            started_at=started_at,
            duration_ms=int((time.monotonic() - start) * 1000),
            progress=remedy.progress,
            last_message=remedy.last_message,
            **kwargs,
        )

    try:
        remedy.start(token)
        if on_status is not None:
            try:
                on_status(remedy.name, f"Starting {remedy.name}", 0.0)
            except Exception as e:
                logger.warning("Status listener failed for %s: %s", remedy.name, e)

        await remedy.cure(token)

    except OperationCancelled:
        remedy.finish(RemedyStatus.CANCELLED)
        return _receipt(RemedyReceipt.cancel)
    except asyncio.CancelledError:
        # Task cancellation, not the token; propagate after recording it.
        remedy.finish(RemedyStatus.CANCELLED)
        logger.info("Remedy %s interrupted by task cancellation", remedy.name)
        raise
    except Exception as e:
        if remedy.status == RemedyStatus.RUNNING:
            remedy.finish(RemedyStatus.FAILED)
        logger.error("Remedy %s failed: %s", remedy.name, e)
        return _receipt(RemedyReceipt.failure, error=str(e) or e.__class__.__name__)
    finally:
        remedy.attach(None)

    # A remedy that swallowed cancellation still must not report success.
    if token.is_cancelled:
        remedy.finish(RemedyStatus.CANCELLED)
        return _receipt(RemedyReceipt.cancel)

    remedy.finish(RemedyStatus.SUCCEEDED)
    return _receipt(RemedyReceipt.success)


async def run_remedies(
    remedies: Sequence[Remedy],
    token: CancellationToken | None = None,
    on_status: StatusListener | None = None,
    operation_id: str | None = None,
) -> RemedyReport:
    """Run remedies sequentially in the order supplied.

    After a failure or cancellation, the remaining remedies are not
    started and get ``skipped`` receipts. Task cancellation propagates
    out of here; use the token to get a report back.
    """
    token = token or CancellationToken()
    report = RemedyReport(operation_id=operation_id or generate_operation_id())

    halted_by: str | None = None
    for remedy in remedies:
        if halted_by is not None:
            report.receipts.append(
                RemedyReceipt.skip(remedy.name, reason=f"Not run: {halted_by}")
            )
            continue

        receipt = await run_remedy(remedy, token, on_status)
        report.receipts.append(receipt)

        status_marker = "✓" if receipt.ok else "✗" if receipt.failed else "⊘"
        logger.info("%s %s → %s", status_marker, remedy.name, receipt.status)

        if receipt.failed:
            halted_by = f"'{remedy.name}' failed"
        elif receipt.cancelled:
            halted_by = "run cancelled"

    return report


def generate_operation_id() -> str:
    """Generate a unique operation ID."""
    now = datetime.now(UTC).strftime("%Y%m%d-%H%M%S")
    short = uuid.uuid4().hex[:6]
    return f"op-{now}-{short}"
