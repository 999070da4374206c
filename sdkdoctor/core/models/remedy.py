"""
Remedy status and receipt models — the remedy execution contract.

Remedies move through ``created → running → {succeeded, failed,
cancelled}``. The engine turns each run into a RemedyReceipt, so
callers read outcomes from receipts, never from exceptions.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class RemedyStatus(str, Enum):
    CREATED = "created"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def terminal(self) -> bool:
        return self in (RemedyStatus.SUCCEEDED, RemedyStatus.FAILED, RemedyStatus.CANCELLED)


class RemedyReceipt(BaseModel):
    """Outcome of running one remedy.

    ``skipped`` is used for remedies the engine never started because
    an earlier remedy failed or the run was cancelled.
    """

    remedy: str
    status: Literal["succeeded", "failed", "cancelled", "skipped"] = "succeeded"

    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    progress: float = 0.0
    last_message: str = ""
    error: str | None = None

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the remedy succeeded."""
        return self.status == "succeeded"

    @property
    def failed(self) -> bool:
        """Whether the remedy failed."""
        return self.status == "failed"

    @property
    def cancelled(self) -> bool:
        return self.status == "cancelled"

    @classmethod
    def success(cls, remedy: str, **kwargs: Any) -> RemedyReceipt:
        """Create a success receipt."""
        return cls(remedy=remedy, status="succeeded", **kwargs)

    @classmethod
    def failure(cls, remedy: str, error: str, **kwargs: Any) -> RemedyReceipt:
        """Create a failure receipt."""
        return cls(remedy=remedy, status="failed", error=error, **kwargs)

    @classmethod
    def cancel(cls, remedy: str, **kwargs: Any) -> RemedyReceipt:
        """Create a cancellation receipt."""
        return cls(remedy=remedy, status="cancelled", **kwargs)

    @classmethod
    def skip(cls, remedy: str, reason: str = "", **kwargs: Any) -> RemedyReceipt:
        """Create a skip receipt."""
        return cls(remedy=remedy, status="skipped", last_message=reason, **kwargs)
