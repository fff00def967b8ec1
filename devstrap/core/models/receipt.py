"""
Receipt model — the outcome of one provisioning action.

Steps never raise for tool failures: every check or install produces a
Receipt, and the sequencer decides from the receipt and the step's
failure policy whether to keep going.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

ReceiptStatus = Literal["ok", "present", "skipped", "failed", "tolerated", "pending"]


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class Receipt(BaseModel):
    """Result of a single check-then-act action.

    Status values:
        ok         the action ran and changed the machine
        present    the target was already satisfied, nothing ran
        skipped    declined by the operator or suppressed by dry-run
        failed     the underlying command failed
        tolerated  failed, but the step's policy downgraded it to a warning
        pending    a manual action is outstanding, the run must stop
    """

    step: str
    target: str = ""
    status: ReceiptStatus = "ok"

    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    output: str = ""
    error: str | None = None
    return_code: int | None = None

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the action succeeded or was already satisfied."""
        return self.status in ("ok", "present")

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @property
    def changed(self) -> bool:
        """Whether the action mutated the machine."""
        return self.status == "ok"

    @classmethod
    def success(cls, step: str, target: str = "", output: str = "", **kwargs: Any) -> Receipt:
        """Create a success receipt."""
        return cls(step=step, target=target, status="ok", output=output, **kwargs)

    @classmethod
    def present(cls, step: str, target: str = "", output: str = "", **kwargs: Any) -> Receipt:
        """Create an already-satisfied receipt."""
        return cls(step=step, target=target, status="present", output=output, **kwargs)

    @classmethod
    def failure(cls, step: str, target: str = "", error: str = "", **kwargs: Any) -> Receipt:
        """Create a failure receipt."""
        return cls(step=step, target=target, status="failed", error=error, **kwargs)

    @classmethod
    def skip(cls, step: str, target: str = "", reason: str = "", **kwargs: Any) -> Receipt:
        """Create a skip receipt."""
        return cls(step=step, target=target, status="skipped", output=reason, **kwargs)

    @classmethod
    def pending(cls, step: str, target: str = "", reason: str = "", **kwargs: Any) -> Receipt:
        """Create a receipt for a manual action the operator must finish."""
        return cls(step=step, target=target, status="pending", output=reason, **kwargs)

    def tolerate(self) -> Receipt:
        """Return a copy of a failed receipt downgraded to a warning."""
        return self.model_copy(update={"status": "tolerated"})
