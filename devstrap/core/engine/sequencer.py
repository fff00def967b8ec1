"""
Provisioning sequencer — the central loop.

Walks an ordered list of steps, one at a time.  Each step yields
receipts (one per descriptor or action) and carries a failure policy:

    ABORT      a failed receipt stops the whole sequence
    TOLERATE   a failed receipt becomes 'tolerated', is reported as a
               warning, and the step moves on to its next descriptor

A 'pending' receipt (manual action outstanding) also stops the
sequence, without counting as a failure.

Flow:
    step → receipts → policy → report
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from devstrap.adapters.base import PackageManager
from devstrap.core.engine.context import ProvisionContext
from devstrap.core.models.catalog import Descriptor, PackageGroup
from devstrap.core.models.receipt import Receipt

logger = logging.getLogger(__name__)


class FailurePolicy(str, Enum):
    ABORT = "abort"
    TOLERATE = "tolerate"


StepRunner = Callable[[ProvisionContext], Iterable[Receipt]]


@dataclass
class Step:
    """One entry of the provisioning sequence."""

    id: str
    title: str
    run: StepRunner
    policy: FailurePolicy = FailurePolicy.ABORT


@dataclass
class SequenceReport:
    """Result of running a sequence."""

    receipts: list[Receipt] = field(default_factory=list)
    completed_steps: list[str] = field(default_factory=list)
    halted_by: Receipt | None = None
    pending_by: Receipt | None = None

    def _count(self, status: str) -> int:
        return sum(1 for r in self.receipts if r.status == status)

    @property
    def changed(self) -> int:
        return self._count("ok")

    @property
    def present(self) -> int:
        return self._count("present")

    @property
    def skipped(self) -> int:
        return self._count("skipped")

    @property
    def tolerated(self) -> int:
        return self._count("tolerated")

    @property
    def failed(self) -> int:
        return self._count("failed")

    @property
    def status(self) -> str:
        if self.halted_by is not None:
            return "failed"
        if self.pending_by is not None:
            return "pending"
        return "ok"

    @property
    def exit_code(self) -> int:
        """Process exit status for this report.

        A halted run exits with the failing command's return code (1
        when unknown).  Completed and pending runs exit 0.
        """
        if self.halted_by is None:
            return 0
        code = self.halted_by.return_code
        return code if code else 1

    def receipts_for(self, step_id: str) -> list[Receipt]:
        return [r for r in self.receipts if r.step == step_id]

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "exit_code": self.exit_code,
            "changed": self.changed,
            "present": self.present,
            "skipped": self.skipped,
            "tolerated": self.tolerated,
            "failed": self.failed,
            "completed_steps": self.completed_steps,
            "receipts": [r.model_dump(mode="json") for r in self.receipts],
        }


def failure_message(receipt: Receipt) -> str:
    """Operator-facing text for a failed receipt."""
    message = receipt.metadata.get("message")
    if message:
        return str(message)
    target = f" {receipt.target}" if receipt.target else ""
    return f"{receipt.step}{target} failed: {receipt.error or 'unknown error'}"


# ── Idempotent install primitive ────────────────────────────────


def ensure_installed(
    manager: PackageManager,
    descriptor: Descriptor,
    ctx: ProvisionContext,
    failure_hint: str = "",
) -> Receipt:
    """Install ``descriptor`` unless the package manager reports it present.

    ``install`` is never called for a present package.  In dry-run mode
    the check still runs but the install is reported as skipped.
    """
    name = descriptor.name

    if manager.is_installed(name):
        ctx.reporter.success(f"{name} already installed")
        return Receipt.present(step=manager.name, target=name, output="already installed")

    if ctx.dry_run:
        ctx.reporter.info(f"[dry-run] Would install {name}")
        return Receipt.skip(step=manager.name, target=name, reason="dry-run", metadata={"dry_run": True})

    ctx.reporter.info(f"Installing {name}...")
    receipt = manager.install(name)
    if receipt.failed:
        hint = f" ({failure_hint})" if failure_hint else ""
        receipt.metadata["message"] = f"Failed to install {name}{hint}"
    logger.debug("%s %s → %s", manager.name, name, receipt.status)
    return receipt


def install_group(
    group: PackageGroup,
    ctx: ProvisionContext,
    announce: bool = True,
) -> Iterable[Receipt]:
    """Yield one receipt per descriptor of a package group."""
    manager = ctx.registry.get(group.manager)
    if manager is None:
        yield Receipt.failure(
            step=group.id,
            target=group.manager,
            error=f"No package manager registered for '{group.manager}'",
        )
        return

    if announce:
        ctx.reporter.info(f"Installing {group.title}...")
    for descriptor in group.packages:
        yield ensure_installed(manager, descriptor, ctx, failure_hint=group.failure_hint)


def group_step(group: PackageGroup) -> Step:
    """Build a Step installing a package group with its own failure policy."""
    return Step(
        id=group.id,
        title=group.title,
        run=lambda ctx: install_group(group, ctx),
        policy=FailurePolicy.TOLERATE if group.tolerate_failures else FailurePolicy.ABORT,
    )


# ── Sequence loop ───────────────────────────────────────────────


def run_sequence(steps: Iterable[Step], ctx: ProvisionContext) -> SequenceReport:
    """Run steps in order and collect receipts.

    Stops at the first failed receipt of an ABORT step, or at the first
    pending receipt.  Exceptions escaping a step are recorded as a
    failed receipt for that step and handled by its policy.  An operator
    interrupt propagates immediately: no later step, cleanup included, runs.
    """
    report = SequenceReport()

    for step in steps:
        logger.info("Step: %s", step.id)
        stop = False

        try:
            for receipt in step.run(ctx):
                if _handle_receipt(step, receipt, ctx, report):
                    stop = True
                    break
        except KeyboardInterrupt:
            logger.warning("Interrupted during step %s", step.id)
            raise
        except Exception as e:
            logger.debug("Step %s raised", step.id, exc_info=True)
            receipt = Receipt.failure(step=step.id, error=str(e) or e.__class__.__name__)
            receipt.metadata["message"] = f"{step.title}: {receipt.error}"
            stop = _handle_receipt(step, receipt, ctx, report)

        if stop:
            break
        report.completed_steps.append(step.id)

    logger.info(
        "Sequence %s: %d changed, %d present, %d skipped, %d tolerated, %d failed",
        report.status,
        report.changed,
        report.present,
        report.skipped,
        report.tolerated,
        report.failed,
    )
    return report


def _handle_receipt(
    step: Step,
    receipt: Receipt,
    ctx: ProvisionContext,
    report: SequenceReport,
) -> bool:
    """Record one receipt.  Returns True when the sequence must stop."""
    receipt.step = step.id

    if receipt.failed:
        if step.policy is FailurePolicy.TOLERATE:
            receipt = receipt.tolerate()
            ctx.reporter.warning(failure_message(receipt))
            report.receipts.append(receipt)
            return False
        ctx.reporter.error(failure_message(receipt))
        report.receipts.append(receipt)
        report.halted_by = receipt
        return True

    report.receipts.append(receipt)
    if receipt.status == "pending":
        report.pending_by = receipt
        return True
    return False
