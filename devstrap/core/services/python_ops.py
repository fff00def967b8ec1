"""
Python packages step — upgrade pip, then ensure each catalog package.
"""

from __future__ import annotations

from collections.abc import Iterator

from devstrap.core.engine.context import ProvisionContext
from devstrap.core.engine.sequencer import install_group
from devstrap.core.models.receipt import Receipt


def python_packages(ctx: ProvisionContext) -> Iterator[Receipt]:
    group = ctx.catalog.python_packages
    ctx.reporter.info(f"Installing {group.title}...")

    if ctx.dry_run:
        yield Receipt.skip(step=group.id, target="pip", reason="dry-run")
    else:
        receipt = ctx.pip.upgrade_self()
        yield receipt
        if receipt.failed:
            return

    yield from install_group(group, ctx, announce=False)
