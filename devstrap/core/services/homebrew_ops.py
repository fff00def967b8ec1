"""
Homebrew steps — install or update brew, and the final cleanup.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from devstrap.core.engine.context import ProvisionContext
from devstrap.core.models.receipt import Receipt

logger = logging.getLogger(__name__)


def homebrew(ctx: ProvisionContext) -> Iterator[Receipt]:
    """Install Homebrew if missing, otherwise ``brew update``.

    On Apple Silicon a fresh brew lives in /opt/homebrew, which is not
    on PATH: the shellenv hook is added to ~/.zprofile and the current
    process PATH is extended so later steps find ``brew``.
    """
    ctx.reporter.info("Checking for Homebrew...")

    if ctx.brew.is_available():
        ctx.reporter.success("Homebrew already installed")
        yield Receipt.present(step="homebrew", target="brew")

        ctx.reporter.info("Updating Homebrew...")
        if ctx.dry_run:
            yield Receipt.skip(step="homebrew", target="update", reason="dry-run")
            return
        yield ctx.brew.update()
        return

    if ctx.dry_run:
        ctx.reporter.info("[dry-run] Would install Homebrew")
        yield Receipt.skip(step="homebrew", target="brew", reason="dry-run")
        return

    ctx.reporter.info("Installing Homebrew...")
    receipt = ctx.brew.bootstrap()
    if receipt.failed:
        yield receipt
        return

    if ctx.machine == "arm64":
        ctx.brew.register_shellenv(ctx.home / ".zprofile")

    ctx.reporter.success("Homebrew installed")
    yield receipt


def cleanup(ctx: ProvisionContext) -> Iterator[Receipt]:
    ctx.reporter.info("Cleaning up...")
    if ctx.dry_run:
        yield Receipt.skip(step="cleanup", target="brew cleanup", reason="dry-run")
        return
    yield ctx.brew.cleanup()
