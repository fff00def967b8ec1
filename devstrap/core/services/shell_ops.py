"""
Shell steps — Oh My Zsh and its plugins.

Both are directory-existence checks: if the target directory is there
it is assumed complete and left alone.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from devstrap.core.engine.context import ProvisionContext
from devstrap.core.models.receipt import Receipt

logger = logging.getLogger(__name__)


def oh_my_zsh(ctx: ProvisionContext) -> Iterator[Receipt]:
    ctx.reporter.info("Checking for Oh My Zsh...")

    if ctx.zsh.is_installed():
        ctx.reporter.success("Oh My Zsh already installed")
        yield Receipt.present(step="oh-my-zsh", target=str(ctx.zsh.install_dir))
        return

    if ctx.dry_run:
        ctx.reporter.info("[dry-run] Would install Oh My Zsh")
        yield Receipt.skip(step="oh-my-zsh", target=str(ctx.zsh.install_dir), reason="dry-run")
        return

    ctx.reporter.info("Installing Oh My Zsh...")
    receipt = ctx.zsh.install()
    if receipt.ok:
        ctx.reporter.success("Oh My Zsh installed")
    yield receipt


def shell_plugins(ctx: ProvisionContext) -> Iterator[Receipt]:
    """Clone each catalog plugin into $ZSH_CUSTOM/plugins."""
    ctx.reporter.info("Installing Oh My Zsh plugins...")

    for plugin in ctx.catalog.shell_plugins:
        dest = ctx.zsh.plugin_dir(plugin.name)

        if dest.is_dir():
            ctx.reporter.success(f"{plugin.name} already installed")
            yield Receipt.present(step="shell-plugins", target=plugin.name)
            continue

        if ctx.dry_run:
            ctx.reporter.info(f"[dry-run] Would clone {plugin.url} into {dest}")
            yield Receipt.skip(step="shell-plugins", target=plugin.name, reason="dry-run")
            continue

        ctx.reporter.info(f"Installing {plugin.name}...")
        dest.parent.mkdir(parents=True, exist_ok=True)
        receipt = ctx.git.clone(plugin.url, dest)
        receipt.target = plugin.name
        yield receipt
