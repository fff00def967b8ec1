"""
Identity steps — git user/config and the GitHub SSH key.

Git identity is required: unset ``user.name`` / ``user.email`` are
prompted for.  The SSH key is optional and only created after the
operator confirms, never over an existing key file.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from devstrap.core.engine.context import ProvisionContext
from devstrap.core.models.receipt import Receipt

logger = logging.getLogger(__name__)

GITHUB_SSH_SETTINGS_URL = "https://github.com/settings/ssh/new"

# (git key, prompt key, prompt text)
IDENTITY_KEYS = (
    ("user.name", "git_username", "Enter your Git username"),
    ("user.email", "git_email", "Enter your Git email"),
)


def git_identity(ctx: ProvisionContext) -> Iterator[Receipt]:
    """Prompt for any unset identity key, then apply the catalog defaults."""
    ctx.reporter.info("Configuring Git...")

    for key, prompt_key, text in IDENTITY_KEYS:
        current = ctx.git.get_global(key)
        if current:
            logger.debug("git %s already set", key)
            yield Receipt.present(step="git", target=key, output=current)
            continue

        if ctx.dry_run:
            ctx.reporter.info(f"[dry-run] Would prompt for git {key}")
            yield Receipt.skip(step="git", target=key, reason="dry-run")
            continue

        value = ctx.prompter.ask(prompt_key, text)
        if not value:
            yield Receipt.failure(step="git", target=key, error=f"git {key} must not be empty")
            return
        yield ctx.git.set_global(key, value)

    for key, value in ctx.catalog.git_defaults.items():
        if ctx.dry_run:
            ctx.reporter.info(f"[dry-run] Would set git {key}={value}")
            yield Receipt.skip(step="git", target=key, reason="dry-run")
            continue
        receipt = ctx.git.set_global(key, value)
        yield receipt
        if receipt.failed:
            return

    ctx.reporter.success("Git configured")


def ssh_key(ctx: ProvisionContext) -> Iterator[Receipt]:
    """Optionally generate an SSH key, load it into the agent and show it."""
    catalog = ctx.catalog
    ctx.reporter.line()

    if not ctx.prompter.confirm("generate_ssh_key", "Do you want to generate an SSH key for GitHub?"):
        yield Receipt.skip(step="ssh-key", reason="declined")
        return

    key_path = ctx.expand(catalog.ssh_key_path)
    if key_path.is_file():
        ctx.reporter.success("SSH key already exists")
        yield Receipt.present(step="ssh-key", target=str(key_path))
        return

    email = ctx.prompter.ask("github_email", "Enter your GitHub email")

    if ctx.dry_run:
        ctx.reporter.info(f"[dry-run] Would generate {catalog.ssh_key_type} key at {key_path}")
        yield Receipt.skip(step="ssh-key", target=str(key_path), reason="dry-run")
        return

    for action in (
        lambda: ctx.ssh.generate_key(key_path, email, catalog.ssh_key_type),
        ctx.ssh.start_agent,
        lambda: ctx.ssh.add_key(key_path),
    ):
        receipt = action()
        yield receipt
        if receipt.failed:
            return

    ctx.reporter.success("SSH key generated")

    public_key = key_path.with_name(key_path.name + ".pub")
    if public_key.is_file():
        ctx.reporter.info("Your public key:")
        ctx.reporter.line(public_key.read_text(encoding="utf-8").strip())
        ctx.reporter.line()
    ctx.reporter.info(f"Add this key to GitHub: {GITHUB_SSH_SETTINGS_URL}")
