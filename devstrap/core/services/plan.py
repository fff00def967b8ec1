"""
Provisioning plan — the fixed, ordered list of steps.

Order matters only in one direction: everything after ``homebrew``
assumes brew is on PATH, and ``python-packages`` assumes the Homebrew
Python from ``languages``.
"""

from __future__ import annotations

from collections.abc import Iterator

from devstrap.core.engine.context import ProvisionContext
from devstrap.core.engine.sequencer import FailurePolicy, Step, group_step
from devstrap.core.models.catalog import Catalog
from devstrap.core.models.receipt import Receipt
from devstrap.core.services.homebrew_ops import cleanup, homebrew
from devstrap.core.services.identity import git_identity, ssh_key
from devstrap.core.services.platform_ops import check_platform, command_line_tools, macos_settings
from devstrap.core.services.python_ops import python_packages
from devstrap.core.services.shell_ops import oh_my_zsh, shell_plugins
from devstrap.ui.cli.console import print_summary


def summary(ctx: ProvisionContext) -> Iterator[Receipt]:
    print_summary(ctx.reporter, ctx.catalog)
    return iter(())


def build_plan(catalog: Catalog) -> list[Step]:
    """Every step of a provisioning run, in execution order."""
    python_policy = (
        FailurePolicy.TOLERATE if catalog.python_packages.tolerate_failures else FailurePolicy.ABORT
    )
    return [
        Step("platform", "Platform check", check_platform),
        Step("command-line-tools", "Command Line Tools", command_line_tools),
        Step("homebrew", "Homebrew", homebrew),
        group_step(catalog.cli_tools),
        group_step(catalog.languages),
        group_step(catalog.applications),
        Step("oh-my-zsh", "Oh My Zsh", oh_my_zsh),
        Step("shell-plugins", "Oh My Zsh plugins", shell_plugins),
        Step("git", "Git configuration", git_identity),
        Step(catalog.python_packages.id, catalog.python_packages.title, python_packages, python_policy),
        Step("ssh-key", "SSH key", ssh_key, FailurePolicy.TOLERATE),
        Step("macos-settings", "macOS settings", macos_settings, FailurePolicy.TOLERATE),
        Step("cleanup", "Cleanup", cleanup),
        Step("summary", "Summary", summary),
    ]
