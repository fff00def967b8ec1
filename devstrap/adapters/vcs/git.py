"""
Git adapter — global identity/config and repository clones.

Uses the git CLI.  ``git config --global --get`` exits 1 for an unset
key, which is reported as an empty string rather than a failure.
"""

from __future__ import annotations

import logging
from pathlib import Path

from devstrap.adapters.base import Adapter, receipt_from_result
from devstrap.adapters.shell.command import CommandRunner
from devstrap.core.models.receipt import Receipt

logger = logging.getLogger(__name__)


class GitAdapter(Adapter):
    """Git operations needed for provisioning."""

    def __init__(self, runner: CommandRunner, git: str = "git"):
        self._runner = runner
        self._git = git

    @property
    def name(self) -> str:
        return "git"

    def is_available(self) -> bool:
        return self._runner.which(self._git) is not None

    def get_global(self, key: str) -> str:
        """Read a global config value ('' when unset)."""
        result = self._runner.run([self._git, "config", "--global", "--get", key])
        if not result.ok:
            return ""
        return result.stdout.strip()

    def set_global(self, key: str, value: str) -> Receipt:
        result = self._runner.run([self._git, "config", "--global", key, value])
        return receipt_from_result("git", key, result, output=f"{key}={value}")

    def clone(self, url: str, dest: Path) -> Receipt:
        result = self._runner.run([self._git, "clone", url, str(dest)], capture=False)
        return receipt_from_result("git", dest.name, result, output=f"cloned {url}")
