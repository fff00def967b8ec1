"""
Pip adapter — Python ecosystem packages.

Uses the ``pip3`` found on PATH, which after the languages step is the
Homebrew Python, not the interpreter devstrap itself runs under.
"""

from __future__ import annotations

import logging

from devstrap.adapters.base import PackageManager, receipt_from_result
from devstrap.adapters.shell.command import CommandRunner
from devstrap.core.models.receipt import Receipt

logger = logging.getLogger(__name__)


class PipAdapter(PackageManager):
    """Python package installer.

    Args:
        runner: Command runner.
        pip: The pip executable name or path (default: 'pip3').
    """

    def __init__(self, runner: CommandRunner, pip: str = "pip3"):
        self._runner = runner
        self._pip = pip

    @property
    def name(self) -> str:
        return "pip"

    def is_available(self) -> bool:
        return self._runner.which(self._pip) is not None

    def is_installed(self, package: str) -> bool:
        result = self._runner.run([self._pip, "show", package])
        return result.ok

    def install(self, package: str) -> Receipt:
        result = self._runner.run([self._pip, "install", package], capture=False)
        return receipt_from_result(self.name, package, result)

    def upgrade_self(self) -> Receipt:
        """``pip install --upgrade pip``."""
        result = self._runner.run([self._pip, "install", "--upgrade", "pip"], capture=False)
        return receipt_from_result(self.name, "pip", result, output="pip upgraded")
