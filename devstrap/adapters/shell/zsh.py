"""
Oh My Zsh adapter — framework install and plugin locations.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from devstrap.adapters.base import Adapter, receipt_from_result
from devstrap.adapters.shell.command import CommandRunner
from devstrap.core.models.receipt import Receipt

logger = logging.getLogger(__name__)

INSTALL_SCRIPT_URL = "https://install.ohmyz.sh/"


class OhMyZshAdapter(Adapter):
    """Install Oh My Zsh and resolve its custom plugin directory.

    Args:
        runner: Command runner.
        home: The operator's home directory.
        environ: Environment consulted for ``ZSH_CUSTOM``.
    """

    def __init__(
        self,
        runner: CommandRunner,
        home: Path,
        environ: Mapping[str, str] | None = None,
    ):
        self._runner = runner
        self._home = home
        self._environ = environ if environ is not None else os.environ

    @property
    def name(self) -> str:
        return "oh-my-zsh"

    @property
    def install_dir(self) -> Path:
        return self._home / ".oh-my-zsh"

    @property
    def custom_dir(self) -> Path:
        custom = self._environ.get("ZSH_CUSTOM")
        if custom:
            return Path(custom).expanduser()
        return self.install_dir / "custom"

    def plugin_dir(self, plugin: str) -> Path:
        return self.custom_dir / "plugins" / plugin

    def is_available(self) -> bool:
        return self._runner.which("zsh") is not None

    def is_installed(self) -> bool:
        return self.install_dir.is_dir()

    def install(self) -> Receipt:
        """Run the upstream installer unattended (no shell switch, no zsh launch)."""
        fetched = self._runner.run(["curl", "-fsSL", INSTALL_SCRIPT_URL])
        if not fetched.ok:
            return receipt_from_result("oh-my-zsh", "install", fetched)

        result = self._runner.run(["sh", "-c", fetched.stdout, "", "--unattended"], capture=False)
        return receipt_from_result("oh-my-zsh", "install", result, output="Oh My Zsh installed")
