"""
Provisioning context — every capability a step may use, injected once.

Steps never construct adapters or read the environment themselves.
``build_context`` wires the real adapters around a command runner; tests
call it with a ``ScriptedRunner``, a ``ScriptedPrompter`` and a
temporary home directory, or build the dataclass directly with mocks.
"""

from __future__ import annotations

import os
import platform as _platform
import sys
from collections.abc import MutableMapping
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from devstrap.adapters.languages.python import PipAdapter
from devstrap.adapters.packages.homebrew import HomebrewAdapter
from devstrap.adapters.registry import AdapterRegistry
from devstrap.adapters.shell.command import CommandRunner
from devstrap.adapters.shell.zsh import OhMyZshAdapter
from devstrap.adapters.system.macos import MacOSAdapter
from devstrap.adapters.system.ssh import SshAdapter
from devstrap.adapters.vcs.git import GitAdapter
from devstrap.core.models.catalog import Catalog

if TYPE_CHECKING:
    from devstrap.ui.cli.console import ConsoleReporter
    from devstrap.ui.cli.prompts import Prompter


@dataclass
class ProvisionContext:
    """Everything a provisioning step needs."""

    catalog: Catalog
    registry: AdapterRegistry
    brew: HomebrewAdapter
    pip: PipAdapter
    git: GitAdapter
    zsh: OhMyZshAdapter
    macos: MacOSAdapter
    ssh: SshAdapter
    prompter: Prompter
    reporter: ConsoleReporter
    home: Path
    platform: str = sys.platform
    machine: str = ""
    dry_run: bool = False

    def expand(self, path: str) -> Path:
        """Expand a catalog path ('~/...') against this context's home."""
        if path == "~" or path.startswith("~/"):
            return self.home / path[2:]
        return Path(path)


def build_context(
    catalog: Catalog,
    runner: CommandRunner,
    prompter: Prompter,
    reporter: ConsoleReporter,
    *,
    home: Path | None = None,
    environ: MutableMapping[str, str] | None = None,
    platform: str | None = None,
    machine: str | None = None,
    dry_run: bool = False,
) -> ProvisionContext:
    """Wire the real adapters and the package-manager registry."""
    environ = environ if environ is not None else os.environ
    home = home if home is not None else Path.home()

    brew = HomebrewAdapter(runner, environ=environ)
    brew_cask = HomebrewAdapter(runner, cask=True, environ=environ)
    pip = PipAdapter(runner)

    registry = AdapterRegistry()
    registry.register(brew)
    registry.register(brew_cask)
    registry.register(pip)

    return ProvisionContext(
        catalog=catalog,
        registry=registry,
        brew=brew,
        pip=pip,
        git=GitAdapter(runner),
        zsh=OhMyZshAdapter(runner, home=home, environ=environ),
        macos=MacOSAdapter(runner),
        ssh=SshAdapter(runner, environ=environ),
        prompter=prompter,
        reporter=reporter,
        home=home,
        platform=platform if platform is not None else sys.platform,
        machine=machine if machine is not None else _platform.machine(),
        dry_run=dry_run,
    )
