"""
Homebrew adapter — formulae, casks, and bootstrapping brew itself.

One class serves both formulae and casks: a cask instance adds
``--cask`` to ``brew list`` / ``brew install`` and registers under the
name ``brew-cask``.
"""

from __future__ import annotations

import logging
import os
from collections.abc import MutableMapping
from pathlib import Path

from devstrap.adapters.base import PackageManager, receipt_from_result
from devstrap.adapters.shell.command import CommandRunner
from devstrap.core.models.receipt import Receipt

logger = logging.getLogger(__name__)

INSTALL_SCRIPT_URL = "https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh"

# Where the official installer puts brew (Apple Silicon first)
APPLE_SILICON_PREFIX = Path("/opt/homebrew")
INTEL_PREFIX = Path("/usr/local")
BREW_CANDIDATES = (APPLE_SILICON_PREFIX / "bin" / "brew", INTEL_PREFIX / "bin" / "brew")

SHELLENV_LINE = 'eval "$(/opt/homebrew/bin/brew shellenv)"'


class HomebrewAdapter(PackageManager):
    """Homebrew package manager.

    Args:
        runner: Command runner used for every brew invocation.
        cask: Operate on casks (GUI applications) instead of formulae.
        environ: Process environment, updated in place when a fresh
            Apple Silicon install needs /opt/homebrew/bin on PATH.
    """

    def __init__(
        self,
        runner: CommandRunner,
        cask: bool = False,
        environ: MutableMapping[str, str] | None = None,
    ):
        self._runner = runner
        self._cask = cask
        self._environ = environ if environ is not None else os.environ

    @property
    def name(self) -> str:
        return "brew-cask" if self._cask else "brew"

    def executable(self) -> str | None:
        """Locate brew on PATH or in one of the standard prefixes."""
        found = self._runner.which("brew")
        if found:
            return found
        for candidate in BREW_CANDIDATES:
            if candidate.is_file():
                return str(candidate)
        return None

    def is_available(self) -> bool:
        return self.executable() is not None

    def _brew(self) -> str:
        return self.executable() or "brew"

    def _kind_args(self) -> list[str]:
        return ["--cask"] if self._cask else []

    # ── Package operations ──────────────────────────────────────

    def is_installed(self, package: str) -> bool:
        result = self._runner.run([self._brew(), "list", *self._kind_args(), package])
        return result.ok

    def install(self, package: str) -> Receipt:
        result = self._runner.run([self._brew(), "install", *self._kind_args(), package], capture=False)
        return receipt_from_result(self.name, package, result)

    def update(self) -> Receipt:
        result = self._runner.run([self._brew(), "update"], capture=False)
        return receipt_from_result("homebrew", "update", result)

    def cleanup(self) -> Receipt:
        result = self._runner.run([self._brew(), "cleanup"], capture=False)
        return receipt_from_result("cleanup", "brew cleanup", result)

    # ── Bootstrapping ───────────────────────────────────────────

    def bootstrap(self) -> Receipt:
        """Download and run the official Homebrew installer."""
        fetched = self._runner.run(["curl", "-fsSL", INSTALL_SCRIPT_URL])
        if not fetched.ok:
            return receipt_from_result("homebrew", "install", fetched)

        result = self._runner.run(["/bin/bash", "-c", fetched.stdout], capture=False)
        return receipt_from_result("homebrew", "install", result, output="Homebrew installed")

    def register_shellenv(self, profile: Path) -> bool:
        """Put Apple Silicon brew on PATH, now and for future login shells.

        Appends the shellenv line to ``profile`` unless it is already
        there.  Returns True when the profile was modified.
        """
        bin_dir = str(APPLE_SILICON_PREFIX / "bin")
        sbin_dir = str(APPLE_SILICON_PREFIX / "sbin")
        path_entries = self._environ.get("PATH", "").split(os.pathsep)
        if bin_dir not in path_entries:
            self._environ["PATH"] = os.pathsep.join([bin_dir, sbin_dir, *filter(None, path_entries)])

        existing = profile.read_text(encoding="utf-8") if profile.is_file() else ""
        if SHELLENV_LINE in existing:
            return False

        profile.parent.mkdir(parents=True, exist_ok=True)
        with profile.open("a", encoding="utf-8") as f:
            if existing and not existing.endswith("\n"):
                f.write("\n")
            f.write(SHELLENV_LINE + "\n")
        logger.info("Added brew shellenv to %s", profile)
        return True
