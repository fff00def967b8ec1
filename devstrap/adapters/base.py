"""
Adapter base — the contract between the sequencer and external tools.

The sequencer only talks to package managers through this protocol,
never directly to brew or pip.  That keeps the idempotence logic
testable against ``MockPackageManager`` instead of a real machine.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from devstrap.adapters.shell.command import CommandResult
from devstrap.core.models.receipt import Receipt


class Adapter(ABC):
    """Abstract base class for all adapters."""

    @property
    @abstractmethod
    def name(self) -> str:
        """The adapter identifier (e.g., 'brew', 'pip', 'git')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this adapter's underlying tool is available.

        Should be fast and never raise.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"


class PackageManager(Adapter):
    """A tool that maps package names to query and install operations.

    To create a new package manager:
        1. Subclass PackageManager
        2. Implement name, is_available, is_installed, install
        3. Register it in the AdapterRegistry
    """

    @abstractmethod
    def is_installed(self, package: str) -> bool:
        """Whether the named package is already present on the host."""

    @abstractmethod
    def install(self, package: str) -> Receipt:
        """Install the named package.

        MUST NOT raise for tool failures.  A non-zero exit is captured
        in a failed Receipt carrying the command's return code.
        """


def receipt_from_result(step: str, target: str, result: CommandResult, output: str = "") -> Receipt:
    """Translate a finished command into a Receipt."""
    if result.ok:
        return Receipt.success(
            step=step,
            target=target,
            output=output or result.stdout.strip(),
            return_code=0,
            duration_ms=result.duration_ms,
            metadata={"command": result.argv},
        )
    return Receipt.failure(
        step=step,
        target=target,
        error=result.error_text,
        return_code=result.returncode,
        duration_ms=result.duration_ms,
        metadata={"command": result.argv, "stdout": result.stdout.strip()},
    )
