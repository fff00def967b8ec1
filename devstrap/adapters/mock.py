"""
Test doubles — a fake package manager and a scripted command runner.

Both record every call so tests can assert that an install was, or
was never, attempted.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from devstrap.adapters.base import PackageManager
from devstrap.adapters.shell.command import CommandResult, CommandRunner
from devstrap.core.models.receipt import Receipt


class MockPackageManager(PackageManager):
    """In-memory package manager.

    ``installed`` is the fake registry of present packages.  A
    successful ``install`` adds to it, so a second run sees everything
    as present.
    """

    def __init__(
        self,
        manager_name: str = "mock",
        installed: Iterable[str] = (),
        available: bool = True,
    ):
        self._name = manager_name
        self._available = available
        self.installed: set[str] = set(installed)
        self._failures: dict[str, tuple[str, int]] = {}
        self.install_log: list[str] = []
        self.query_log: list[str] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def install_count(self) -> int:
        return len(self.install_log)

    def is_available(self) -> bool:
        return self._available

    def set_failure(self, package: str, error: str = "Mock failure", return_code: int = 1) -> None:
        """Configure ``install`` of a package to fail."""
        self._failures[package] = (error, return_code)

    def is_installed(self, package: str) -> bool:
        self.query_log.append(package)
        return package in self.installed

    def install(self, package: str) -> Receipt:
        self.install_log.append(package)
        if package in self._failures:
            error, code = self._failures[package]
            return Receipt.failure(step=self._name, target=package, error=error, return_code=code)
        self.installed.add(package)
        return Receipt.success(step=self._name, target=package, output=f"[mock] installed {package}")

    def reset(self) -> None:
        """Clear call logs and configured failures."""
        self.install_log.clear()
        self.query_log.clear()
        self._failures.clear()


@dataclass
class ScriptedRunner(CommandRunner):
    """CommandRunner that never spawns processes.

    Rules match on an argv prefix; the first matching rule wins.  Calls
    without a matching rule succeed with empty output.
    """

    rules: list[tuple[tuple[str, ...], CommandResult]] = field(default_factory=list)
    executables: set[str] = field(default_factory=set)
    calls: list[list[str]] = field(default_factory=list)

    def on(self, prefix: Sequence[str], returncode: int = 0, stdout: str = "", stderr: str = "") -> None:
        """Script the result of commands starting with ``prefix``."""
        self.rules.append(
            (tuple(prefix), CommandResult(argv=list(prefix), returncode=returncode, stdout=stdout, stderr=stderr))
        )

    def which(self, name: str) -> str | None:
        if name in self.executables:
            return f"/usr/local/bin/{name}"
        return None

    def run(self, argv: Sequence[str], *, capture: bool = True, timeout: float | None = None) -> CommandResult:
        argv = [str(a) for a in argv]
        self.calls.append(argv)
        for prefix, scripted in self.rules:
            if tuple(argv[: len(prefix)]) == prefix:
                return CommandResult(
                    argv=argv,
                    returncode=scripted.returncode,
                    stdout=scripted.stdout,
                    stderr=scripted.stderr,
                )
        return CommandResult(argv=argv, returncode=0)

    def ran(self, *prefix: str) -> bool:
        """Whether any recorded call starts with ``prefix``."""
        return any(tuple(call[: len(prefix)]) == prefix for call in self.calls)

    def count(self, *prefix: str) -> int:
        return sum(1 for call in self.calls if tuple(call[: len(prefix)]) == prefix)
