"""
Shared test fixtures and configuration.

``FakeHost`` is a stateful stand-in for a Mac: it answers the commands
devstrap's adapters run (brew, pip3, git, xcode-select, defaults,
ssh-*) from in-memory state and creates the directories and files a
real clone / install / ssh-keygen would, so whole provisioning runs
can execute twice and be compared.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from devstrap.adapters.mock import ScriptedRunner
from devstrap.adapters.shell.command import CommandResult
from devstrap.core.config.loader import load_catalog
from devstrap.core.engine.context import ProvisionContext, build_context
from devstrap.core.models.catalog import Catalog
from devstrap.ui.cli.console import ConsoleReporter
from devstrap.ui.cli.prompts import ScriptedPrompter

AGENT_OUTPUT = (
    "SSH_AUTH_SOCK=/tmp/ssh-agent.sock; export SSH_AUTH_SOCK;\n"
    "SSH_AGENT_PID=4242; export SSH_AGENT_PID;\n"
    "echo Agent pid 4242;\n"
)

# Commands that change the machine, for before/after comparisons
MUTATING = {
    ("brew", "install"),
    ("pip3", "install"),
    ("git", "clone"),
    ("xcode-select", "--install"),
    ("defaults", "write"),
    ("ssh-keygen",),
    ("killall",),
    ("/bin/bash", "-c"),
    ("sh", "-c"),
}


@dataclass
class FakeHost(ScriptedRunner):
    """In-memory macOS host."""

    home: Path = Path("/nonexistent")
    command_line_tools: bool = True
    formulae: set[str] = field(default_factory=set)
    casks: set[str] = field(default_factory=set)
    pip_packages: set[str] = field(default_factory=set)
    git_config: dict[str, str] = field(default_factory=dict)
    defaults: dict[tuple[str, str], str] = field(default_factory=dict)
    failing: dict[tuple[str, ...], int] = field(default_factory=dict)

    def fail(self, *prefix: str, returncode: int = 1) -> None:
        """Make commands whose (basename) argv starts with ``prefix`` fail."""
        self.failing[tuple(prefix)] = returncode

    def mutations(self) -> list[list[str]]:
        """Calls that changed the machine.  Refreshes (pip self-upgrade) are not counted."""
        out = []
        for call in self.calls:
            argv = [Path(call[0]).name if call[0].endswith("/brew") else call[0], *call[1:]]
            if argv[:3] == ["pip3", "install", "--upgrade"]:
                continue
            if any(tuple(argv[: len(m)]) == m for m in MUTATING):
                out.append(argv)
        return out

    def run(self, argv: Sequence[str], *, capture: bool = True, timeout: float | None = None) -> CommandResult:
        argv = [str(a) for a in argv]
        self.calls.append(argv)
        tool = Path(argv[0]).name if argv[0].endswith("/brew") else argv[0]
        args = argv[1:]
        key = (tool, *args)

        for prefix, code in self.failing.items():
            if key[: len(prefix)] == prefix:
                return CommandResult(argv=argv, returncode=code, stderr=f"{tool} failed")

        handler: Callable[[list[str]], CommandResult] | None = getattr(
            self, "_" + tool.replace("-", "_").replace("/", "_").strip("_"), None
        )
        if handler is None:
            return CommandResult(argv=argv, returncode=0)
        result = handler(args)
        result.argv = argv
        return result

    # ── Tool emulation ──────────────────────────────────────────

    @staticmethod
    def _ok(stdout: str = "") -> CommandResult:
        return CommandResult(argv=[], returncode=0, stdout=stdout)

    @staticmethod
    def _err(code: int = 1) -> CommandResult:
        return CommandResult(argv=[], returncode=code)

    def _brew(self, args: list[str]) -> CommandResult:
        cask = "--cask" in args
        names = [a for a in args[1:] if not a.startswith("--")]
        store = self.casks if cask else self.formulae
        if args[0] == "list":
            return self._ok() if names and names[0] in store else self._err()
        if args[0] == "install":
            store.update(names)
        return self._ok()

    def _pip3(self, args: list[str]) -> CommandResult:
        if args[0] == "show":
            return self._ok() if args[1] in self.pip_packages else self._err()
        if args[0] == "install" and "--upgrade" not in args:
            self.pip_packages.update(args[1:])
        return self._ok()

    def _git(self, args: list[str]) -> CommandResult:
        if args[:3] == ["config", "--global", "--get"]:
            value = self.git_config.get(args[3])
            return self._ok(value + "\n") if value else self._err()
        if args[:2] == ["config", "--global"]:
            self.git_config[args[2]] = args[3]
            return self._ok()
        if args[0] == "clone":
            Path(args[2]).mkdir(parents=True)
        return self._ok()

    def _xcode_select(self, args: list[str]) -> CommandResult:
        if args == ["-p"]:
            return self._ok("/Library/Developer/CommandLineTools\n") if self.command_line_tools else self._err(2)
        return self._ok()

    def _defaults(self, args: list[str]) -> CommandResult:
        self.defaults[(args[1], args[2])] = args[4]
        return self._ok()

    def _curl(self, args: list[str]) -> CommandResult:
        return self._ok("#!/bin/sh\necho install\n")

    def _bin_bash(self, args: list[str]) -> CommandResult:
        self.executables.add("brew")
        return self._ok()

    def _sh(self, args: list[str]) -> CommandResult:
        (self.home / ".oh-my-zsh" / "custom" / "plugins").mkdir(parents=True)
        return self._ok()

    def _ssh_keygen(self, args: list[str]) -> CommandResult:
        path = Path(args[args.index("-f") + 1])
        comment = args[args.index("-C") + 1]
        path.write_text("PRIVATE KEY\n")
        path.with_name(path.name + ".pub").write_text(f"ssh-ed25519 AAAAC3Nza {comment}\n")
        return self._ok()

    def _ssh_agent(self, args: list[str]) -> CommandResult:
        return self._ok(AGENT_OUTPUT)


@pytest.fixture
def catalog() -> Catalog:
    """The packaged default catalog."""
    return load_catalog()


@pytest.fixture
def home(tmp_path: Path) -> Path:
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def host(home: Path) -> FakeHost:
    """A machine with Command Line Tools, brew, git and pip3, and nothing else."""
    return FakeHost(home=home, executables={"brew", "git", "pip3", "zsh", "defaults", "ssh-keygen"})


@pytest.fixture
def environ() -> dict[str, str]:
    return {"PATH": "/usr/bin:/bin"}


DECLINE_ALL = {
    "git_username": "Ada Lovelace",
    "git_email": "ada@example.com",
    "generate_ssh_key": "n",
    "apply_macos_settings": "n",
}


@pytest.fixture
def make_ctx(
    catalog: Catalog,
    host: FakeHost,
    home: Path,
    environ: dict[str, str],
) -> Callable[..., ProvisionContext]:
    """Factory for a context wired to the fake host."""

    def _make(
        answers: dict[str, str] | None = None,
        platform: str = "darwin",
        machine: str = "arm64",
        dry_run: bool = False,
        catalog_override: Catalog | None = None,
    ) -> ProvisionContext:
        return build_context(
            catalog_override or catalog,
            host,
            ScriptedPrompter(DECLINE_ALL if answers is None else answers),
            ConsoleReporter(color=False),
            home=home,
            environ=environ,
            platform=platform,
            machine=machine,
            dry_run=dry_run,
        )

    return _make
