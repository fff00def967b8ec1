"""
Command runner — the one place devstrap touches subprocess.

Every adapter receives a runner instead of calling subprocess itself,
so tests can swap in ``devstrap.adapters.mock.ScriptedRunner`` and
assert on the exact argv that would have been executed.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import time
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

# Conventional shell exit codes
EXIT_NOT_FOUND = 127
EXIT_TIMEOUT = 124


@dataclass
class CommandResult:
    """Outcome of one external command."""

    argv: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def error_text(self) -> str:
        """Best available description of a failure."""
        return self.stderr.strip() or f"{self.argv[0]} exited with code {self.returncode}"


@dataclass
class CommandRunner:
    """Run external commands and capture their output.

    ``capture=False`` lets the child inherit the terminal, which is
    what installers that print progress or ask for a password need.
    """

    env: Mapping[str, str] | None = field(default=None, repr=False)

    def which(self, name: str) -> str | None:
        path = None
        if self.env is not None:
            path = self.env.get("PATH")
        return shutil.which(name, path=path)

    def run(
        self,
        argv: Sequence[str],
        *,
        capture: bool = True,
        timeout: float | None = None,
    ) -> CommandResult:
        argv = [str(a) for a in argv]

        logger.debug("Executing: %s (capture=%s)", " ".join(argv), capture)
        start = time.monotonic()

        try:
            result = subprocess.run(
                argv,
                capture_output=capture,
                text=True,
                timeout=timeout,
                env=dict(self.env) if self.env is not None else None,
            )
        except FileNotFoundError:
            return CommandResult(
                argv=argv,
                returncode=EXIT_NOT_FOUND,
                stderr=f"command not found: {argv[0]}",
            )
        except subprocess.TimeoutExpired:
            return CommandResult(
                argv=argv,
                returncode=EXIT_TIMEOUT,
                stderr=f"Command timed out after {timeout}s",
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.debug("Exit %d after %dms: %s", result.returncode, elapsed_ms, argv[0])

        return CommandResult(
            argv=argv,
            returncode=result.returncode,
            stdout=(result.stdout or "") if capture else "",
            stderr=(result.stderr or "") if capture else "",
            duration_ms=elapsed_ms,
        )
