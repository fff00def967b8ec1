"""
SSH adapter — key generation and agent registration.

``ssh-agent -s`` prints Bourne shell assignments; the variables are
parsed and exported into the process environment so the following
``ssh-add`` reaches the new agent.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import MutableMapping
from pathlib import Path

from devstrap.adapters.base import Adapter, receipt_from_result
from devstrap.adapters.shell.command import CommandRunner
from devstrap.core.models.receipt import Receipt

logger = logging.getLogger(__name__)

_AGENT_VAR = re.compile(r"(SSH_AUTH_SOCK|SSH_AGENT_PID)=([^;\s]+)")


def parse_agent_env(output: str) -> dict[str, str]:
    """Extract SSH_AUTH_SOCK / SSH_AGENT_PID from ``ssh-agent -s`` output."""
    return dict(_AGENT_VAR.findall(output))


class SshAdapter(Adapter):
    """ssh-keygen, ssh-agent and ssh-add."""

    def __init__(
        self,
        runner: CommandRunner,
        environ: MutableMapping[str, str] | None = None,
    ):
        self._runner = runner
        self._environ = environ if environ is not None else os.environ

    @property
    def name(self) -> str:
        return "ssh"

    def is_available(self) -> bool:
        return self._runner.which("ssh-keygen") is not None

    def generate_key(self, path: Path, comment: str, key_type: str = "ed25519") -> Receipt:
        """Run ssh-keygen interactively so the operator can set a passphrase."""
        path.parent.mkdir(parents=True, exist_ok=True, mode=0o700)
        result = self._runner.run(
            ["ssh-keygen", "-t", key_type, "-C", comment, "-f", str(path)],
            capture=False,
        )
        return receipt_from_result("ssh-key", str(path), result, output="SSH key generated")

    def start_agent(self) -> Receipt:
        result = self._runner.run(["ssh-agent", "-s"])
        if not result.ok:
            return receipt_from_result("ssh-key", "ssh-agent", result)

        agent_env = parse_agent_env(result.stdout)
        self._environ.update(agent_env)
        logger.debug("ssh-agent environment: %s", agent_env)
        return Receipt.success(
            step="ssh-key",
            target="ssh-agent",
            output=f"Agent pid {agent_env.get('SSH_AGENT_PID', '?')}",
            metadata=agent_env,
        )

    def add_key(self, path: Path) -> Receipt:
        result = self._runner.run(["ssh-add", str(path)], capture=False)
        return receipt_from_result("ssh-key", "ssh-add", result)
