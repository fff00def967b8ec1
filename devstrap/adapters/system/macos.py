"""
macOS adapter — Command Line Tools, preference defaults, app restarts.
"""

from __future__ import annotations

import logging

from devstrap.adapters.base import Adapter, receipt_from_result
from devstrap.adapters.shell.command import CommandRunner
from devstrap.core.models.catalog import DefaultsSetting
from devstrap.core.models.receipt import Receipt

logger = logging.getLogger(__name__)


class MacOSAdapter(Adapter):
    """Wrappers over xcode-select, defaults and killall."""

    def __init__(self, runner: CommandRunner):
        self._runner = runner

    @property
    def name(self) -> str:
        return "macos"

    def is_available(self) -> bool:
        return self._runner.which("defaults") is not None

    def command_line_tools_installed(self) -> bool:
        return self._runner.run(["xcode-select", "-p"]).ok

    def install_command_line_tools(self) -> Receipt:
        """Launch the GUI installer.  It finishes asynchronously."""
        result = self._runner.run(["xcode-select", "--install"], capture=False)
        return receipt_from_result("command-line-tools", "xcode-select", result)

    def write_default(self, setting: DefaultsSetting) -> Receipt:
        result = self._runner.run(
            [
                "defaults",
                "write",
                setting.domain,
                setting.key,
                f"-{setting.type}",
                setting.value_arg(),
            ]
        )
        return receipt_from_result(
            "macos-settings",
            f"{setting.domain} {setting.key}",
            result,
            output=f"{setting.key}={setting.value_arg()}",
        )

    def restart_app(self, app: str) -> Receipt:
        result = self._runner.run(["killall", app])
        return receipt_from_result("macos-settings", f"killall {app}", result)
