"""
Console reporter — the tagged, colored status lines the operator reads.

    [INFO]     blue      progress ("Installing jq...")
    [SUCCESS]  green     done or already satisfied
    [WARNING]  yellow    tolerated failures, pending manual steps
    [ERROR]    red       fatal failures

Lines go to stdout through click so colors are stripped automatically
when stdout is not a terminal.  Each line is also kept in ``history``
and mirrored to the module logger at DEBUG.
"""

from __future__ import annotations

import logging

import click

from devstrap.core.models.catalog import Catalog

logger = logging.getLogger(__name__)

_TAGS = {
    "info": ("[INFO]", "blue"),
    "success": ("[SUCCESS]", "green"),
    "warning": ("[WARNING]", "yellow"),
    "error": ("[ERROR]", "red"),
}


class ConsoleReporter:
    """Write status lines to stdout, or to stderr when ``err`` is set.

    ``devstrap run --json`` uses stderr so stdout carries only the report.
    """

    def __init__(self, color: bool | None = None, err: bool = False):
        self._color = color
        self._err = err
        self.history: list[tuple[str, str]] = []

    def _emit(self, level: str, message: str) -> None:
        tag, fg = _TAGS[level]
        self.history.append((level, message))
        logger.debug("%s %s", tag, message)
        click.echo(f"{click.style(tag, fg=fg)} {message}", color=self._color, err=self._err)

    def info(self, message: str) -> None:
        self._emit("info", message)

    def success(self, message: str) -> None:
        self._emit("success", message)

    def warning(self, message: str) -> None:
        self._emit("warning", message)

    def error(self, message: str) -> None:
        self._emit("error", message)

    def line(self, text: str = "") -> None:
        """Untagged output (bullets, blank separators, key material)."""
        self.history.append(("line", text))
        click.echo(text, color=self._color, err=self._err)

    def messages(self, level: str) -> list[str]:
        """Every message emitted at ``level``."""
        return [msg for lvl, msg in self.history if lvl == level]


def print_summary(reporter: ConsoleReporter, catalog: Catalog) -> None:
    """Closing banner, installed categories and suggested next steps."""
    summary = catalog.summary

    reporter.line()
    reporter.success("========================================")
    reporter.success("Bootstrap Complete!")
    reporter.success("========================================")
    reporter.line()

    if summary.installed:
        reporter.info("Installed tools:")
        for item in summary.installed:
            reporter.line(f"  ✓ {item}")
        reporter.line()

    if summary.next_steps:
        reporter.info("Next steps:")
        for i, item in enumerate(summary.next_steps, start=1):
            reporter.line(f"  {i}. {item}")
        reporter.line()

    if summary.note:
        reporter.warning(f"Note: {summary.note}")
        reporter.line()
