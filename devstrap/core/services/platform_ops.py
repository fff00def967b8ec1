"""
Platform steps — OS guard, Command Line Tools, macOS preferences.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from devstrap.core.engine.context import ProvisionContext
from devstrap.core.models.catalog import DefaultsSetting
from devstrap.core.models.receipt import Receipt

logger = logging.getLogger(__name__)

_PLATFORM_NAMES = {"darwin": "macOS"}


def platform_label(platform: str) -> str:
    """Display name for a ``sys.platform`` prefix; unknown names pass through."""
    return _PLATFORM_NAMES.get(platform, platform)


def check_platform(ctx: ProvisionContext) -> Iterator[Receipt]:
    """Refuse to run anywhere but the catalog's platform."""
    expected = ctx.catalog.platform
    label = platform_label(expected)

    if not ctx.platform.startswith(expected):
        receipt = Receipt.failure(
            step="platform",
            target=ctx.platform,
            error=f"expected {expected}, running on {ctx.platform}",
            return_code=1,
        )
        receipt.metadata["message"] = f"This script is designed for {label} only"
        yield receipt
        return

    ctx.reporter.info(f"Starting {label} Developer Environment Bootstrap...")
    ctx.reporter.line()
    yield Receipt.present(step="platform", target=ctx.platform)


def command_line_tools(ctx: ProvisionContext) -> Iterator[Receipt]:
    """Ensure Xcode Command Line Tools, or stop with a pending receipt.

    The installer is a GUI dialog that completes after this process
    exits, so a fresh install ends the run.  The operator re-runs once
    it is done.
    """
    ctx.reporter.info("Checking for Command Line Tools...")

    if ctx.macos.command_line_tools_installed():
        ctx.reporter.success("Command Line Tools already installed")
        yield Receipt.present(step="command-line-tools", target="xcode-select")
        return

    if ctx.dry_run:
        ctx.reporter.info("[dry-run] Would install Command Line Tools")
        yield Receipt.skip(step="command-line-tools", target="xcode-select", reason="dry-run")
        return

    ctx.reporter.info("Installing Command Line Tools...")
    receipt = ctx.macos.install_command_line_tools()
    if receipt.failed:
        yield receipt
        return

    ctx.reporter.warning("Please complete the Command Line Tools installation and re-run this script")
    yield Receipt.pending(
        step="command-line-tools",
        target="xcode-select",
        reason="Command Line Tools installer launched",
    )


def macos_settings(ctx: ProvisionContext) -> Iterator[Receipt]:
    """Optionally write the catalog's preference defaults."""
    catalog = ctx.catalog
    ctx.reporter.line()

    if not ctx.prompter.confirm("apply_macos_settings", "Do you want to apply recommended macOS settings?"):
        yield Receipt.skip(step="macos-settings", reason="declined")
        return

    ctx.reporter.info("Applying macOS settings...")

    settings = list(catalog.macos_defaults)
    screenshots = ctx.expand(catalog.screenshots_dir) if catalog.screenshots_dir else None
    if screenshots is not None:
        settings.append(
            DefaultsSetting(
                domain="com.apple.screencapture",
                key="location",
                type="string",
                value=str(screenshots),
            )
        )

    if ctx.dry_run:
        for setting in settings:
            ctx.reporter.info(f"[dry-run] Would set {setting.domain} {setting.key}={setting.value_arg()}")
        yield Receipt.skip(step="macos-settings", reason="dry-run")
        return

    failures = 0
    if screenshots is not None:
        screenshots.mkdir(parents=True, exist_ok=True)

    for setting in settings:
        receipt = ctx.macos.write_default(setting)
        failures += receipt.failed
        yield receipt

    for app in catalog.restart_apps:
        receipt = ctx.macos.restart_app(app)
        failures += receipt.failed
        yield receipt

    if failures:
        ctx.reporter.warning(f"macOS settings applied with {failures} error(s)")
    else:
        ctx.reporter.success("macOS settings applied")
