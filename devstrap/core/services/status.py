"""
Provisioning status — what a run would find already present.

Read-only: only the query side of each check runs.  Backs the
``devstrap check`` command.
"""

from __future__ import annotations

import logging
from typing import Any

from devstrap.core.engine.context import ProvisionContext

logger = logging.getLogger(__name__)


def provisioning_status(ctx: ProvisionContext) -> dict[str, Any]:
    """Presence of every catalog item on this machine.

    Returns:
        {
            "platform": {"current": str, "expected": str, "ok": bool},
            "command_line_tools": bool,
            "homebrew": bool,
            "managers": {name: {"name", "available", "type"}},
            "groups": [{"id", "title", "manager", "available",
                        "packages": [{"name", "installed"}], "missing"}],
            "oh_my_zsh": bool,
            "shell_plugins": [{"name", "installed"}],
            "git": {"user.name": str, "user.email": str},
            "ssh_key": bool,
            "missing": int,
        }
    """
    catalog = ctx.catalog
    missing = 0

    managers = ctx.registry.manager_status()

    groups: list[dict[str, Any]] = []
    for group in catalog.package_groups:
        manager = ctx.registry.get(group.manager)
        available = manager is not None and managers[group.manager]["available"]
        packages = [
            {"name": name, "installed": bool(available and manager.is_installed(name))}
            for name in group.names
        ]
        group_missing = sum(1 for p in packages if not p["installed"])
        missing += group_missing
        groups.append({
            "id": group.id,
            "title": group.title,
            "manager": group.manager,
            "available": available,
            "packages": packages,
            "missing": group_missing,
        })

    plugins = [
        {"name": p.name, "installed": ctx.zsh.plugin_dir(p.name).is_dir()}
        for p in catalog.shell_plugins
    ]
    missing += sum(1 for p in plugins if not p["installed"])

    oh_my_zsh = ctx.zsh.is_installed()
    homebrew = ctx.brew.is_available()
    clt = ctx.macos.command_line_tools_installed()
    missing += (not oh_my_zsh) + (not homebrew) + (not clt)

    result = {
        "platform": {
            "current": ctx.platform,
            "expected": catalog.platform,
            "ok": ctx.platform.startswith(catalog.platform),
        },
        "command_line_tools": clt,
        "homebrew": homebrew,
        "managers": managers,
        "groups": groups,
        "oh_my_zsh": oh_my_zsh,
        "shell_plugins": plugins,
        "git": {
            "user.name": ctx.git.get_global("user.name"),
            "user.email": ctx.git.get_global("user.email"),
        },
        "ssh_key": ctx.expand(catalog.ssh_key_path).is_file(),
        "missing": missing,
    }
    logger.info("Status: %d catalog items missing", missing)
    return result
