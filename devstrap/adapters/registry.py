"""
Adapter registry — package managers by name.

Catalog groups name their package manager ('brew', 'brew-cask', 'pip');
the sequencer resolves that name here.  Tests register
``MockPackageManager`` instances under the same names.
"""

from __future__ import annotations

import logging
from typing import Any

from devstrap.adapters.base import PackageManager

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """Central registry of package managers."""

    def __init__(self) -> None:
        self._managers: dict[str, PackageManager] = {}

    def register(self, manager: PackageManager) -> None:
        """Register a package manager under its ``name``."""
        name = manager.name
        if name in self._managers:
            logger.warning("Overwriting existing package manager: %s", name)
        self._managers[name] = manager
        logger.debug("Registered package manager: %s", name)

    def get(self, name: str) -> PackageManager | None:
        return self._managers.get(name)

    def manager_status(self) -> dict[str, dict[str, Any]]:
        """Availability of every registered package manager, for ``devstrap check``."""
        status = {}
        for name, manager in self._managers.items():
            try:
                available = manager.is_available()
            except Exception:
                available = False
            status[name] = {
                "name": name,
                "available": available,
                "type": manager.__class__.__name__,
            }
        return status
