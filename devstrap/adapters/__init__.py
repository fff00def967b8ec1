"""Adapters — bindings for the external tools devstrap drives.

Public re-exports for convenient access.
"""

from devstrap.adapters.base import Adapter, PackageManager
from devstrap.adapters.mock import MockPackageManager, ScriptedRunner
from devstrap.adapters.registry import AdapterRegistry
from devstrap.adapters.shell.command import CommandResult, CommandRunner

__all__ = [
    "Adapter",
    "AdapterRegistry",
    "CommandResult",
    "CommandRunner",
    "MockPackageManager",
    "PackageManager",
    "ScriptedRunner",
]
