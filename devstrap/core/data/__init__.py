"""
Packaged data files.

``catalog.yml`` is the default provisioning catalog, read by
``devstrap.core.config.loader.load_catalog`` when no path is given.
"""

from __future__ import annotations

from pathlib import Path

DATA_DIR = Path(__file__).parent
DEFAULT_CATALOG_PATH = DATA_DIR / "catalog.yml"
