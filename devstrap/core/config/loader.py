"""
Configuration loader — reads the catalog and answer files into models.

The catalog is YAML validated against the pydantic ``Catalog`` schema.
The answers file is a flat YAML mapping of prompt keys to canned
answers, used to run the sequence without a terminal.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from devstrap.core.data import DEFAULT_CATALOG_PATH
from devstrap.core.models.catalog import Catalog

logger = logging.getLogger(__name__)

CATALOG_ENV_VAR = "DEVSTRAP_CATALOG"


class ConfigError(Exception):
    """Raised when a catalog or answers file is invalid or missing."""


def resolve_catalog_path(path: Path | None = None) -> Path:
    """Pick the catalog file: explicit path > $DEVSTRAP_CATALOG > packaged default."""
    if path is not None:
        return path
    env_path = os.environ.get(CATALOG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CATALOG_PATH


def _read_yaml_mapping(path: Path) -> dict[str, Any]:
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")
    return data


def load_catalog(path: Path | None = None) -> Catalog:
    """Load and validate a provisioning catalog.

    Args:
        path: Explicit catalog path. If None, uses $DEVSTRAP_CATALOG or
            the packaged default.

    Returns:
        Validated Catalog model.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    path = resolve_catalog_path(path)
    logger.debug("Loading catalog from %s", path)

    data = _read_yaml_mapping(path)

    try:
        catalog = Catalog.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid catalog {path}: {e}") from e

    logger.info(
        "Loaded catalog with %d packages in %d groups",
        sum(len(g.packages) for g in catalog.package_groups),
        len(catalog.package_groups),
    )
    return catalog


def load_answers(path: Path) -> dict[str, str]:
    """Load canned prompt answers.

    Values are stringified, so ``generate_ssh_key: no`` (which YAML reads
    as False) is stored as ``"False"`` and still parses as a negative
    confirmation.
    """
    data = _read_yaml_mapping(path)
    answers = {str(k): str(v) for k, v in data.items() if v is not None}
    logger.debug("Loaded %d canned answers from %s", len(answers), path)
    return answers
