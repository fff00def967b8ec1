"""
Domain models — Pydantic types for devstrap.

All models are re-exported here for convenient access:

    from devstrap.core.models import Catalog, Descriptor, PackageGroup, Receipt
"""

from devstrap.core.models.catalog import (
    Catalog,
    DefaultsSetting,
    Descriptor,
    PackageGroup,
    ShellPlugin,
    Summary,
)
from devstrap.core.models.receipt import Receipt, ReceiptStatus

__all__ = [
    # catalog.py
    "Catalog",
    "DefaultsSetting",
    "Descriptor",
    "PackageGroup",
    # receipt.py
    "Receipt",
    "ReceiptStatus",
    "ShellPlugin",
    "Summary",
]
