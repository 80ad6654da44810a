"""Data models for vaultunit.

This module exports the core data structures used throughout the application.
"""

from vaultunit.models.context import ItemSpec, TransferOptions
from vaultunit.models.item import (
    ItemResult,
    LinkRecord,
    Outcome,
    PathItem,
    dropped,
    failure,
    included,
)

__all__ = [
    "ItemResult",
    "ItemSpec",
    "LinkRecord",
    "Outcome",
    "PathItem",
    "TransferOptions",
    "dropped",
    "failure",
    "included",
]
