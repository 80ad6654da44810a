"""Transfer item models.

This module defines the data structures threaded through the export
and import pipelines: the normalized path item, the symlink record
stored in a vault's link index, and the per-item stage result.
"""

import os
from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vaultunit.core.errors import VaultUnitError


@dataclass(frozen=True, slots=True)
class PathItem:
    """One logical transfer unit anchored to a root directory.

    Attributes:
        path: Path relative to the root (unique per data type).
        full_path: Absolute path, always join(root_path, path) after resolution.
        root_path: Directory the item is anchored to (the home directory).
        required: If True, failing to locate or produce the item is fatal.
        overwrite: Per-item override of the default overwrite policy.
        skip: Item must not be copied but still needs bookkeeping.
        src: Resolved source location inside the vault (import only).
    """

    path: str
    full_path: str
    root_path: str
    required: bool = False
    overwrite: bool | None = None
    skip: bool = False
    src: str | None = None

    def __post_init__(self) -> None:
        """Validate item data after initialization."""
        if not self.path:
            msg = "Item path cannot be empty"
            raise ValueError(msg)

    @classmethod
    def create(
        cls,
        path: str,
        root_path: str,
        *,
        required: bool = False,
        overwrite: bool | None = None,
    ) -> "PathItem":
        """Create an item whose full path is derived from its root."""
        return cls(
            path=path,
            full_path=os.path.join(root_path, path),
            root_path=root_path,
            required=required,
            overwrite=overwrite,
        )

    def relocate(self, path: str, full_path: str | None = None) -> "PathItem":
        """Return a copy pointing at another path under the same root."""
        if full_path is None:
            full_path = os.path.join(self.root_path, path)
        return replace(self, path=path, full_path=full_path)

    def with_source(self, src: str) -> "PathItem":
        """Return a copy with the vault source attached and skip cleared."""
        return replace(self, src=src, skip=False)

    def skipped(self) -> "PathItem":
        """Return a copy excluded from copying."""
        return replace(self, skip=True)


@dataclass(frozen=True, slots=True)
class LinkRecord:
    """Symlink relationship recorded for an item at export time.

    Attributes:
        target: Raw link target as stored on disk (relative or absolute).
        target_path: Canonical target, relative to the home directory.
    """

    target: str
    target_path: str

    def to_dict(self) -> dict[str, str]:
        """Serialize to the link index JSON shape."""
        return {"target": self.target, "target_path": self.target_path}

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "LinkRecord":
        """Deserialize from the link index JSON shape.

        Raises:
            ValueError: If a field is missing or not a string.
        """
        target = data.get("target")
        target_path = data.get("target_path")
        if not isinstance(target, str) or not isinstance(target_path, str):
            msg = f"Invalid link record: {data!r}"
            raise ValueError(msg)
        return cls(target=target, target_path=target_path)


class Outcome(str, Enum):
    """What a pipeline stage decided for one item.

    Attributes:
        INCLUDED: Item continues to the next stage.
        DROPPED: Item is left out; processing continues.
        FAILED: Item failed and is required; the pipeline aborts.
    """

    INCLUDED = "included"
    DROPPED = "dropped"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class ItemResult:
    """Result of one pipeline stage for a single item.

    Attributes:
        item: The (possibly rewritten) item.
        outcome: Stage decision.
        error: The error that caused a DROPPED or FAILED outcome, if any.
        reason: Short human-readable note for logs.
    """

    item: PathItem
    outcome: Outcome
    error: "VaultUnitError | None" = None
    reason: str | None = None

    @property
    def included(self) -> bool:
        """Check if the item continues to the next stage."""
        return self.outcome == Outcome.INCLUDED


def included(item: PathItem) -> ItemResult:
    """Build an INCLUDED result."""
    return ItemResult(item=item, outcome=Outcome.INCLUDED)


def dropped(item: PathItem, reason: str) -> ItemResult:
    """Build a DROPPED result with no error attached."""
    return ItemResult(item=item, outcome=Outcome.DROPPED, reason=reason)


def failure(item: PathItem, error: "VaultUnitError") -> ItemResult:
    """Build the result of a per-item error.

    Required items fail; optional items are dropped with the error kept
    for logging.
    """
    outcome = Outcome.FAILED if item.required else Outcome.DROPPED
    return ItemResult(item=item, outcome=outcome, error=error, reason=str(error))
