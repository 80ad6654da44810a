"""Export pipeline: copy home paths into a vault directory.

The pipeline is three stages over the item list:

1. externalize_links - replace symlinked items by their targets and
   record the link relationship.
2. filter_existing - drop skipped and missing sources.
3. materialize - copy surviving items into the vault.

Each stage stops at the first failure of a required item, so nothing
after it is touched. The link index and version marker are written
after a successful run.
"""

import logging
import os
from collections.abc import Mapping, Sequence
from typing import Any

from vaultunit.core.errors import (
    DestinationCreateError,
    MissingSourceError,
    SymlinkEscapesRootError,
    UnsupportedEntryTypeError,
)
from vaultunit.core.vault import TransferEnvironment, settle
from vaultunit.filesystem.copy import CopyService
from vaultunit.models.item import (
    ItemResult,
    LinkRecord,
    PathItem,
    dropped,
    failure,
    included,
)

logger = logging.getLogger(__name__)


def externalize_links(
    items: Sequence[PathItem],
    home: str,
    copier: CopyService,
) -> tuple[list[ItemResult], dict[str, LinkRecord]]:
    """Dereference symlinked items.

    A symlink whose canonical target lies inside the item's root is
    recorded and the item is rewritten to point at the target, so the
    target is copied in place of the link. A link escaping the root
    fails required items and skips the others.

    Args:
        items: Resolved items.
        home: Canonical home directory target paths are relative to.
        copier: Filesystem primitives.

    Returns:
        Tuple of (per-item results, link records keyed by original path).
    """
    results: list[ItemResult] = []
    records: dict[str, LinkRecord] = {}

    for item in items:
        if not copier.is_symlink(item.full_path):
            results.append(included(item))
            continue

        logger.debug("Process symlink %s", item.full_path)
        if not copier.is_descendant(item.full_path, item.root_path):
            error = SymlinkEscapesRootError(
                "Required path does not belong to its root dir",
                path=item.full_path,
            )
            results.append(failure(item.skipped(), error))
            if item.required:
                break
            continue

        target = copier.read_link(item.full_path)
        canonical = copier.canonicalize(item.full_path)
        target_path = copier.relative_path(canonical, home)
        records[item.path] = LinkRecord(target=target, target_path=target_path)
        logger.debug("Symlink %s -> %s (stored as %s)", item.path, target, target_path)

        results.append(included(item.relocate(target_path, canonical)))

    return results, records


def filter_existing(items: Sequence[PathItem], copier: CopyService) -> list[ItemResult]:
    """Drop skipped items and items whose source does not exist."""
    results: list[ItemResult] = []
    for item in items:
        if item.skip:
            results.append(dropped(item, "skipped"))
        elif not copier.exists(item.full_path):
            error = MissingSourceError("Required path does not exist", path=item.full_path)
            results.append(failure(item, error))
            if item.required:
                break
        else:
            results.append(included(item))
    return results


def materialize(
    items: Sequence[PathItem],
    vault_root: str,
    copier: CopyService,
) -> list[ItemResult]:
    """Copy items into the vault under their relative paths.

    Directories are update-copied (only absent or outdated files are
    written); files are copied with their metadata. Any other entry type
    fails required items and is skipped otherwise.
    """
    results: list[ItemResult] = []
    for item in items:
        dst = os.path.join(vault_root, item.path)
        dst_dir = os.path.dirname(dst)
        logger.debug("Copy %s -> %s", item.full_path, dst)

        if not copier.make_dirs(dst_dir):
            error = DestinationCreateError("Can't create destination in vault", path=dst_dir)
            results.append(failure(item, error))
            if item.required:
                break
            continue

        if copier.is_dir(item.full_path):
            copier.copy_tree(item.full_path, dst, update=True)
        elif copier.is_file(item.full_path):
            copier.copy_file(item.full_path, dst)
        else:
            error = UnsupportedEntryTypeError("No handler for this entry type", path=item.full_path)
            results.append(failure(item, error))
            if item.required:
                break
            continue

        results.append(included(item))
    return results


class Exporter:
    """Runs the export pipeline for one data type at a time.

    Attributes:
        _env: Home directory, vault directories, settings and copier.
    """

    def __init__(self, env: TransferEnvironment) -> None:
        """Initialize the Exporter.

        Args:
            env: Transfer environment shared with the import pipeline.
        """
        self._env = env

    def export(
        self,
        data_type: str,
        items: Sequence[PathItem],
        location: Mapping[str, Any] | None = None,
    ) -> list[PathItem]:
        """Copy items into the vault directory of a data type.

        Args:
            data_type: Registered data type (e.g. "data", "bin").
            items: Items resolved against the home directory.
            location: The home mapping the items came from.

        Returns:
            Items that were copied, with symlinked items rewritten to
            their targets.

        Raises:
            UnknownDataTypeError: If the data type has no vault directory.
            VaultDirMissingError: If the vault directory does not exist.
            VaultUnitError: Per-item errors of required items.
        """
        logger.debug("To vault %s, %d item(s), location %s", data_type, len(items), location)
        copier = self._env.copier
        root = self._env.vault_root(data_type)
        links = self._env.link_index(root)

        results, records = externalize_links(items, self._env.home, copier)
        for path, record in records.items():
            links.add(path, record)

        resolved = settle(results, "export")
        existing = settle(filter_existing(resolved, copier), "export")
        copied = settle(materialize(existing, root, copier), "export")

        links.save()
        self._env.version_gate(root).write()
        logger.info("Exported %d item(s) of %s to %s", len(copied), data_type, root)
        return copied
