"""Import pipeline: restore home paths from a vault directory.

The vault's format marker selects the protocol:

- newer than current: refuse with UpgradeRequiredError.
- older than current (or absent): legacy fallback, the whole vault
  tree is update-copied onto the first item.
- current: expand items through the link index (recreating symlinks
  and queueing their targets), then copy every surviving item back.
"""

import logging
import os
from collections.abc import Mapping, Sequence
from typing import Any

from vaultunit.core.errors import (
    DestinationCreateError,
    InvalidPathSpecError,
    MissingLinkedSourceError,
    MissingSourceError,
    UnsupportedEntryTypeError,
    UpgradeRequiredError,
    VaultUnitError,
)
from vaultunit.core.links import LinkIndex, get_links_path
from vaultunit.core.vault import TransferEnvironment, settle
from vaultunit.core.version import VersionStatus, get_version_path
from vaultunit.filesystem.copy import CopyService
from vaultunit.models.item import (
    ItemResult,
    LinkRecord,
    Outcome,
    PathItem,
    dropped,
    failure,
    included,
)

logger = logging.getLogger(__name__)


def restore_symlink(
    item: PathItem,
    record: LinkRecord,
    copier: CopyService,
    overwrite: bool,
) -> VaultUnitError | None:
    """Recreate the link of an item pointing at its recorded raw target.

    An existing link at the location is replaced; an existing file only
    when overwrite is enabled.

    Returns:
        None on success, otherwise the error describing the failure.
    """
    dst_dir = os.path.dirname(item.full_path)
    if not copier.make_dirs(dst_dir):
        return DestinationCreateError(
            "Can't recreate tree to required item",
            path=item.path,
            dst_dir=dst_dir,
        )

    occupied = copier.exists(item.full_path) and not copier.is_symlink(item.full_path)
    if occupied and not overwrite:
        return DestinationCreateError(
            "Destination exists and overwrite is disabled",
            path=item.full_path,
        )

    if not copier.symlink(record.target, item.full_path):
        return DestinationCreateError(
            "Can't create symlink",
            path=item.full_path,
            target=record.target,
        )
    return None


def expand_links(
    items: Sequence[PathItem],
    vault_root: str,
    links: LinkIndex,
    copier: CopyService,
    default_overwrite: bool,
) -> tuple[list[ItemResult], list[PathItem]]:
    """Attach vault sources to items, following recorded symlinks.

    Items present in the vault are included with their source set.
    Absent items are skipped; if the link index has a record for one,
    the link is recreated in home and the link target becomes an
    additional item to copy. The target is queued even when an optional
    link cannot be recreated. Processing stops at the first failure of
    a required item.

    Args:
        items: Requested destinations under home.
        vault_root: Vault directory of the data type.
        links: Link index of the vault directory.
        copier: Filesystem primitives.
        default_overwrite: Overwrite policy for items without their own flag.

    Returns:
        Tuple of (results for the requested items, derived linked items).
    """
    results: list[ItemResult] = []
    linked_items: list[PathItem] = []

    for item in items:
        src = os.path.join(vault_root, item.path)
        if copier.exists(src):
            results.append(included(item.with_source(src)))
            continue

        skipped = item.skipped()
        record = links.get(item.path)
        if record is None:
            logger.debug("No symlink for %s", item.path)
            error = MissingSourceError("No required source item", path=src)
            results.append(failure(skipped, error))
            if item.required:
                break
            continue

        logger.debug("There is a symlink for %s", item.path)
        linked_src = os.path.join(vault_root, record.target_path)
        if not copier.exists(linked_src):
            error = MissingLinkedSourceError(
                "No linked source item",
                path=linked_src,
                link=item.path,
                target=record.target_path,
            )
            results.append(failure(skipped, error))
            if item.required:
                break
            continue

        overwrite = item.overwrite if item.overwrite is not None else default_overwrite
        link_error = restore_symlink(item, record, copier, overwrite)
        if link_error is not None:
            results.append(failure(skipped, link_error))
            if item.required:
                break
        else:
            results.append(dropped(skipped, f"restored as symlink to {record.target}"))

        linked = item.relocate(record.target_path).with_source(linked_src)
        logger.debug("Symlink target path is %s", linked.full_path)
        linked_items.append(linked)

    return results, linked_items


def materialize(
    items: Sequence[PathItem],
    default_overwrite: bool,
    copier: CopyService,
) -> list[ItemResult]:
    """Copy items from their vault sources to their home destinations.

    Directories are merged into the destination regardless of the
    overwrite policy. A file replaces an existing destination only when
    overwrite is enabled; otherwise the destination is kept as is.
    Stops at the first failure of a required item.
    """
    results: list[ItemResult] = []
    for item in items:
        if item.skip or item.src is None:
            results.append(dropped(item, "skipped"))
            continue

        overwrite = item.overwrite if item.overwrite is not None else default_overwrite
        src = item.src
        dst = item.full_path
        dst_dir = dst if copier.is_dir(src) else os.path.dirname(dst)

        if not copier.make_dirs(dst_dir):
            error = DestinationCreateError(
                "Can't recreate tree to required item",
                path=item.path,
                dst_dir=dst_dir,
            )
            results.append(failure(item, error))
            if item.required:
                break
            continue

        if copier.is_dir(src):
            copier.copy_tree(copier.canonicalize(src), dst)
        elif copier.is_file(src):
            if os.path.lexists(dst):
                if not overwrite:
                    results.append(dropped(item, "destination exists, overwrite disabled"))
                    continue
                copier.remove_file(dst)
            copier.copy_file(src, dst)
        else:
            error = UnsupportedEntryTypeError("No operation done or file found", path=src)
            results.append(
                ItemResult(item=item, outcome=Outcome.DROPPED, error=error, reason=str(error))
            )
            continue

        results.append(included(item))
    return results


class Importer:
    """Runs the import pipeline for one data type at a time.

    Attributes:
        _env: Home directory, vault directories, settings and copier.
    """

    def __init__(self, env: TransferEnvironment) -> None:
        """Initialize the Importer.

        Args:
            env: Transfer environment shared with the export pipeline.
        """
        self._env = env

    def import_items(
        self,
        data_type: str,
        items: Sequence[PathItem],
        location: Mapping[str, Any] | None = None,
    ) -> list[PathItem]:
        """Restore items from the vault directory of a data type.

        Args:
            data_type: Registered data type (e.g. "data", "bin").
            items: Desired destinations under the home directory.
            location: The home mapping the items came from; its options
                block provides the per-call overwrite policy.

        Returns:
            Items that were copied, including derived symlink targets.

        Raises:
            UnknownDataTypeError: If the data type has no vault directory.
            VaultDirMissingError: If the vault directory does not exist.
            UpgradeRequiredError: If the vault was written by a newer format.
            VaultUnitError: Per-item errors of required items.
        """
        logger.debug("From vault %s, %d item(s), location %s", data_type, len(items), location)
        copier = self._env.copier
        root = self._env.vault_root(data_type)
        default_overwrite = self._env.default_overwrite(location or {})
        links = self._env.link_index(root)

        gate = self._env.version_gate(root)
        version = gate.read()
        status = gate.status(version)
        if status == VersionStatus.FUTURE:
            raise UpgradeRequiredError(
                "Can't restore from newer unit version, upgrade vault",
                expected=gate.current,
                actual=version,
            )
        if status == VersionStatus.LEGACY:
            return self.restore_legacy(root, items)

        results, linked_items = expand_links(items, root, links, copier, default_overwrite)
        work = settle(results, "import") + linked_items
        restored = settle(materialize(work, default_overwrite, copier), "import")
        logger.info("Imported %d item(s) of %s from %s", len(restored), data_type, root)
        return restored

    def restore_legacy(self, root: str, items: Sequence[PathItem]) -> list[PathItem]:
        """Restore a vault written before the link index format existed.

        The whole vault directory is update-copied onto the first
        item's destination; per-item and symlink handling is skipped.

        Raises:
            InvalidPathSpecError: If there are no items.
            DestinationCreateError: If the destination cannot be created.
        """
        logger.debug("Restoring from old unit version: %s", root)
        if not items:
            raise InvalidPathSpecError("There should be at least 1 item", vault=root)

        copier = self._env.copier
        first = items[0]
        if not copier.make_dirs(first.full_path):
            raise DestinationCreateError("Can't create directory", dir=first.full_path)

        prefix = self._env.settings.marker_prefix
        markers = (
            os.path.basename(get_version_path(root, prefix)),
            os.path.basename(get_links_path(root, prefix)),
        )
        copier.copy_tree(root, first.full_path, update=True, exclude=markers)
        return [first]
