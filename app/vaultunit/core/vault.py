"""Shared pieces of the export and import pipelines.

Provides the transfer environment, vault root lookup, overwrite
policy layering, and settlement of per-item stage results.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from vaultunit.core.errors import (
    InvalidPathSpecError,
    UnknownDataTypeError,
    UnsupportedEntryTypeError,
    VaultDirMissingError,
)
from vaultunit.core.links import LinkIndex
from vaultunit.core.settings import UnitSettings
from vaultunit.core.version import VersionGate
from vaultunit.filesystem.copy import CopyService
from vaultunit.models.context import TransferOptions
from vaultunit.models.item import ItemResult, Outcome, PathItem

logger = logging.getLogger(__name__)

OPTIONS_KEY = "options"


@dataclass(frozen=True)
class TransferEnvironment:
    """Everything a pipeline needs besides its item list.

    Attributes:
        home: Canonical home directory.
        vault_dirs: Vault directory registered per data type.
        settings: Marker prefix, format version and default overwrite.
        copier: Filesystem primitives.
        options: Global options block from the invocation context.
    """

    home: str
    vault_dirs: Mapping[str, str]
    settings: UnitSettings = field(default_factory=UnitSettings)
    copier: CopyService = field(default_factory=CopyService)
    options: TransferOptions = field(default_factory=TransferOptions)

    def vault_root(self, data_type: str) -> str:
        """Return the vault directory registered for a data type.

        Raises:
            UnknownDataTypeError: If no directory is registered.
            VaultDirMissingError: If the directory does not exist.
        """
        root = self.vault_dirs.get(data_type)
        if not root:
            raise UnknownDataTypeError("Unknown data type", data_type=data_type)
        if not self.copier.is_dir(root):
            raise VaultDirMissingError("Vault dir doesn't exist", dir=root)
        return root

    def link_index(self, root: str) -> LinkIndex:
        """Load the link index of a vault directory."""
        return LinkIndex.load(root, prefix=self.settings.marker_prefix)

    def version_gate(self, root: str) -> VersionGate:
        """Create the version gate of a vault directory."""
        return VersionGate(
            root,
            current=self.settings.format_version,
            prefix=self.settings.marker_prefix,
        )

    def default_overwrite(self, location: Mapping[str, Any]) -> bool:
        """Resolve the overwrite policy for items without their own flag.

        The per-call options of the location win over the global
        options, which win over the settings file.
        """
        for candidate in (parse_options(location.get(OPTIONS_KEY)), self.options):
            if candidate.overwrite is not None:
                return candidate.overwrite
        return self.settings.overwrite


def parse_options(value: Any) -> TransferOptions:
    """Validate an options block; None means no options.

    Raises:
        InvalidPathSpecError: If the block is not a valid mapping.
    """
    if value is None:
        return TransferOptions()
    if not isinstance(value, Mapping):
        raise InvalidPathSpecError("Options must be a mapping", options=value)
    try:
        return TransferOptions.model_validate(dict(value))
    except ValidationError as e:
        raise InvalidPathSpecError("Invalid options", options=value, reason=e) from e


def settle(results: Iterable[ItemResult], stage: str) -> list[PathItem]:
    """Collect the items that passed a stage.

    Dropped items are logged; the first failed item aborts the run.

    Args:
        results: Stage results in item order.
        stage: Stage name for log messages.

    Returns:
        Items with an INCLUDED outcome, in order.

    Raises:
        VaultUnitError: The error of the first FAILED result.
    """
    passed: list[PathItem] = []
    for result in results:
        if result.outcome == Outcome.FAILED and result.error is not None:
            raise result.error
        if result.outcome == Outcome.INCLUDED:
            passed.append(result.item)
        elif isinstance(result.error, UnsupportedEntryTypeError):
            logger.warning("%s: no handler for %s: %s", stage, result.item.path, result.reason)
        else:
            logger.debug("%s: dropping %s: %s", stage, result.item.path, result.reason)
    return passed
