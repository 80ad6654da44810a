"""Vault format version marker.

Each vault directory carries a one-line marker holding the format
version it was written with. Import uses it to choose between the
current protocol and the legacy whole-tree fallback.
"""

import logging
import os
from enum import Enum

from vaultunit.core.settings import CURRENT_FORMAT_VERSION, DEFAULT_MARKER_PREFIX

logger = logging.getLogger(__name__)

VERSION_SUFFIX = ".unit.version"


class VersionStatus(str, Enum):
    """Relation of a stored version to the current format.

    Attributes:
        LEGACY: Marker absent or older than current; use the legacy fallback.
        CURRENT: Marker matches the current format.
        FUTURE: Written by a newer tool; the vault cannot be restored.
    """

    LEGACY = "legacy"
    CURRENT = "current"
    FUTURE = "future"


def get_version_path(root: str, prefix: str = DEFAULT_MARKER_PREFIX) -> str:
    """Get the version marker file path for a vault directory."""
    return os.path.join(root, prefix + VERSION_SUFFIX)


class VersionGate:
    """Reads and writes the format marker of one vault directory.

    Attributes:
        root: Vault directory.
        current: Format version written by this tool.
        prefix: Hidden marker file prefix.
    """

    def __init__(
        self,
        root: str,
        current: int = CURRENT_FORMAT_VERSION,
        prefix: str = DEFAULT_MARKER_PREFIX,
    ) -> None:
        self.root = root
        self.current = current
        self.prefix = prefix

    @property
    def path(self) -> str:
        """Path of the marker file."""
        return get_version_path(self.root, self.prefix)

    def read(self) -> int:
        """Return the stored version, 0 if missing or unparsable."""
        try:
            with open(self.path, encoding="utf-8") as f:
                content = f.read().strip()
        except FileNotFoundError:
            return 0
        except OSError as e:
            logger.warning("Unable to read version marker %s: %s", self.path, e)
            return 0

        try:
            version = int(content)
        except ValueError:
            logger.warning("Unparsable version marker %s: %r", self.path, content[:20])
            return 0
        return max(version, 0)

    def write(self) -> None:
        """Stamp the vault with the current format version.

        Raises:
            OSError: If the marker cannot be written.
        """
        with open(self.path, "w", encoding="utf-8") as f:
            f.write(str(self.current))

    def status(self, version: int | None = None) -> VersionStatus:
        """Classify a stored version against the current format.

        Args:
            version: Version to classify. If None, reads the marker.
        """
        if version is None:
            version = self.read()
        if version > self.current:
            return VersionStatus.FUTURE
        if version < self.current:
            return VersionStatus.LEGACY
        return VersionStatus.CURRENT
