"""Persistent symlink index of a vault directory.

The index maps the original relative path of an exported symlink to
the link's raw target and its dereferenced location, so that import
can recreate the link instead of duplicating file content.

File format (hidden, one per vault directory)::

    {"<relative-path>": {"target": "...", "target_path": "..."}, ...}
"""

import json
import logging
import os
from collections.abc import Iterator
from pathlib import Path
from tempfile import NamedTemporaryFile

from vaultunit.core.settings import DEFAULT_MARKER_PREFIX
from vaultunit.models.item import LinkRecord

logger = logging.getLogger(__name__)

LINKS_SUFFIX = ".links"


def get_links_path(root: str, prefix: str = DEFAULT_MARKER_PREFIX) -> str:
    """Get the link index file path for a vault directory."""
    return os.path.join(root, prefix + LINKS_SUFFIX)


class LinkIndex:
    """In-memory link index bound to one vault directory.

    Loaded once per pipeline invocation, mutated in memory and written
    back at most once at the end of an export.

    Attributes:
        root: Vault directory holding the index file.
        prefix: Hidden marker file prefix.
    """

    def __init__(
        self,
        root: str,
        records: dict[str, LinkRecord] | None = None,
        prefix: str = DEFAULT_MARKER_PREFIX,
    ) -> None:
        """Initialize the LinkIndex.

        Args:
            root: Vault directory holding the index file.
            records: Initial records keyed by original relative path.
            prefix: Hidden marker file prefix.
        """
        self.root = root
        self.prefix = prefix
        self._records: dict[str, LinkRecord] = dict(records or {})

    @property
    def path(self) -> str:
        """Path of the index file."""
        return get_links_path(self.root, self.prefix)

    @classmethod
    def load(cls, root: str, prefix: str = DEFAULT_MARKER_PREFIX) -> "LinkIndex":
        """Read the index of a vault directory.

        Any read or parse failure yields an empty index; malformed
        records are skipped.

        Args:
            root: Vault directory.
            prefix: Hidden marker file prefix.

        Returns:
            LinkIndex with the stored records.
        """
        index = cls(root, prefix=prefix)
        try:
            with open(index.path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.debug("No link index in %s", root)
            return index
        except (OSError, ValueError) as e:
            logger.warning("Unable to read link index %s: %s", index.path, e)
            return index

        if not isinstance(data, dict):
            logger.warning("Ignoring link index %s: not a JSON object", index.path)
            return index

        for path, value in data.items():
            if not isinstance(value, dict):
                logger.warning("Skipping malformed link record for %s", path)
                continue
            try:
                index._records[path] = LinkRecord.from_dict(value)
            except ValueError as e:
                logger.warning("Skipping malformed link record for %s: %s", path, e)
        return index

    def add(self, path: str, record: LinkRecord) -> None:
        """Insert or replace the record for a path."""
        self._records[path] = record

    def get(self, path: str) -> LinkRecord | None:
        """Return the record for a path, or None if absent."""
        return self._records.get(path)

    def save(self) -> bool:
        """Write the whole index to the vault directory.

        Does nothing when the index is empty, so no empty artifact is
        created. The file is replaced atomically.

        Returns:
            True if a file was written.

        Raises:
            OSError: If the file cannot be written.
        """
        if not self._records:
            return False

        data = {path: record.to_dict() for path, record in self._records.items()}
        tmp_path: Path | None = None
        try:
            with NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=self.root,
                delete=False,
                suffix=".tmp",
            ) as f:
                tmp_path = Path(f.name)
                json.dump(data, f, indent=4, sort_keys=True)
                f.write("\n")
            os.replace(str(tmp_path), self.path)
        except OSError:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink()
            raise
        return True

    def items(self) -> Iterator[tuple[str, LinkRecord]]:
        """Iterate over (path, record) pairs sorted by path."""
        yield from sorted(self._records.items())

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, path: object) -> bool:
        return path in self._records
