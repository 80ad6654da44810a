"""Filesystem copy primitives.

Handles file and tree copies with best-effort metadata preservation,
directory creation, and symlink inspection for the transfer pipelines.
Metadata failures are logged and reported, never raised.
"""

import logging
import os
import shutil
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)


class CopyService:
    """Copy, mkdir and link operations used by the export/import pipelines.

    All paths are plain strings; methods that modify the filesystem
    return True on success and log a warning on failure.
    """

    # -------------------------------------------------------------------------
    # Inspection
    # -------------------------------------------------------------------------

    def exists(self, path: str) -> bool:
        """Check if a path exists, following symlinks."""
        return os.path.exists(path)

    def is_dir(self, path: str) -> bool:
        """Check if a path is a directory, following symlinks."""
        return os.path.isdir(path)

    def is_file(self, path: str) -> bool:
        """Check if a path is a regular file, following symlinks."""
        return os.path.isfile(path)

    def is_symlink(self, path: str) -> bool:
        """Check if a path is a symbolic link (dangling or not)."""
        return os.path.islink(path)

    def read_link(self, path: str) -> str:
        """Return the raw target of a symbolic link.

        Raises:
            OSError: If the path is not a symlink.
        """
        return os.readlink(path)

    def canonicalize(self, path: str) -> str:
        """Resolve a path through all symbolic links."""
        return os.path.realpath(path)

    def relative_path(self, path: str, start: str) -> str:
        """Express a path relative to a start directory."""
        return os.path.relpath(path, start)

    def is_descendant(self, path: str, root: str) -> bool:
        """Check if the canonical path lies inside the canonical root.

        The comparison is done on whole path components, so
        /home/user2 is not a descendant of /home/user.

        Args:
            path: Path to test (links are resolved).
            root: Root directory (links are resolved).

        Returns:
            True if path equals root or is located below it.
        """
        tested = Path(self.canonicalize(path)).parts
        pivot = Path(self.canonicalize(root)).parts
        if len(pivot) > len(tested):
            return False
        return tested[: len(pivot)] == pivot

    # -------------------------------------------------------------------------
    # Modification
    # -------------------------------------------------------------------------

    def make_dirs(self, path: str) -> bool:
        """Create a directory including missing parents.

        Args:
            path: Directory to create.

        Returns:
            True if the directory exists afterwards.
        """
        if os.path.isdir(path):
            return True
        try:
            os.makedirs(path, exist_ok=True)
        except OSError as e:
            logger.warning("Cannot create directory %s: %s", path, e)
            return False
        return True

    def remove_file(self, path: str) -> bool:
        """Remove a file or symlink if present.

        Directories are never removed.

        Returns:
            True if nothing is left at the path.
        """
        if not os.path.lexists(path):
            return True
        if os.path.isdir(path) and not os.path.islink(path):
            logger.warning("Refusing to remove directory %s", path)
            return False
        try:
            os.unlink(path)
        except OSError as e:
            logger.warning("Cannot remove %s: %s", path, e)
            return False
        return True

    def symlink(self, target: str, path: str) -> bool:
        """Create a symbolic link at path pointing to target.

        An existing link or file at path is replaced.

        Args:
            target: Raw link target (stored as given).
            path: Location of the link.

        Returns:
            True if the link was created.
        """
        if os.path.islink(path) and os.readlink(path) == target:
            return True
        if not self.remove_file(path):
            return False
        try:
            os.symlink(target, path)
        except OSError as e:
            logger.warning("Cannot create symlink %s -> %s: %s", path, target, e)
            return False
        return True

    def copy_file(self, src: str, dst: str) -> bool:
        """Copy a regular file preserving mode, ownership and timestamps.

        If dst is a directory, the file is copied into it under its own
        name. Any existing destination entry is removed first. Links at
        src are followed.

        Args:
            src: Source file.
            dst: Destination file or directory.

        Returns:
            True if content and all metadata were copied.
        """
        target = os.path.join(dst, os.path.basename(src)) if os.path.isdir(dst) else dst
        ok = self.remove_file(target)

        try:
            stat = os.stat(src)
            shutil.copyfile(src, target)
        except OSError as e:
            logger.warning("Copy failed: %s -> %s: %s", src, target, e)
            return False

        try:
            os.chmod(target, stat.st_mode & 0o7777)
        except OSError as e:
            logger.warning("Cannot preserve permissions of %s: %s", target, e)
            ok = False
        try:
            os.chown(target, stat.st_uid, stat.st_gid)
        except OSError as e:
            logger.warning("Cannot preserve ownership of %s: %s", target, e)
            ok = False
        try:
            os.utime(target, ns=(stat.st_atime_ns, stat.st_mtime_ns))
        except OSError as e:
            logger.warning("Cannot preserve timestamps of %s: %s", target, e)
            ok = False

        return ok

    def copy_tree(
        self,
        src: str,
        dst: str,
        *,
        update: bool = False,
        exclude: Iterable[str] = (),
    ) -> bool:
        """Merge the contents of src into dst recursively.

        Directories and links are followed. With update=True a file is
        only copied when the destination is absent or not newer than
        the source. Entries that are neither directories nor regular
        files are skipped.

        Args:
            src: Source directory.
            dst: Destination directory (created if absent).
            update: Copy only absent or outdated files.
            exclude: Top-level entry names of src that are not copied.

        Returns:
            True if every entry was copied without warnings.
        """
        if not os.path.isdir(src):
            logger.warning("Not a directory, nothing to copy: %s", src)
            return False
        return self._copy_tree(src, dst, update, frozenset(exclude), set())

    def _copy_tree(
        self,
        src: str,
        dst: str,
        update: bool,
        exclude: frozenset[str],
        visited: set[str],
    ) -> bool:
        """Copy one directory level and recurse into subdirectories."""
        real = os.path.realpath(src)
        if real in visited:
            logger.debug("Directory already copied, skipping cycle: %s", src)
            return True
        visited.add(real)

        if not self.make_dirs(dst):
            return False

        ok = True
        try:
            entries = sorted(os.scandir(src), key=lambda e: e.name)
        except OSError as e:
            logger.warning("Cannot list directory %s: %s", src, e)
            return False

        for entry in entries:
            if entry.name in exclude:
                continue
            src_path = entry.path
            dst_path = os.path.join(dst, entry.name)
            try:
                is_dir = entry.is_dir()
                is_file = entry.is_file()
            except OSError as e:
                logger.warning("Cannot determine type of %s: %s", src_path, e)
                ok = False
                continue

            if is_dir:
                ok = self._copy_tree(src_path, dst_path, update, frozenset(), visited) and ok
            elif is_file:
                if update and not self._is_outdated(src_path, dst_path):
                    continue
                ok = self.copy_file(src_path, dst_path) and ok
            else:
                logger.debug("Skipping unsupported entry: %s", src_path)

        return ok

    def _is_outdated(self, src: str, dst: str) -> bool:
        """Check if dst is absent or not newer than src."""
        try:
            dst_mtime = os.stat(dst).st_mtime_ns
        except OSError:
            return True
        return os.stat(src).st_mtime_ns >= dst_mtime
