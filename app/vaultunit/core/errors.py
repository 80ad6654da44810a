"""Exceptions raised by the transfer engine.

Structural and configuration errors always abort an invocation.
Per-item errors abort it only when the offending item is required;
otherwise the item is dropped and processing continues.
"""

from typing import Any


class VaultUnitError(Exception):
    """Base exception for transfer errors.

    Attributes:
        details: Context of the failure (paths, data type, versions).
    """

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.details: dict[str, Any] = details

    def __str__(self) -> str:
        message = super().__str__()
        if not self.details:
            return message
        extra = ", ".join(f"{key}={value}" for key, value in self.details.items())
        return f"{message} ({extra})"


class InvalidPathSpecError(VaultUnitError):
    """Raised when a context entry cannot be turned into a path item."""


class UnknownDataTypeError(VaultUnitError):
    """Raised when no vault directory is registered for a data type."""


class VaultDirMissingError(VaultUnitError):
    """Raised when a registered vault directory does not exist."""


class HomeDirMissingError(VaultUnitError):
    """Raised when the home directory does not exist."""


class SymlinkEscapesRootError(VaultUnitError):
    """Raised when a symlink resolves outside the item's root."""


class MissingSourceError(VaultUnitError):
    """Raised when an item's source does not exist."""


class MissingLinkedSourceError(VaultUnitError):
    """Raised when a recorded symlink target is absent from the vault."""


class UnsupportedEntryTypeError(VaultUnitError):
    """Raised when a source is neither a directory nor a regular file."""


class DestinationCreateError(VaultUnitError):
    """Raised when a destination directory or link cannot be created."""


class UpgradeRequiredError(VaultUnitError):
    """Raised when a vault was written by a newer format version."""


class UnknownActionError(VaultUnitError):
    """Raised when the requested action is neither export nor import."""


class UnknownContextItemError(VaultUnitError):
    """Raised when the invocation context has an unexpected top-level key."""
