"""Filesystem primitives used by the transfer pipelines."""

from vaultunit.filesystem.copy import CopyService

__all__ = ["CopyService"]
