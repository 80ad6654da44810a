"""CLI commands for vaultunit.

This package contains all subcommand implementations.
"""

from vaultunit.cli.commands import config, status, transfer

__all__ = ["config", "status", "transfer"]
