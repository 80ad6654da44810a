"""CLI package for vaultunit.

This package contains the Typer application and all subcommands.
"""

from vaultunit.cli.main import app

__all__ = ["app"]
