"""Utility modules for vaultunit.

This module exports commonly used utility functions.
"""

from vaultunit.utils.formatting import (
    configure_logging,
    console,
    create_table,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)

__all__ = [
    "configure_logging",
    "console",
    "create_table",
    "err_console",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
]
