"""Invocation context file I/O.

The invocation context is read from a JSON (.json) or TOML (.toml)
file. Its content is validated later, when the operation runs.
"""

import json
import tomllib
from pathlib import Path
from typing import Any


class ContextError(Exception):
    """Base exception for context file errors."""


class ContextNotFoundError(ContextError):
    """Raised when the context file is not found."""


class ContextParseError(ContextError):
    """Raised when the context file cannot be parsed."""


def load_context(path: Path) -> dict[str, Any]:
    """Load an invocation context from a JSON or TOML file.

    Files ending in .toml are read as TOML, anything else as JSON.

    Args:
        path: Path to the context file.

    Returns:
        The context mapping.

    Raises:
        ContextNotFoundError: If the file doesn't exist.
        ContextParseError: If the syntax is invalid or the top level is not a mapping.
        ContextError: If the file cannot be read.
    """
    if not path.is_file():
        raise ContextNotFoundError(f"Context file not found: {path}")

    try:
        if path.suffix == ".toml":
            with open(path, "rb") as f:
                data: object = tomllib.load(f)
        else:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
    except (tomllib.TOMLDecodeError, json.JSONDecodeError) as e:
        raise ContextParseError(f"Invalid context syntax: {e}") from e
    except OSError as e:
        raise ContextError(f"Failed to read context: {e}") from e

    if not isinstance(data, dict):
        raise ContextParseError(f"Context must be a mapping, got {type(data).__name__}")
    return data


def require_context(path: Path) -> dict[str, Any]:
    """Load a context file or exit with a helpful error message.

    Raises:
        typer.Exit: If the context cannot be loaded.
    """
    import typer

    from vaultunit.utils.formatting import print_error

    try:
        return load_context(path)
    except ContextError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
