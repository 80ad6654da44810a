"""Conversion of invocation context entries into path items."""

import os
from typing import Any

from pydantic import ValidationError

from vaultunit.core.errors import InvalidPathSpecError
from vaultunit.models.context import ItemSpec
from vaultunit.models.item import PathItem


def resolve_item(entry: Any, home: str) -> PathItem:
    """Turn one context entry into a PathItem anchored at home.

    Args:
        entry: A bare path string or a record with at least "path".
        home: Canonical home directory.

    Returns:
        PathItem with full_path = join(home, path).

    Raises:
        InvalidPathSpecError: If the entry has another shape, or its path is
            empty, absolute or leads out of home.
    """
    if isinstance(entry, str):
        spec = ItemSpec(path=entry)
    elif isinstance(entry, dict):
        try:
            spec = ItemSpec.model_validate(entry)
        except ValidationError as e:
            raise InvalidPathSpecError("Invalid item record", item=entry, reason=e) from e
    else:
        raise InvalidPathSpecError("Unexpected path type", item=entry)

    if not spec.path:
        raise InvalidPathSpecError("Invalid data (path)", item=entry)
    if os.path.isabs(spec.path):
        raise InvalidPathSpecError("Path must be relative to home", item=entry)
    if os.path.normpath(spec.path).split(os.sep)[0] == os.pardir:
        raise InvalidPathSpecError("Path leaves the home directory", item=entry)

    return PathItem.create(
        spec.path,
        home,
        required=spec.required,
        overwrite=spec.overwrite,
    )


def resolve_items(value: Any, home: str) -> list[PathItem]:
    """Turn the value of one data type into a list of path items.

    Args:
        value: A single path string or a list of strings and records.
        home: Canonical home directory.

    Raises:
        InvalidPathSpecError: If the value or one of its entries is invalid.
    """
    if isinstance(value, str):
        return [resolve_item(value, home)]
    if isinstance(value, list):
        return [resolve_item(entry, home) for entry in value]
    raise InvalidPathSpecError("Expected a path or a list of paths", item=value)
