"""Pydantic models for invocation context entries.

The invocation context is loosely typed: items may be bare path
strings or records with flags. These models validate a single record
and an options block once, at resolution time.
"""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


class ItemSpec(BaseModel):
    """Structured item record from the invocation context.

    Attributes:
        path: Path relative to the home directory.
        required: Abort the whole operation if the item cannot be transferred.
        overwrite: Per-item override of the default overwrite policy.
    """

    model_config = ConfigDict(extra="ignore")

    path: Annotated[str, Field(description="Path relative to home")]
    required: Annotated[bool, Field(description="Failure is fatal")] = False
    overwrite: Annotated[
        bool | None,
        Field(description="Replace existing destination files on import"),
    ] = None


class TransferOptions(BaseModel):
    """Options block, either per call (home.options) or global (options).

    Attributes:
        overwrite: Default overwrite policy, None when not given.
    """

    model_config = ConfigDict(extra="ignore")

    overwrite: Annotated[
        bool | None,
        Field(description="Default overwrite policy"),
    ] = None
