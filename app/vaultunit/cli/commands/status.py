"""Status command implementation.

Shows the format version and recorded symlinks of a vault directory.
"""

import json
from pathlib import Path
from typing import Annotated

import typer

from vaultunit.core.links import LinkIndex
from vaultunit.core.settings import require_settings
from vaultunit.core.version import VersionGate, VersionStatus
from vaultunit.utils.formatting import (
    console,
    create_table,
    print_error,
    print_info,
    print_warning,
)


def show_status(
    ctx: typer.Context,
    vault_dir: Annotated[
        Path,
        typer.Argument(help="Vault directory of one data type."),
    ],
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON."),
    ] = False,
) -> None:
    """Show vault format version and link index."""
    obj = ctx.obj or {}
    settings = require_settings(obj.get("config"))

    if not vault_dir.is_dir():
        print_error(f"Vault dir doesn't exist: {vault_dir}")
        raise typer.Exit(code=1)

    root = str(vault_dir)
    gate = VersionGate(root, current=settings.format_version, prefix=settings.marker_prefix)
    version = gate.read()
    status = gate.status(version)
    links = LinkIndex.load(root, prefix=settings.marker_prefix)

    if json_output:
        data = {
            "vault": root,
            "version": version,
            "current_version": gate.current,
            "status": status.value,
            "links": {path: record.to_dict() for path, record in links.items()},
        }
        console.print_json(json.dumps(data))
        return

    style = status.value
    console.print(
        f"Vault [bold]{root}[/bold]: format version {version} "
        f"([{style}]{status.value}[/{style}], current {gate.current})"
    )
    if status == VersionStatus.FUTURE:
        print_warning("This vault was written by a newer version; upgrade before importing.")

    if not len(links):
        print_info("No symlinks recorded.")
        return

    table = create_table("Recorded Symlinks", "Path", "Target", "Stored As")
    for path, record in links.items():
        table.add_row(path, record.target, record.target_path)
    console.print(table)
