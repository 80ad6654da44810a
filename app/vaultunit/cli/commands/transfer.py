"""Export and import commands.

Runs the transfer engine over an invocation context file, moving the
listed home paths into their vault directories or back.
"""

from pathlib import Path
from typing import Annotated

import typer

from vaultunit.core.context import require_context
from vaultunit.core.errors import VaultUnitError
from vaultunit.core.operation import EXIT_CRASH, EXIT_FAILURE, Action, Operation
from vaultunit.core.settings import require_settings
from vaultunit.models.item import PathItem
from vaultunit.utils.formatting import console, create_table, print_error, print_success

ContextArg = Annotated[
    Path,
    typer.Argument(help="Invocation context file (.json or .toml)."),
]
HomeDirOption = Annotated[
    Path,
    typer.Option("--home-dir", "-H", help="Home directory the paths are relative to."),
]
DataDirOption = Annotated[
    Path | None,
    typer.Option("--dir", "-d", help="Vault directory for the 'data' type."),
]
BinDirOption = Annotated[
    Path | None,
    typer.Option("--bin-dir", "-b", help="Vault directory for the 'bin' type."),
]
NameOption = Annotated[
    str | None,
    typer.Option("--name", "-n", help="Application name, used in messages."),
]


def export_paths(
    ctx: typer.Context,
    context_file: ContextArg,
    home_dir: HomeDirOption,
    data_dir: DataDirOption = None,
    bin_dir: BinDirOption = None,
    name: NameOption = None,
) -> None:
    """Copy home paths into the vault."""
    _run(ctx, Action.EXPORT, context_file, home_dir, data_dir, bin_dir, name)


def import_paths(
    ctx: typer.Context,
    context_file: ContextArg,
    home_dir: HomeDirOption,
    data_dir: DataDirOption = None,
    bin_dir: BinDirOption = None,
    name: NameOption = None,
) -> None:
    """Restore home paths from the vault."""
    _run(ctx, Action.IMPORT, context_file, home_dir, data_dir, bin_dir, name)


def run_action(
    ctx: typer.Context,
    context_file: ContextArg,
    action: Annotated[
        str,
        typer.Option("--action", "-a", help="Action to run: export or import."),
    ],
    home_dir: HomeDirOption,
    data_dir: DataDirOption = None,
    bin_dir: BinDirOption = None,
    name: NameOption = None,
) -> None:
    """Run the action selected by name."""
    _run(ctx, action, context_file, home_dir, data_dir, bin_dir, name)


# === Private helper functions ===


def _run(
    ctx: typer.Context,
    action: str | Action,
    context_file: Path,
    home_dir: Path,
    data_dir: Path | None,
    bin_dir: Path | None,
    name: str | None,
) -> None:
    """Load inputs, run the operation and report the outcome."""
    obj = ctx.obj or {}
    settings = require_settings(obj.get("config"))
    context = require_context(context_file)

    vault_dirs = {
        "data": str(data_dir) if data_dir else "",
        "bin": str(bin_dir) if bin_dir else "",
    }
    operation = Operation(str(home_dir), vault_dirs, settings)
    label = name or context_file.stem

    try:
        transferred = operation.execute(context, action)
    except VaultUnitError as e:
        print_error(f"{label}: {e}")
        raise typer.Exit(code=EXIT_FAILURE) from e
    except OSError as e:
        print_error(f"{label}: {e}")
        raise typer.Exit(code=EXIT_CRASH) from e

    if obj.get("verbose"):
        _print_transferred(transferred)

    if not obj.get("quiet"):
        total = sum(len(items) for items in transferred.values())
        verb = "Exported" if Action.parse(action) == Action.EXPORT else "Imported"
        print_success(f"{label}: {verb} {total} item(s) in {len(transferred)} data type(s).")


def _print_transferred(transferred: dict[str, list[PathItem]]) -> None:
    """Display transferred items as a Rich table."""
    table = create_table("Transferred Items", "Type", "Path", "Location")
    for data_type, items in transferred.items():
        for item in items:
            table.add_row(data_type, item.path, item.full_path)
    console.print(table)
