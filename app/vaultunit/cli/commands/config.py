"""Settings commands.

Shows the effective transfer settings and writes a default settings file.
"""

from typing import Annotated

import typer

from vaultunit.core.paths import get_settings_path
from vaultunit.core.settings import (
    SettingsError,
    UnitSettings,
    require_settings,
    save_settings,
)
from vaultunit.utils.formatting import console, create_table, print_error, print_success

app = typer.Typer(
    help="Show or initialize transfer settings.",
    no_args_is_help=True,
)


@app.command()
def show(ctx: typer.Context) -> None:
    """Show the effective settings."""
    obj = ctx.obj or {}
    path = obj.get("config") or get_settings_path()
    settings = require_settings(path)

    table = create_table(f"Settings ({path})", "Key", "Value")
    for key, value in settings.model_dump().items():
        table.add_row(key, str(value))
    console.print(table)


@app.command()
def init(
    ctx: typer.Context,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing settings file."),
    ] = False,
) -> None:
    """Write a settings file with the default values."""
    obj = ctx.obj or {}
    path = obj.get("config") or get_settings_path()

    if path.exists() and not force:
        print_error(f"Settings file already exists: {path} (use --force to overwrite)")
        raise typer.Exit(code=1)

    try:
        saved = save_settings(UnitSettings(), path)
    except SettingsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    print_success(f"Settings written to {saved}")
