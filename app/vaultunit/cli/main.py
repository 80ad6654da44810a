"""Main CLI application entry point.

Defines the Typer application and global options.
"""

from pathlib import Path
from typing import Annotated

import typer

from vaultunit import __version__
from vaultunit.cli.commands import config, status, transfer
from vaultunit.utils.formatting import configure_logging

# Create main Typer app
app = typer.Typer(
    name="vaultunit",
    help="Back up and restore home directory paths to a versioned vault.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"vaultunit version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            help="Settings file (default: ~/.config/vaultunit/config.toml).",
        ),
    ] = None,
) -> None:
    """vaultunit - back up and restore home directory paths.

    Copies configured paths between a home directory and per data type
    vault directories, recording symlinks so they can be recreated.
    """
    configure_logging(verbose=verbose, quiet=quiet)

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config"] = config_path


# Register commands
app.command("export")(transfer.export_paths)
app.command("import")(transfer.import_paths)
app.command("run")(transfer.run_action)
app.command("status")(status.show_status)
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
