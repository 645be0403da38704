#!/usr/bin/env python3
"""
Main CLI entry point for optikit
"""

from pathlib import Path

import typer

from optikit import __version__
from optikit.commands import build, clean, devices, generate, project, rollback
from optikit.commands import version as version_cmd
from optikit.config.settings import load_config
from optikit.context import AppContext
from optikit.utils import output
from optikit.utils.logging import setup_logging

app = typer.Typer(
    name="optikit",
    help="Helper CLI for Flutter projects: clean, build, version, scaffold and roll back.",
    no_args_is_help=True,
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"optikit version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    dry_run: bool = typer.Option(
        False, "--dry-run", envvar="OPTIKIT_DRY_RUN", help="Show what would run without changing anything"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", envvar="OPTIKIT_VERBOSE", help="Enable debug logging"),
    show_version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show the optikit version"
    ),
):
    """
    optikit - helper for Flutter mobile-app projects

    [bold]Examples:[/bold]

    Clean the project and fetch packages again:
        [cyan]optikit clean-flutter[/cyan]

    Bump the minor version:
        [cyan]optikit version bump minor[/cyan]

    Preview an iOS clean without running anything:
        [cyan]optikit --dry-run clean-ios --repo-update[/cyan]
    """
    root = Path.cwd()
    config = load_config(cwd=root)
    setup_logging(verbose or config.verbose)

    app_ctx = AppContext(config=config, project_root=root, dry_run=dry_run)
    ctx.obj = app_ctx

    if dry_run:
        output.warning("DRY-RUN MODE: no commands will be executed and no files will change")
        ctx.call_on_close(app_ctx.journal.display_summary)


def _register(module_app: typer.Typer) -> None:
    for command in module_app.registered_commands:
        app.registered_commands.append(command)


for _module in (clean, build, version_cmd, project, rollback, devices):
    _register(_module.app)

app.add_typer(version_cmd.version_app, name="version")
app.add_typer(generate.app, name="generate")


def run():
    """Entry point for the CLI"""
    app()


if __name__ == "__main__":
    run()
