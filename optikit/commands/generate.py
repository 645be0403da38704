"""`optikit generate` commands."""

import typer

from ..context import get_app_context
from ..templates import generate_module
from ..utils.error_handling import handle_cli_error

app = typer.Typer(help="Generate boilerplate code")


@app.command("module")
@handle_cli_error("generating module")
def module(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Module name (lowercase letters, digits, underscores)"),
):
    """Generate a module with bloc, event, state, screen, import and factory files."""
    app_ctx = get_app_context(ctx)
    generate_module(app_ctx.project_root, name, dry_run=app_ctx.dry_run, journal=app_ctx.journal)
