"""`optikit rollback`: list snapshots or restore one by number."""

from datetime import datetime
from typing import Optional

import typer

from ..context import get_app_context
from ..exceptions import BackupIndexError
from ..services.backup_service import list_indexed_backups
from ..utils import output
from ..utils.error_handling import handle_cli_error
from ..utils.output import console

app = typer.Typer()


def format_time_ago(moment: datetime, now: Optional[datetime] = None) -> str:
    """Coarse age of `moment`: 42s ago, 5m ago, 3h ago, 2d ago."""
    seconds = int(((now or datetime.now()) - moment).total_seconds())
    if seconds < 60:
        return f"{seconds}s ago"
    if seconds < 3600:
        return f"{seconds // 60}m ago"
    if seconds < 86400:
        return f"{seconds // 3600}h ago"
    return f"{seconds // 86400}d ago"


@app.command("rollback")
@handle_cli_error("managing backups")
def rollback(
    ctx: typer.Context,
    restore: Optional[int] = typer.Option(None, "--restore", "-r", help="Restore backup by index number"),
):
    """List and restore files from optikit backups."""
    app_ctx = get_app_context(ctx)
    root = app_ctx.project_root

    if restore is None:
        _show_backups(root)
        return

    try:
        chosen = app_ctx.backups().restore_index(root, restore)
    except BackupIndexError as e:
        output.error(e.message)
        output.info(f"Please choose a number between 1 and {e.available}")
        raise typer.Exit(1) from None

    output.success(f"Backup from {chosen.entry.timestamp:%Y-%m-%d %H:%M:%S} restored successfully!")


def _show_backups(root) -> None:
    output.info("Searching for OptiKit backups...")
    listing = list_indexed_backups(root)

    if not listing:
        output.warning("No backups found in this project.")
        output.info("Backups are created automatically when files are modified.")
        return

    console.print(f"\n[bold]Found {len(listing)} backup(s):[/bold]")

    current = None
    for row in listing:
        if row.original_path != current:
            current = row.original_path
            console.print(f"\n[bold cyan]{current}[/bold cyan]")
        entry = row.entry
        console.print(
            f"[dim]  [{row.index}][/dim] {entry.timestamp:%Y-%m-%d %H:%M:%S} "
            f"[dim]({format_time_ago(entry.timestamp)}, {entry.size / 1024:.2f} KB)[/dim]"
        )

    console.print()
    output.rule()
    console.print("[dim]To restore a backup, run:[/dim]")
    console.print("  optikit rollback --restore <number>")
    output.rule()
