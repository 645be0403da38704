"""Shared command helpers."""

from pathlib import Path

from ..context import AppContext
from ..utils import output


def remove_with_backup(app_ctx: AppContext, path: Path, label: str) -> None:
    """Snapshot `path` (when auto backup is on), trim that folder's snapshots, then delete it."""
    if not path.exists():
        output.info(f"{label} does not exist, skipping removal.")
        return

    output.info(f"Removing {label}...")
    if app_ctx.config.auto_backup:
        backups = app_ctx.backups()
        backups.create_backup(path)
        backups.cleanup_backups(path.parent, app_ctx.config.backup_retention_count)

    if app_ctx.dry_run:
        app_ctx.journal.log_file_operation("Delete file", str(path))
        return

    path.unlink()
    output.success(f"{label} removed.")


def run_step(executor, command: str, start: str, done: str, cwd=None) -> str:
    output.info(start)
    result = executor.run(command, cwd=cwd)
    output.success(done)
    return result
